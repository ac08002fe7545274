"""Terminal display of a finished campaign.

No external dependencies.
"""

from __future__ import annotations

from blockbench.bench.names import DEFAULT_QUALIFIER_SEPARATOR, display_name
from blockbench.bench.results import AggregatedRecord, CampaignResult
from blockbench.formatting import (
    format_count,
    format_section_header,
    format_seconds,
    format_table,
)


def format_summary(
    campaign: CampaignResult,
    records: list[AggregatedRecord],
    *,
    separator: str = DEFAULT_QUALIFIER_SEPARATOR,
) -> str:
    """Format the aggregated results of *campaign* for the terminal.

    Tests that did not report metrics in every measured run are flagged
    with ``*`` and explained below the table, since their means are
    still taken over all runs.
    """
    lines: list[str] = []
    runs = campaign.measured_run_count

    lines.append(format_section_header("Benchmark results"))
    lines.append(f"Project: {campaign.project_path}")
    lines.append(f"Runs: {runs} measured + {campaign.warmup_run_count} warmup")
    lines.append(f"Instrumented tests: {len(campaign.tests)} ({len(records)} with metrics)")
    lines.append("")

    if not records:
        lines.append("  No test reported a metrics line.")
        return "\n".join(lines)

    rows: list[list[str]] = []
    partial = 0
    for r in records:
        name = display_name(r.name, separator)
        if r.runs_present < runs:
            name += " *"
            partial += 1
        rows.append(
            [
                name,
                format_seconds(r.duration),
                format_count(r.blocks),
                format_count(r.instructions),
            ]
        )

    lines.append(
        format_table(
            ["Test Name", "Duration", "Blocks", "Instructions"],
            rows,
            alignments=["l", "r", "r", "r"],
            max_width=60,
        )
    )

    if partial:
        lines.append("")
        lines.append(
            f"  * reported metrics in fewer than {runs} run(s); "
            f"averaged over all {runs} run(s)."
        )

    return "\n".join(lines)


def format_test_list(tests: list[str]) -> str:
    """One discovered test identifier per line."""
    return "\n".join(tests)
