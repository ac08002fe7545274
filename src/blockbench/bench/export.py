"""Report rendering for aggregated benchmark results.

Summary formats (one row per test, in the order supplied):

- CSV: ``Test Name, Duration (s), Blocks, Instructions``.
- Markdown: the same columns as a table, for issues and READMEs.
- JSON: the same rows plus campaign metadata.

The optional per-run CSV is long format: one row per measured run per
test that reported metrics.

Test names are reduced to their display form here, at render time.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path

from blockbench.bench.names import DEFAULT_QUALIFIER_SEPARATOR, display_name
from blockbench.bench.results import AggregatedRecord, CampaignResult, RunMetricSet

log = logging.getLogger("blockbench")

REPORT_HEADER = ["Test Name", "Duration (s)", "Blocks", "Instructions"]


def _format_count(value: float) -> str:
    """Render an averaged count without a spurious ``.0``."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def export_csv(
    records: list[AggregatedRecord],
    *,
    separator: str = DEFAULT_QUALIFIER_SEPARATOR,
) -> str:
    """Export aggregated records as CSV with the fixed report header."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(REPORT_HEADER)

    for r in records:
        writer.writerow(
            [
                display_name(r.name, separator),
                f"{r.duration:.6f}",
                _format_count(r.blocks),
                _format_count(r.instructions),
            ]
        )

    return output.getvalue()


def export_runs_csv(
    runs: list[RunMetricSet],
    *,
    separator: str = DEFAULT_QUALIFIER_SEPARATOR,
) -> str:
    """Export every measured record as long-format CSV.

    Columns: run, Test Name, Duration (s), Blocks, Instructions
    """
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["run", *REPORT_HEADER])

    for run in runs:
        for r in run.records:
            writer.writerow(
                [
                    run.index,
                    display_name(r.name, separator),
                    f"{r.duration:.6f}",
                    r.blocks,
                    r.instructions,
                ]
            )

    return output.getvalue()


# ---------------------------------------------------------------------------
# Markdown export
# ---------------------------------------------------------------------------


def export_markdown(
    records: list[AggregatedRecord],
    campaign: CampaignResult | None = None,
    *,
    separator: str = DEFAULT_QUALIFIER_SEPARATOR,
) -> str:
    """Export aggregated records as a Markdown report."""
    lines: list[str] = []

    lines.append("# Benchmark results")
    lines.append("")
    if campaign is not None:
        lines.append(f"- **Project:** `{campaign.project_path}`")
        lines.append(
            f"- **Runs:** {campaign.measured_run_count} measured + "
            f"{campaign.warmup_run_count} warmup"
        )
        lines.append(f"- **Instrumented tests:** {len(campaign.tests)}")
        lines.append("")

    lines.append("| " + " | ".join(REPORT_HEADER) + " |")
    lines.append("|---|---:|---:|---:|")
    for r in records:
        lines.append(
            f"| {display_name(r.name, separator)} | {r.duration:.6f} | "
            f"{_format_count(r.blocks)} | {_format_count(r.instructions)} |"
        )

    if campaign is not None and campaign.start_time:
        lines.append("")
        lines.append(f"*Generated by blockbench on {campaign.start_time}*")

    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# JSON export
# ---------------------------------------------------------------------------


def export_json(
    records: list[AggregatedRecord],
    campaign: CampaignResult | None = None,
    *,
    separator: str = DEFAULT_QUALIFIER_SEPARATOR,
) -> str:
    """Export aggregated records as JSON.

    With a *campaign*, its metadata and every per-run record are included
    alongside the ``results`` list.
    """
    data: dict[str, object] = campaign.to_dict() if campaign is not None else {}
    rows = []
    for r in records:
        row = r.to_dict()
        row["name"] = display_name(r.name, separator)
        rows.append(row)
    data["results"] = rows
    return json.dumps(data, indent=2) + "\n"


# ---------------------------------------------------------------------------
# File output
# ---------------------------------------------------------------------------


def render_report(
    path: Path,
    records: list[AggregatedRecord],
    campaign: CampaignResult | None = None,
    *,
    separator: str = DEFAULT_QUALIFIER_SEPARATOR,
) -> str:
    """Render *records* in the format implied by *path*'s extension.

    ``.md`` gives Markdown, ``.json`` gives JSON, anything else CSV.
    """
    suffix = path.suffix.lower()
    if suffix == ".md":
        return export_markdown(records, campaign, separator=separator)
    if suffix == ".json":
        return export_json(records, campaign, separator=separator)
    return export_csv(records, separator=separator)


def write_report(path: Path, text: str) -> None:
    """Write an already-rendered report to *path*, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    log.info("Wrote %s", path)
