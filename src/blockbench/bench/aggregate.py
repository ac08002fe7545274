"""Combine measured passes into one record per test.

The divisor for every field is the total number of measured runs, even
for a test that produced metrics in only some of them.  A test that
failed to report in half the runs therefore shows roughly half its real
per-run cost.  ``runs_present`` on each result records how many runs
actually contributed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from blockbench.bench.results import AggregatedRecord, RunMetricSet

log = logging.getLogger("blockbench")


@dataclass
class _Totals:
    duration: float = 0.0
    blocks: int = 0
    instructions: int = 0
    runs_present: int = 0


def combine(run_sets: list[RunMetricSet]) -> list[AggregatedRecord]:
    """Average per-run records by canonical name.

    Names keep the order in which they were first seen across
    *run_sets*.  Sums are divided by ``len(run_sets)`` using true
    division, so the count fields of the result are floats.

    Args:
        run_sets: One RunMetricSet per measured pass.

    Returns:
        One AggregatedRecord per distinct name.  Empty if *run_sets*
        is empty.
    """
    total_runs = len(run_sets)
    if total_runs == 0:
        return []

    totals: dict[str, _Totals] = {}
    for run in run_sets:
        for record in run.records:
            entry = totals.setdefault(record.name, _Totals())
            entry.duration += record.duration
            entry.blocks += record.blocks
            entry.instructions += record.instructions
            entry.runs_present += 1

    partial = [name for name, t in totals.items() if t.runs_present < total_runs]
    if partial:
        log.debug(
            "%d test(s) missing from some runs, still averaged over %d runs: %s",
            len(partial),
            total_runs,
            ", ".join(partial),
        )

    return [
        AggregatedRecord(
            name=name,
            duration=t.duration / total_runs,
            blocks=t.blocks / total_runs,
            instructions=t.instructions / total_runs,
            runs_present=t.runs_present,
        )
        for name, t in totals.items()
    ]
