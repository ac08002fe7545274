"""Benchmark result data structures.

Hierarchy::

    CampaignResult (one blockbench invocation)
      -> tests: discovered instrumented test ids
      -> runs: list[RunMetricSet] (measured passes only)
        -> records: list[MetricRecord]

    AggregatedRecord (one per canonical test name, built by
    blockbench.bench.aggregate.combine after the last measured pass)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# Per-test, per-run record
# ---------------------------------------------------------------------------


@dataclass
class MetricRecord:
    """Counters for one test in one measured pass."""

    name: str
    duration: float  # seconds spent inside the test invocation
    blocks: int
    instructions: int

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("MetricRecord name must be non-empty")
        if self.duration < 0 or self.blocks < 0 or self.instructions < 0:
            raise ValueError(
                f"MetricRecord values must be non-negative "
                f"(got duration={self.duration}, blocks={self.blocks}, "
                f"instructions={self.instructions})"
            )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "name": self.name,
            "duration": round(self.duration, 6),
            "blocks": self.blocks,
            "instructions": self.instructions,
        }


# ---------------------------------------------------------------------------
# One measured pass
# ---------------------------------------------------------------------------


@dataclass
class RunMetricSet:
    """All records produced by one measured pass, in discovery order.

    Tests whose output had no metrics line are simply missing.
    """

    index: int  # 1-based measured run number
    records: list[MetricRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def names(self) -> list[str]:
        return [r.name for r in self.records]

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "records": [r.to_dict() for r in self.records],
        }


# ---------------------------------------------------------------------------
# Final per-test summary
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AggregatedRecord:
    """Mean counters for one canonical test name across all measured runs.

    The mean divides by the total number of measured runs, so
    ``runs_present`` may be smaller than the divisor.
    """

    name: str
    duration: float
    blocks: float
    instructions: float
    runs_present: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "name": self.name,
            "duration": round(self.duration, 6),
            "blocks": self.blocks,
            "instructions": self.instructions,
            "runs_present": self.runs_present,
        }


# ---------------------------------------------------------------------------
# Whole campaign
# ---------------------------------------------------------------------------


@dataclass
class CampaignResult:
    """Everything a finished campaign hands to display and export."""

    project_path: str
    tests: list[str] = field(default_factory=list)
    runs: list[RunMetricSet] = field(default_factory=list)
    warmup_run_count: int = 0
    start_time: str = ""
    end_time: str = ""

    @property
    def measured_run_count(self) -> int:
        return len(self.runs)

    @property
    def total_records(self) -> int:
        """Number of (run, test) pairs that produced metrics."""
        return sum(len(r) for r in self.runs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_path": self.project_path,
            "tests": list(self.tests),
            "warmup_run_count": self.warmup_run_count,
            "measured_run_count": self.measured_run_count,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "runs": [r.to_dict() for r in self.runs],
        }
