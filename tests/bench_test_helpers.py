"""Shared test fixtures for benchmark tests."""

from __future__ import annotations

from pathlib import Path

from blockbench.bench.config import BenchConfig
from blockbench.bench.results import CampaignResult, MetricRecord, RunMetricSet
from blockbench.errors import InvocationError


def make_run(
    index: int,
    metrics: dict[str, tuple[float, int, int]],
) -> RunMetricSet:
    """Create a RunMetricSet from name -> (duration, blocks, instructions)."""
    run = RunMetricSet(index=index)
    for name, (duration, blocks, instructions) in metrics.items():
        run.records.append(
            MetricRecord(
                name=name,
                duration=duration,
                blocks=blocks,
                instructions=instructions,
            )
        )
    return run


def make_campaign(
    runs: list[RunMetricSet],
    *,
    tests: list[str] | None = None,
    warmup: int = 1,
) -> CampaignResult:
    """Create a CampaignResult around the given runs."""
    return CampaignResult(
        project_path="/work/crate",
        tests=tests if tests is not None else sorted({n for r in runs for n in r.names()}),
        runs=runs,
        warmup_run_count=warmup,
        start_time="2026-01-01T12:00:00+0000",
        end_time="2026-01-01T12:05:00+0000",
    )


def metrics_output(blocks: int, instructions: int) -> str:
    """Output of an instrumented test run by cargo."""
    return (
        "running 1 test\n"
        f"Blocks: {blocks}, Instructions: {instructions}\n"
        "test parse_1 ... ok\n\n"
        "test result: ok. 1 passed; 0 failed\n"
    )


class FakeInvoker:
    """Stand-in for TestInvoker that never starts a process.

    *outputs* maps a test id to the text it prints, or to a list of
    texts returned on successive calls.
    """

    def __init__(
        self,
        manifest: str = "",
        outputs: dict[str, str | list[str]] | None = None,
        *,
        manifest_error: bool = False,
    ) -> None:
        self._manifest = manifest
        self._outputs = outputs or {}
        self._manifest_error = manifest_error
        self.calls: list[str] = []
        self.manifest_calls = 0

    def manifest(self) -> str:
        self.manifest_calls += 1
        if self._manifest_error:
            raise InvocationError(["cargo", "test", "--", "--list"], "Listing tests failed")
        return self._manifest

    def run_test(self, test_id: str) -> str:
        self.calls.append(test_id)
        out = self._outputs.get(test_id, "")
        if isinstance(out, list):
            # Call count for this test so far, 1-based.
            n = self.calls.count(test_id)
            return out[min(n, len(out)) - 1]
        return out


def make_config(tmp: str | Path, **kwargs: object) -> BenchConfig:
    """Create a BenchConfig pointing at an existing directory."""
    defaults: dict[str, object] = {
        "project_path": Path(tmp),
        "output_path": Path(tmp) / "out.csv",
        "warmup_run_count": 0,
        "measured_run_count": 1,
    }
    defaults.update(kwargs)
    return BenchConfig(**defaults)  # type: ignore[arg-type]
