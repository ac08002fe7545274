"""Benchmark campaign execution.

Orchestrates:
1. Configuration validation
2. Discovery of instrumented tests (once per campaign)
3. Warmup passes, whose output is never inspected
4. Measured passes, each producing one RunMetricSet
5. Progress reporting

Every test invocation is timed on its own and runs strictly after the
previous one has finished.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

from blockbench.bench.config import BenchConfig, check_config
from blockbench.bench.discovery import list_instrumented_tests
from blockbench.bench.invoker import TestInvoker
from blockbench.bench.metrics import extract_metrics
from blockbench.bench.names import strip_run_marker
from blockbench.bench.results import CampaignResult, MetricRecord, RunMetricSet

log = logging.getLogger("blockbench")


# ---------------------------------------------------------------------------
# Progress callback
# ---------------------------------------------------------------------------


@dataclass
class BenchProgress:
    """Progress info passed to the callback after each invocation."""

    phase: str  # "warmup" or "measure"
    test: str
    run: int  # 1-based within the phase
    total_runs: int  # passes in this phase
    test_index: int  # 1-based position in discovery order
    tests_total: int
    duration_s: float = 0.0
    has_metrics: bool = False


# Type alias for the progress callback.
ProgressCallback = Any  # Callable[[BenchProgress], None] | None


# ---------------------------------------------------------------------------
# BenchRunner
# ---------------------------------------------------------------------------


class BenchRunner:
    """Executes a benchmark campaign according to a BenchConfig.

    Usage::

        config = BenchConfig(project_path=Path("my-crate"))
        runner = BenchRunner(config)
        campaign = runner.run()
    """

    def __init__(
        self,
        config: BenchConfig,
        invoker: TestInvoker | None = None,
        progress_callback: ProgressCallback = None,
    ) -> None:
        self.config = config
        self.invoker = invoker or TestInvoker(config)
        self.progress: Any = progress_callback or self._default_progress

    def run(self) -> CampaignResult:
        """Validate the configuration and execute the configured campaign.

        Raises:
            ConfigError: If the configuration is invalid.
            InvocationError: If the test runner cannot be used.
            MalformedMetricsError: If a metrics line cannot be parsed.
        """
        check_config(self.config)
        log.info(
            "Starting campaign in %s: %d pass(es) over the test list",
            self.config.project_path,
            self.config.total_run_count,
        )

        campaign = CampaignResult(
            project_path=str(self.config.project_path),
            warmup_run_count=self.config.warmup_run_count,
            start_time=time.strftime("%Y-%m-%dT%H:%M:%S%z"),
        )
        campaign.tests, campaign.runs = self._execute(
            self.config.warmup_run_count,
            self.config.measured_run_count,
        )
        campaign.end_time = time.strftime("%Y-%m-%dT%H:%M:%S%z")
        log.info(
            "Campaign complete: %d measured run(s), %d record(s)",
            campaign.measured_run_count,
            campaign.total_records,
        )
        return campaign

    def execute_campaign(self, warmup_count: int, measured_count: int) -> list[RunMetricSet]:
        """Run warmup passes, then measured passes, over the instrumented tests.

        Returns:
            One RunMetricSet per measured pass, in execution order.
        """
        _, runs = self._execute(warmup_count, measured_count)
        return runs

    def _execute(
        self,
        warmup_count: int,
        measured_count: int,
    ) -> tuple[list[str], list[RunMetricSet]]:
        tests = list_instrumented_tests(self.invoker, self.config)
        if not tests:
            log.warning("No instrumented tests found (run marker '%s')", self.config.run_marker)

        for run_idx in range(warmup_count):
            log.info("Warmup run %d/%d...", run_idx + 1, warmup_count)
            self._warmup_pass(tests, run_idx + 1, warmup_count)

        runs: list[RunMetricSet] = []
        for run_idx in range(measured_count):
            log.info("Measured run %d/%d...", run_idx + 1, measured_count)
            runs.append(self._measured_pass(tests, run_idx + 1, measured_count))

        return tests, runs

    def _warmup_pass(self, tests: list[str], run: int, total_runs: int) -> None:
        for test_idx, test_id in enumerate(tests):
            start = time.monotonic()
            self.invoker.run_test(test_id)
            elapsed = time.monotonic() - start
            self.progress(
                BenchProgress(
                    phase="warmup",
                    test=test_id,
                    run=run,
                    total_runs=total_runs,
                    test_index=test_idx + 1,
                    tests_total=len(tests),
                    duration_s=elapsed,
                )
            )

    def _measured_pass(self, tests: list[str], run: int, total_runs: int) -> RunMetricSet:
        run_set = RunMetricSet(index=run)

        for test_idx, test_id in enumerate(tests):
            start = time.monotonic()
            raw = self.invoker.run_test(test_id)
            elapsed = time.monotonic() - start

            metrics = extract_metrics(raw)
            if metrics is None:
                log.debug("No metrics line in output of %s (run %d)", test_id, run)
            else:
                blocks, instructions = metrics
                run_set.records.append(
                    MetricRecord(
                        name=strip_run_marker(test_id, self.config.run_marker),
                        duration=elapsed,
                        blocks=blocks,
                        instructions=instructions,
                    )
                )

            self.progress(
                BenchProgress(
                    phase="measure",
                    test=test_id,
                    run=run,
                    total_runs=total_runs,
                    test_index=test_idx + 1,
                    tests_total=len(tests),
                    duration_s=elapsed,
                    has_metrics=metrics is not None,
                )
            )

        return run_set

    @staticmethod
    def _default_progress(progress: BenchProgress) -> None:
        """Default progress callback: log one line per invocation."""
        marker = "W" if progress.phase == "warmup" else "M"
        line = (
            f"  {marker}{progress.run}/{progress.total_runs} "
            f"[{progress.test_index}/{progress.tests_total}] "
            f"{progress.test:50s} {progress.duration_s:8.3f}s"
        )
        if progress.phase == "measure" and not progress.has_metrics:
            line += " [no metrics]"
        log.info(line)
