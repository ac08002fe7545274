"""Command-line interface for blockbench.

Subcommands:
    blockbench run    Benchmark the instrumented tests of a project
    blockbench list   Print the instrumented tests without running them
"""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Any, Callable

import click

from blockbench import __version__
from blockbench.bench.config import (
    BenchConfig,
    check_config,
    config_from_profile,
    load_profile,
    parse_env_pairs,
)
from blockbench.errors import BlockbenchError, ConfigError
from blockbench.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """blockbench — measure block and instruction counts of instrumented tests."""


def _runner_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that talks to the test runner."""
    options = [
        click.argument(
            "project_path",
            required=False,
            type=click.Path(path_type=Path),
        ),
        click.option(
            "--config",
            "config_path",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            default=None,
            help="YAML profile with benchmark settings.",
        ),
        click.option(
            "--run-marker",
            type=str,
            default=None,
            help="Suffix marking instrumented test variants (default: 1).",
        ),
        click.option(
            "--list-command",
            type=str,
            default=None,
            help="Command that lists the project's tests.",
        ),
        click.option(
            "--test-command",
            type=str,
            default=None,
            help="Command that runs one test; '{test}' is replaced by its name.",
        ),
        click.option(
            "--timeout",
            type=float,
            default=None,
            help="Per-invocation timeout in seconds (default: none).",
        ),
        click.option(
            "--env",
            "env_pairs",
            type=str,
            multiple=True,
            help="KEY=VALUE env var for the test runner (repeatable).",
        ),
        click.option("-v", "--verbose", is_flag=True, help="Show detailed output."),
        click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors."),
        click.option(
            "--log-file",
            type=click.Path(dir_okay=False, path_type=Path),
            default=None,
            help="Also write a DEBUG log to this file.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_config(
    project_path: Path | None,
    config_path: Path | None,
    overrides: dict[str, Any],
    env_pairs: tuple[str, ...],
) -> BenchConfig:
    profile = load_profile(config_path) if config_path else {}
    overrides = dict(overrides)
    overrides["project_path"] = project_path
    overrides["env"] = parse_env_pairs(env_pairs)
    return config_from_profile(profile, cli_overrides=overrides)


def _handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Map blockbench and file errors to exit codes: 2 for config, 1 otherwise."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ConfigError as exc:
            click.echo(f"Error: {exc}", err=True)
            raise SystemExit(2) from exc
        except BlockbenchError as exc:
            click.echo(f"Error: {exc}", err=True)
            raise SystemExit(1) from exc
        except OSError as exc:
            click.echo(f"Error: {exc}", err=True)
            raise SystemExit(1) from exc
        except KeyboardInterrupt:
            click.echo("\nBenchmark interrupted.", err=True)
            raise SystemExit(130)  # noqa: B904

    return wrapper


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command()
@_runner_options
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Summary report (.csv, .md or .json; default: benchmark_results.csv).",
)
@click.option(
    "--runs-output",
    "runs_output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write every measured record to this CSV.",
)
@click.option("--warmup", type=int, default=None, help="Warmup runs (default: 1).")
@click.option("--runs", type=int, default=None, help="Measured runs (default: 5).")
@click.option(
    "--include-stderr",
    is_flag=True,
    default=False,
    help="Search the test's stderr for metrics as well.",
)
@_handle_errors
def run(  # noqa: PLR0913
    project_path: Path | None,
    config_path: Path | None,
    run_marker: str | None,
    list_command: str | None,
    test_command: str | None,
    timeout: float | None,
    env_pairs: tuple[str, ...],
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
    output_path: Path | None,
    runs_output_path: Path | None,
    warmup: int | None,
    runs: int | None,
    include_stderr: bool,
) -> None:
    """Benchmark the instrumented tests of the project at PROJECT_PATH.

    Runs every instrumented test once per warmup run (results
    discarded), then once per measured run, and writes the mean
    duration, block count and instruction count of each test.

    \b
    Examples:
        blockbench run ../my-crate --warmup 2 --runs 10
        blockbench run --config bench.yaml -o report.md
    """
    from blockbench.bench.aggregate import combine
    from blockbench.bench.display import format_summary
    from blockbench.bench.export import export_runs_csv, render_report, write_report
    from blockbench.bench.runner import BenchRunner

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    config = _build_config(
        project_path,
        config_path,
        {
            "output_path": output_path,
            "runs_output_path": runs_output_path,
            "warmup_run_count": warmup,
            "measured_run_count": runs,
            "run_marker": run_marker,
            "list_command": list_command,
            "test_command": test_command,
            "timeout": timeout,
            "include_stderr": include_stderr or None,
        },
        env_pairs,
    )

    campaign = BenchRunner(config).run()
    records = combine(campaign.runs)

    separator = config.qualifier_separator
    report = render_report(config.output_path, records, campaign, separator=separator)
    # The summary is written last so a failed per-run write leaves no report.
    if config.runs_output_path is not None:
        runs_report = export_runs_csv(campaign.runs, separator=separator)
        write_report(config.runs_output_path, runs_report)
    write_report(config.output_path, report)

    click.echo()
    click.echo(format_summary(campaign, records, separator=separator))
    click.echo()
    click.echo(f"Results saved to: {config.output_path}")


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


@main.command("list")
@_runner_options
@_handle_errors
def list_cmd(
    project_path: Path | None,
    config_path: Path | None,
    run_marker: str | None,
    list_command: str | None,
    test_command: str | None,
    timeout: float | None,
    env_pairs: tuple[str, ...],
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Print the instrumented tests of the project at PROJECT_PATH."""
    from blockbench.bench.discovery import list_instrumented_tests
    from blockbench.bench.display import format_test_list
    from blockbench.bench.invoker import TestInvoker

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    config = _build_config(
        project_path,
        config_path,
        {
            "run_marker": run_marker,
            "list_command": list_command,
            "test_command": test_command,
            "timeout": timeout,
        },
        env_pairs,
    )
    check_config(config)

    tests = list_instrumented_tests(TestInvoker(config), config)
    if tests:
        click.echo(format_test_list(tests))
