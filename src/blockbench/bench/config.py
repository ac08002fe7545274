"""Benchmark configuration loading and validation.

Handles:
- The BenchConfig structure passed explicitly through the pipeline.
- Loading settings from a YAML profile.
- Merging CLI options over profile values.
- Validating the final configuration before any test runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from blockbench.errors import ConfigError

log = logging.getLogger("blockbench")

DEFAULT_LIST_COMMAND = "cargo test -- --list"
DEFAULT_TEST_COMMAND = "cargo test {test} -- --exact --nocapture"


# ---------------------------------------------------------------------------
# BenchConfig
# ---------------------------------------------------------------------------


@dataclass
class BenchConfig:
    """Resolved configuration for one benchmark campaign."""

    project_path: Path = field(default_factory=Path.cwd)
    output_path: Path = field(default_factory=lambda: Path("benchmark_results.csv"))
    runs_output_path: Path | None = None  # Optional per-run CSV

    # Iteration control
    warmup_run_count: int = 1  # Passes whose results are discarded
    measured_run_count: int = 5  # Passes that feed the report
    timeout: float | None = None  # Per-invocation timeout; None blocks forever

    # Test selection and naming
    run_marker: str = "1"
    entry_token: str = ": test"
    qualifier_separator: str = "::"

    # Target project's test runner
    list_command: str = DEFAULT_LIST_COMMAND
    test_command: str = DEFAULT_TEST_COMMAND
    include_stderr: bool = False
    env: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.project_path = Path(self.project_path)
        self.output_path = Path(self.output_path)
        if self.runs_output_path is not None:
            self.runs_output_path = Path(self.runs_output_path)

    @property
    def total_run_count(self) -> int:
        """Passes over the test list (warmup + measured)."""
        return self.warmup_run_count + self.measured_run_count


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_config(config: BenchConfig) -> list[ValidationError]:
    """Validate a benchmark configuration.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if not config.project_path.exists():
        errors.append(
            ValidationError(
                field="project_path",
                message=f"Project directory does not exist: {config.project_path}",
            )
        )
    elif not config.project_path.is_dir():
        errors.append(
            ValidationError(
                field="project_path",
                message=f"Project path is not a directory: {config.project_path}",
            )
        )

    if config.warmup_run_count < 0:
        errors.append(
            ValidationError(
                field="warmup_run_count",
                message=f"Warmup runs cannot be negative (got {config.warmup_run_count}).",
            )
        )

    if config.measured_run_count < 1:
        errors.append(
            ValidationError(
                field="measured_run_count",
                message=(
                    f"Need at least 1 measured run (got {config.measured_run_count})."
                ),
            )
        )

    if config.timeout is not None and config.timeout <= 0:
        errors.append(
            ValidationError(
                field="timeout",
                message=f"Timeout must be positive (got {config.timeout}).",
            )
        )

    if not config.run_marker:
        errors.append(
            ValidationError(
                field="run_marker",
                message="Run marker must be non-empty.",
            )
        )

    if not config.entry_token:
        errors.append(
            ValidationError(
                field="entry_token",
                message="Manifest entry token must be non-empty.",
            )
        )

    if not config.list_command.strip():
        errors.append(
            ValidationError(
                field="list_command",
                message="List command must be non-empty.",
            )
        )

    if "{test}" not in config.test_command:
        errors.append(
            ValidationError(
                field="test_command",
                message=(
                    "Test command must contain a '{test}' placeholder "
                    f"(got {config.test_command!r})."
                ),
            )
        )

    if config.output_path.suffix.lower() not in ("", ".csv", ".md", ".json"):
        errors.append(
            ValidationError(
                field="output_path",
                message=(
                    f"Unrecognized report extension '{config.output_path.suffix}'; "
                    f"writing CSV."
                ),
                severity="warning",
            )
        )

    return errors


def check_config(config: BenchConfig) -> None:
    """Log warnings and raise ConfigError if *config* has fatal errors."""
    errors = validate_config(config)
    for w in (e for e in errors if e.severity == "warning"):
        log.warning("Config warning: %s: %s", w.field, w.message)
    fatal = [e for e in errors if e.severity == "error"]
    if fatal:
        messages = [f"  {e.field}: {e.message}" for e in fatal]
        raise ConfigError("Invalid benchmark configuration:\n" + "\n".join(messages))


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------

_PROFILE_KEYS = {
    "project_path",
    "output_path",
    "runs_output_path",
    "warmup_run_count",
    "measured_run_count",
    "timeout",
    "run_marker",
    "entry_token",
    "qualifier_separator",
    "list_command",
    "test_command",
    "include_stderr",
    "env",
}

# YAML reads ``run_marker: 1`` as an int; these keys accept any scalar.
_STRING_KEYS = {
    "project_path",
    "output_path",
    "runs_output_path",
    "run_marker",
    "entry_token",
    "qualifier_separator",
    "list_command",
    "test_command",
}
_INT_KEYS = {"warmup_run_count", "measured_run_count"}


def _coerce_profile_value(key: str, value: Any) -> Any:
    """Convert a profile value to the type BenchConfig expects for *key*.

    Raises:
        ConfigError: If the value cannot stand for that setting.
    """
    if isinstance(value, (dict, list)):
        raise ConfigError(f"Profile '{key}' must be a scalar, got {type(value).__name__}")
    if key in _STRING_KEYS:
        return str(value)
    if key in _INT_KEYS:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"Profile '{key}' must be an integer, got {value!r}")
        return value
    if key == "timeout":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"Profile 'timeout' must be a number of seconds, got {value!r}")
        return float(value)
    if key == "include_stderr" and not isinstance(value, bool):
        raise ConfigError(f"Profile 'include_stderr' must be true or false, got {value!r}")
    return value


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load benchmark settings from a YAML file.

    Profile format::

        project_path: ../my-crate
        output_path: results/bench.csv
        warmup_run_count: 2
        measured_run_count: 10
        run_marker: "1"
        timeout: 300
        env:
          RUSTFLAGS: "-C opt-level=3"

    Returns:
        The parsed YAML as a dict.

    Raises:
        ConfigError: If the file is missing, unreadable, or not a mapping.
    """
    import yaml

    if not profile_path.exists():
        raise ConfigError(f"Profile not found: {profile_path}")

    try:
        data = yaml.safe_load(profile_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in profile {profile_path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Profile must be a YAML mapping, got {type(data).__name__}")

    unknown = sorted(set(data) - _PROFILE_KEYS)
    if unknown:
        raise ConfigError(
            f"Unknown key(s) in profile {profile_path}: {', '.join(unknown)}"
        )

    env = data.get("env")
    if env is not None and not isinstance(env, dict):
        raise ConfigError("Profile 'env' must be a mapping of NAME -> value")

    return data


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> BenchConfig:
    """Build a BenchConfig from profile values and CLI overrides.

    A CLI override wins whenever it is not ``None``.  Environment
    mappings are merged, CLI entries taking precedence.  Profile
    values are converted to the field's type first, so an unquoted
    ``run_marker: 1`` means the string ``"1"``.

    Args:
        profile_data: Parsed YAML profile dict (may be empty).
        cli_overrides: CLI option values keyed by BenchConfig field name.

    Returns:
        The merged BenchConfig.

    Raises:
        ConfigError: If a profile value has the wrong type.
    """
    cli = cli_overrides or {}
    values: dict[str, Any] = {}

    for key in _PROFILE_KEYS - {"env"}:
        if cli.get(key) is not None:
            values[key] = cli[key]
        elif profile_data.get(key) is not None:
            values[key] = _coerce_profile_value(key, profile_data[key])

    env = {str(k): str(v) for k, v in (profile_data.get("env") or {}).items()}
    env.update(cli.get("env") or {})
    values["env"] = env

    return BenchConfig(**values)


def parse_env_pairs(pairs: tuple[str, ...] | list[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` strings into a dict.

    Raises:
        ConfigError: If a pair has no ``=`` or an empty key.
    """
    env: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ConfigError(f"Invalid env pair (expected KEY=VALUE): '{pair}'")
        key, value = pair.split("=", 1)
        key = key.strip()
        if not key:
            raise ConfigError(f"Invalid env pair (empty key): '{pair}'")
        env[key] = value
    return env
