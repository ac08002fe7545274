"""Exception types raised by the blockbench pipeline.

Every fatal condition in a campaign is one of these.  A test whose
output simply lacks a metrics line is not an error and never raises.
"""

from __future__ import annotations


class BlockbenchError(Exception):
    """Base class for all blockbench errors."""


class ConfigError(BlockbenchError):
    """The benchmark configuration is invalid (e.g. missing project directory)."""


class InvocationError(BlockbenchError):
    """The external test runner could not be run or its output could not be read."""

    def __init__(self, command: list[str], message: str) -> None:
        self.command = command
        self.message = message
        super().__init__(f"{message} (command: {' '.join(command)})")


class MalformedMetricsError(BlockbenchError):
    """A metrics line was found but its counters are not integers."""

    def __init__(self, line: str) -> None:
        self.line = line
        self.message = f"Unparsable metrics line: {line!r}"
        super().__init__(self.message)
