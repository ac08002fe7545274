"""Extraction of the embedded counters line from test output.

Instrumented tests print a single line such as::

    Blocks: 1843, Instructions: 29107

somewhere in their output.  Only the first such line is used.
"""

from __future__ import annotations

import re

from blockbench.errors import MalformedMetricsError

METRICS_PATTERN = re.compile(r"Blocks: (\d+), Instructions: (\d+)")


def extract_metrics(raw: str) -> tuple[int, int] | None:
    """Return ``(blocks, instructions)`` from the first metrics line in *raw*.

    Returns ``None`` when the output contains no metrics line; the caller
    treats that test as contributing nothing to the current run.

    Raises:
        MalformedMetricsError: If a metrics line matched but a counter
            could not be converted to an integer.
    """
    match = METRICS_PATTERN.search(raw)
    if match is None:
        return None
    try:
        blocks = int(match.group(1))
        instructions = int(match.group(2))
    except ValueError as exc:
        raise MalformedMetricsError(match.group(0)) from exc
    return blocks, instructions
