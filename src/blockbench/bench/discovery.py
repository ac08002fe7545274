"""Discovery of instrumented test variants.

The target project duplicates each test it wants measured and gives the
copy a ``_<marker>`` suffix (``parse_1`` next to ``parse``).  The runner's
manifest lists both; only the marked copies are kept.

A Cargo manifest looks like::

    lexer::tests::parse: test
    lexer::tests::parse_1: test
    bench_lexer: bench

    2 tests, 1 benchmark
"""

from __future__ import annotations

import logging

from blockbench.bench.config import BenchConfig
from blockbench.bench.invoker import TestInvoker
from blockbench.bench.names import MARKER_DELIMITER

log = logging.getLogger("blockbench")


def parse_manifest(
    text: str,
    *,
    entry_token: str = ": test",
    run_marker: str = "1",
) -> list[str]:
    """Return the instrumented test identifiers listed in *text*.

    A line is kept when it contains *entry_token* and the final
    ``_``-delimited piece of its last word equals *run_marker*.  The trailing
    *entry_token* is stripped from kept lines.  Everything else is
    dropped without complaint.  Duplicates keep their first position.
    """
    tests: list[str] = []
    seen: set[str] = set()

    for line in text.splitlines():
        if entry_token not in line:
            continue
        test_id = line.strip()
        if test_id.endswith(entry_token):
            test_id = test_id[: -len(entry_token)].strip()
        words = test_id.split()
        if not words:
            continue
        if words[-1].rsplit(MARKER_DELIMITER, 1)[-1] != run_marker:
            continue
        if test_id in seen:
            continue
        seen.add(test_id)
        tests.append(test_id)

    return tests


def list_instrumented_tests(invoker: TestInvoker, config: BenchConfig) -> list[str]:
    """Query the runner's manifest and filter it to instrumented tests.

    Raises:
        InvocationError: If the manifest cannot be obtained.
    """
    text = invoker.manifest()
    tests = parse_manifest(
        text,
        entry_token=config.entry_token,
        run_marker=config.run_marker,
    )
    log.info("Discovered %d instrumented test(s)", len(tests))
    return tests
