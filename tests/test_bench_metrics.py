"""Tests for blockbench.bench.metrics — counters line extraction."""

from __future__ import annotations

import re
import unittest
from unittest.mock import patch

from bench_test_helpers import metrics_output

from blockbench.bench.metrics import extract_metrics
from blockbench.errors import MalformedMetricsError


class TestExtractMetrics(unittest.TestCase):
    """Tests for extract_metrics()."""

    def test_well_formed_line(self) -> None:
        self.assertEqual(extract_metrics("Blocks: 12, Instructions: 345"), (12, 345))

    def test_line_embedded_in_cargo_output(self) -> None:
        self.assertEqual(extract_metrics(metrics_output(1843, 29107)), (1843, 29107))

    def test_line_with_surrounding_text(self) -> None:
        raw = "[vm] Blocks: 7, Instructions: 70 (after jit)\n"
        self.assertEqual(extract_metrics(raw), (7, 70))

    def test_first_match_wins(self) -> None:
        raw = "Blocks: 1, Instructions: 2\nBlocks: 3, Instructions: 4\n"
        self.assertEqual(extract_metrics(raw), (1, 2))

    def test_zero_counters(self) -> None:
        self.assertEqual(extract_metrics("Blocks: 0, Instructions: 0"), (0, 0))

    def test_large_counters(self) -> None:
        raw = "Blocks: 123456789012, Instructions: 987654321098765"
        self.assertEqual(extract_metrics(raw), (123456789012, 987654321098765))

    def test_missing_line_returns_none(self) -> None:
        self.assertIsNone(extract_metrics("running 1 test\ntest foo_1 ... ok\n"))

    def test_empty_output_returns_none(self) -> None:
        self.assertIsNone(extract_metrics(""))

    def test_compile_error_output_returns_none(self) -> None:
        raw = "error[E0425]: cannot find value `x` in this scope\n"
        self.assertIsNone(extract_metrics(raw))

    def test_wrong_labels_do_not_match(self) -> None:
        self.assertIsNone(extract_metrics("blocks: 1, instructions: 2"))
        self.assertIsNone(extract_metrics("Blocks: 1 Instructions: 2"))

    def test_negative_numbers_do_not_match(self) -> None:
        self.assertIsNone(extract_metrics("Blocks: -1, Instructions: 2"))

    def test_unicode_decimal_digits_are_accepted(self) -> None:
        raw = "Blocks: \u0e51\u0e52, Instructions: 3"
        self.assertEqual(extract_metrics(raw), (12, 3))

    def test_unparsable_capture_raises(self) -> None:
        loose = re.compile(r"Blocks: (\S+), Instructions: (\S+)")
        with patch("blockbench.bench.metrics.METRICS_PATTERN", loose):
            with self.assertRaises(MalformedMetricsError) as ctx:
                extract_metrics("Blocks: 1x, Instructions: 2")
        self.assertEqual(ctx.exception.line, "Blocks: 1x, Instructions: 2")

    def test_malformed_error_carries_line(self) -> None:
        exc = MalformedMetricsError("Blocks: x, Instructions: y")
        self.assertEqual(exc.line, "Blocks: x, Instructions: y")
        self.assertIn("Unparsable metrics line", str(exc))


if __name__ == "__main__":
    unittest.main()
