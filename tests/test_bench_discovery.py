"""Tests for blockbench.bench.discovery — instrumented test discovery."""

from __future__ import annotations

import tempfile
import unittest

from bench_test_helpers import FakeInvoker, make_config

from blockbench.bench.discovery import list_instrumented_tests, parse_manifest
from blockbench.errors import InvocationError

CARGO_MANIFEST = """\
lexer::tests::parse: test
lexer::tests::parse_1: test
lexer::tests::tokenize: test
lexer::tests::tokenize_1: test
parser::tests::expr_2: test
bench_lexer_1: bench

5 tests, 1 benchmark
"""


class TestParseManifest(unittest.TestCase):
    """Tests for parse_manifest()."""

    def test_marker_one_retained(self) -> None:
        self.assertEqual(parse_manifest("foo_1: test"), ["foo_1"])

    def test_other_marker_excluded(self) -> None:
        self.assertEqual(parse_manifest("bar_2: test"), [])

    def test_cargo_manifest(self) -> None:
        self.assertEqual(
            parse_manifest(CARGO_MANIFEST),
            ["lexer::tests::parse_1", "lexer::tests::tokenize_1"],
        )

    def test_preserves_manifest_order(self) -> None:
        text = "z_1: test\na_1: test\nm_1: test\n"
        self.assertEqual(parse_manifest(text), ["z_1", "a_1", "m_1"])

    def test_benchmarks_excluded(self) -> None:
        self.assertEqual(parse_manifest("bench_lexer_1: bench"), [])

    def test_uninstrumented_excluded(self) -> None:
        self.assertEqual(parse_manifest("foo: test"), [])

    def test_line_without_trailing_token_kept_when_marked(self) -> None:
        # Contains the token mid-line but does not end with it.
        self.assertEqual(parse_manifest("foo_1: test (ignored)"), [])
        self.assertEqual(parse_manifest("x: test foo_1"), ["x: test foo_1"])

    def test_empty_manifest(self) -> None:
        self.assertEqual(parse_manifest(""), [])

    def test_blank_and_malformed_lines_dropped(self) -> None:
        text = "\n   \n: test\ngarbage\n_1\nfoo_1: test\n"
        self.assertEqual(parse_manifest(text), ["foo_1"])

    def test_whitespace_around_entry(self) -> None:
        self.assertEqual(parse_manifest("   foo_1: test   "), ["foo_1"])

    def test_duplicates_keep_first(self) -> None:
        text = "a_1: test\nb_1: test\na_1: test\n"
        self.assertEqual(parse_manifest(text), ["a_1", "b_1"])

    def test_custom_marker(self) -> None:
        text = "foo_1: test\nfoo_instr: test\n"
        self.assertEqual(parse_manifest(text, run_marker="instr"), ["foo_instr"])

    def test_custom_entry_token(self) -> None:
        text = "tests/test_x.py::test_a_1 PASSED\ntests/test_x.py::test_a SKIPPED\n"
        self.assertEqual(
            parse_manifest(text, entry_token=" PASSED"),
            ["tests/test_x.py::test_a_1"],
        )

    def test_marker_must_be_whole_token(self) -> None:
        self.assertEqual(parse_manifest("foo_11: test\nfoo_21: test\n"), [])


class TestListInstrumentedTests(unittest.TestCase):
    """Tests for list_instrumented_tests()."""

    def test_uses_invoker_manifest(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config = make_config(tmp)
            invoker = FakeInvoker(manifest=CARGO_MANIFEST)
            tests = list_instrumented_tests(invoker, config)  # type: ignore[arg-type]
        self.assertEqual(tests, ["lexer::tests::parse_1", "lexer::tests::tokenize_1"])
        self.assertEqual(invoker.manifest_calls, 1)
        self.assertEqual(invoker.calls, [])

    def test_config_marker_applied(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config = make_config(tmp, run_marker="2")
            tests = list_instrumented_tests(
                FakeInvoker(manifest=CARGO_MANIFEST), config  # type: ignore[arg-type]
            )
        self.assertEqual(tests, ["parser::tests::expr_2"])

    def test_manifest_failure_propagates(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config = make_config(tmp)
            invoker = FakeInvoker(manifest_error=True)
            with self.assertRaises(InvocationError):
                list_instrumented_tests(invoker, config)  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
