"""Tests for blockbench.bench.results — result data structures."""

from __future__ import annotations

import json
import unittest

from bench_test_helpers import make_campaign, make_run

from blockbench.bench.results import AggregatedRecord, MetricRecord, RunMetricSet


class TestMetricRecord(unittest.TestCase):
    """Tests for MetricRecord validation and serialization."""

    def test_valid_record(self) -> None:
        r = MetricRecord(name="parse", duration=0.5, blocks=3, instructions=9)
        self.assertEqual(r.name, "parse")

    def test_empty_name_rejected(self) -> None:
        with self.assertRaises(ValueError):
            MetricRecord(name="", duration=0.5, blocks=3, instructions=9)

    def test_negative_values_rejected(self) -> None:
        with self.assertRaises(ValueError):
            MetricRecord(name="a", duration=-0.1, blocks=0, instructions=0)
        with self.assertRaises(ValueError):
            MetricRecord(name="a", duration=0.0, blocks=-1, instructions=0)
        with self.assertRaises(ValueError):
            MetricRecord(name="a", duration=0.0, blocks=0, instructions=-1)

    def test_zero_values_allowed(self) -> None:
        r = MetricRecord(name="a", duration=0.0, blocks=0, instructions=0)
        self.assertEqual(r.blocks, 0)

    def test_to_dict_rounds_duration(self) -> None:
        r = MetricRecord(name="a", duration=0.12345678, blocks=1, instructions=2)
        self.assertEqual(
            r.to_dict(),
            {"name": "a", "duration": 0.123457, "blocks": 1, "instructions": 2},
        )


class TestRunMetricSet(unittest.TestCase):
    """Tests for RunMetricSet."""

    def test_len_and_names(self) -> None:
        run = make_run(2, {"a": (1.0, 1, 1), "b": (1.0, 1, 1)})
        self.assertEqual(len(run), 2)
        self.assertEqual(run.names(), ["a", "b"])

    def test_empty(self) -> None:
        self.assertEqual(len(RunMetricSet(index=1)), 0)

    def test_to_dict(self) -> None:
        data = make_run(3, {"a": (1.0, 1, 2)}).to_dict()
        self.assertEqual(data["index"], 3)
        self.assertEqual(len(data["records"]), 1)


class TestAggregatedRecord(unittest.TestCase):
    """Tests for AggregatedRecord."""

    def test_to_dict(self) -> None:
        r = AggregatedRecord(name="a", duration=1.0, blocks=2.5, instructions=4.0, runs_present=2)
        self.assertEqual(r.to_dict()["blocks"], 2.5)
        self.assertEqual(r.to_dict()["runs_present"], 2)


class TestCampaignResult(unittest.TestCase):
    """Tests for CampaignResult."""

    def test_counts(self) -> None:
        campaign = make_campaign(
            [make_run(1, {"a": (1.0, 1, 1), "b": (1.0, 1, 1)}), make_run(2, {"a": (1.0, 1, 1)})]
        )
        self.assertEqual(campaign.measured_run_count, 2)
        self.assertEqual(campaign.total_records, 3)

    def test_to_dict_is_json_serializable(self) -> None:
        campaign = make_campaign([make_run(1, {"a": (1.0, 1, 1)})])
        data = json.loads(json.dumps(campaign.to_dict()))
        self.assertEqual(data["measured_run_count"], 1)
        self.assertEqual(data["warmup_run_count"], 1)
        self.assertEqual(data["runs"][0]["records"][0]["name"], "a")


if __name__ == "__main__":
    unittest.main()
