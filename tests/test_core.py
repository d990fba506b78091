import math
import unittest

import pytest

from scenario_analyzer.core import (
    METRIC_DEFINITIONS,
    METRIC_FIELDS,
    MetricDifference,
    ScenarioNotFoundError,
    aggregate_scenario_data,
    as_number,
    comparison_direction,
    format_comparison_value,
    format_currency,
    format_difference,
    format_percentage,
    select_base_scenario,
)
from scenario_analyzer.testing.fixtures import make_raw_scenario


@pytest.mark.unit
class NormalizationTests(unittest.TestCase):
    def test_missing_input_returns_none(self) -> None:
        for value in (None, [], (), "not a list", {"id": 1}, 42):
            with self.subTest(value=value):
                self.assertIsNone(aggregate_scenario_data(value))

    def test_preserves_order_and_length(self) -> None:
        raw = [make_raw_scenario(i, f"S{i}") for i in (3, 1, 2)]
        normalized = aggregate_scenario_data(raw)
        assert normalized is not None
        self.assertEqual([s.id for s in normalized], [3, 1, 2])

    def test_metric_schema_is_fixed(self) -> None:
        normalized = aggregate_scenario_data([make_raw_scenario(1, "A", totalIncome=1000, bogusField=5)])
        assert normalized is not None
        self.assertEqual(list(normalized[0].metrics), list(METRIC_FIELDS))

    def test_empty_record_degrades_to_zeros(self) -> None:
        normalized = aggregate_scenario_data([{}])
        assert normalized is not None
        scenario = normalized[0]
        self.assertIsNone(scenario.id)
        self.assertEqual(scenario.name, "Scenario None")
        self.assertEqual(scenario.description, "")
        self.assertFalse(scenario.is_active)
        self.assertTrue(all(value == 0 for value in scenario.metrics.values()))

    def test_every_metric_is_a_finite_float(self) -> None:
        raw = [
            {},
            {"id": 1, "data": None},
            {"id": 2, "data": {"calculations": None}},
            {"id": 3, "data": {"calculations": {"totalIncome": "abc", "totalTax": float("nan")}}},
            {"id": 4, "data": {"calculations": {"totalIncome": float("inf"), "irmaaAmount": [1, 2]}}},
            {"id": 5, "data": {"calculations": {"totalIncome": 1e308, "totalTax": -1e308}}},
            {"id": 6, "data": {"calculations": {"totalIncome": 1e-300, "totalTax": 1e10}}},
            "garbage",
            None,
        ]
        normalized = aggregate_scenario_data(raw)
        assert normalized is not None
        self.assertEqual(len(normalized), len(raw))
        for scenario in normalized:
            for key, value in scenario.metrics.items():
                with self.subTest(scenario=scenario.id, metric=key):
                    self.assertIsInstance(value, float)
                    self.assertTrue(math.isfinite(value))

    def test_name_synthesized_from_id(self) -> None:
        normalized = aggregate_scenario_data([{"id": 7, "name": ""}, {"id": 8, "name": "Named"}])
        assert normalized is not None
        self.assertEqual(normalized[0].name, "Scenario 7")
        self.assertEqual(normalized[1].name, "Named")

    def test_derived_metrics(self) -> None:
        normalized = aggregate_scenario_data([make_raw_scenario(1, "A", totalIncome=200000, totalTax=50000)])
        assert normalized is not None
        metrics = normalized[0].metrics
        self.assertAlmostEqual(metrics["effectiveRate"], 25.0)
        self.assertEqual(metrics["afterTaxIncome"], 150000.0)

    def test_effective_rate_zero_without_income(self) -> None:
        normalized = aggregate_scenario_data([make_raw_scenario(1, "A", totalIncome=0, totalTax=500)])
        assert normalized is not None
        self.assertEqual(normalized[0].metrics["effectiveRate"], 0.0)
        self.assertEqual(normalized[0].metrics["afterTaxIncome"], -500.0)

    def test_numeric_strings_are_accepted(self) -> None:
        normalized = aggregate_scenario_data([make_raw_scenario(1, "A", totalIncome="1500", stateTax=True)])
        assert normalized is not None
        self.assertEqual(normalized[0].metrics["totalIncome"], 1500.0)
        self.assertEqual(normalized[0].metrics["stateTax"], 0.0)

    def test_source_records_are_not_mutated(self) -> None:
        raw = [make_raw_scenario(1, "A", totalIncome=100)]
        before = repr(raw)
        aggregate_scenario_data(raw)
        self.assertEqual(repr(raw), before)


@pytest.mark.unit
def test_as_number_fallbacks():
    assert as_number(None) == 0.0
    assert as_number("x", fallback=-1.0) == -1.0
    assert as_number(3) == 3.0


@pytest.mark.unit
def test_select_base_prefers_active(normalized_scenarios):
    reordered = [normalized_scenarios[1], normalized_scenarios[0], normalized_scenarios[2]]
    base, others = select_base_scenario(reordered)
    assert base.name == "Base Case"
    assert [s.name for s in others] == ["Roth Conversion", "Delay Capital Gains"]


@pytest.mark.unit
def test_select_base_by_id_matches_string_input(normalized_scenarios):
    base, others = select_base_scenario(normalized_scenarios, base_id="3")
    assert base.name == "Delay Capital Gains"
    assert [s.name for s in others] == ["Base Case", "Roth Conversion"]


@pytest.mark.unit
def test_select_base_falls_back_to_first():
    normalized = aggregate_scenario_data([make_raw_scenario(1, "A"), make_raw_scenario(2, "B")])
    base, others = select_base_scenario(normalized)
    assert base.name == "A"
    assert [s.name for s in others] == ["B"]


@pytest.mark.unit
def test_select_base_unknown_id_raises(normalized_scenarios):
    with pytest.raises(ScenarioNotFoundError):
        select_base_scenario(normalized_scenarios, base_id=99)


@pytest.mark.unit
def test_select_base_empty():
    assert select_base_scenario(None) == (None, [])
    assert select_base_scenario([]) == (None, [])


@pytest.mark.unit
def test_format_currency():
    assert format_currency(12345.6) == "$12,346"
    assert format_currency(1234.5) == "$1,235"
    assert format_currency(0) == "$0"
    assert format_currency(-1234.4) == "-$1,234"
    assert format_currency(None) == "$0"
    assert format_currency(float("nan")) == "$0"


@pytest.mark.unit
def test_format_percentage_uses_percentage_points():
    assert format_percentage(12.3456) == "12.35%"
    assert format_percentage(22) == "22.00%"
    assert format_percentage(None) == "0.00%"


@pytest.mark.unit
def test_format_comparison_value():
    assert format_comparison_value(None) == "N/A"
    assert format_comparison_value(-5000) == "-$5,000"
    assert format_comparison_value(5000) == "$5,000"
    assert format_comparison_value(19.4444, "percentage") == "19.44%"
    assert format_comparison_value(1500, "number") == "1,500"
    assert format_comparison_value("text", "other") == "text"


@pytest.mark.unit
def test_format_difference():
    saving = MetricDifference(base=20000, compare=15000, absolute=-5000, percent=-25.0, trend="decrease")
    assert format_difference(saving, "currency") == "-$5,000 (-25.0%)"

    rate = MetricDifference(base=20.0, compare=21.25, absolute=1.25, percent=6.25, trend="increase")
    assert format_difference(rate, "percentage") == "+1.25pp"

    unchanged = MetricDifference(base=1.0, compare=1.0, absolute=0.0, percent=0.0, trend="unchanged")
    assert format_difference(unchanged) == "—"
    assert format_difference(None) == "—"


@pytest.mark.unit
def test_comparison_direction_respects_inverse_metrics():
    assert comparison_direction(0) == "neutral"
    assert comparison_direction(100) == "favorable"
    assert comparison_direction(-100) == "unfavorable"
    assert comparison_direction(-100, METRIC_DEFINITIONS["totalTax"].inverse) == "favorable"
    assert comparison_direction(100, METRIC_DEFINITIONS["irmaaAmount"].inverse) == "unfavorable"


@pytest.mark.unit
def test_overflowing_derived_metrics_fall_back_to_zero():
    normalized = aggregate_scenario_data(
        [
            make_raw_scenario(1, "Huge Swing", totalIncome=1e308, totalTax=-1e308),
            make_raw_scenario(2, "Tiny Income", totalIncome=1e-300, totalTax=1e10),
        ]
    )
    assert normalized is not None
    swing, tiny = normalized
    assert swing.metrics["afterTaxIncome"] == 0.0
    assert tiny.metrics["effectiveRate"] == 0.0
    assert tiny.metrics["afterTaxIncome"] == 1e-300 - 1e10
