import pytest

from scenario_analyzer.core import METRIC_FIELDS
from scenario_analyzer.differences import calculate_scenario_differences, metric_difference
from scenario_analyzer.testing.fixtures import make_normalized_scenario


@pytest.mark.unit
def test_tax_savings_example(tax_savings_pair):
    base, compare = tax_savings_pair
    result = calculate_scenario_differences(base, [compare])

    assert len(result) == 1
    assert result[0].scenario_id == "alt"
    assert result[0].scenario_name == "Lower Tax Plan"
    assert result[0].differences["totalTax"].to_dict() == {
        "base": 20000.0,
        "compare": 15000.0,
        "absolute": -5000.0,
        "percent": -25.0,
        "trend": "decrease",
    }


@pytest.mark.unit
def test_covers_every_base_metric_in_order(normalized_scenarios):
    base, *others = normalized_scenarios
    result = calculate_scenario_differences(base, others)

    assert [r.scenario_name for r in result] == ["Roth Conversion", "Delay Capital Gains"]
    for comparison in result:
        assert list(comparison.differences) == list(METRIC_FIELDS)


@pytest.mark.unit
def test_arithmetic_and_trend_invariants(normalized_scenarios):
    base, *others = normalized_scenarios
    for comparison in calculate_scenario_differences(base, others):
        for diff in comparison.differences.values():
            assert diff.absolute == diff.compare - diff.base
            expected_percent = 0 if diff.base == 0 else diff.absolute / diff.base * 100
            assert diff.percent == expected_percent
            if diff.absolute > 0:
                assert diff.trend == "increase"
            elif diff.absolute < 0:
                assert diff.trend == "decrease"
            else:
                assert diff.trend == "unchanged"


@pytest.mark.unit
def test_base_key_set_defines_domain():
    base = make_normalized_scenario(1, "Base", totalTax=5000, irmaaAmount=300)
    compare = make_normalized_scenario(2, "Other", totalTax=7000, extraMetric=99)

    [result] = calculate_scenario_differences(base, [compare])

    assert set(result.differences) == {"totalTax", "irmaaAmount"}
    assert result.differences["irmaaAmount"].compare == 0
    assert result.differences["irmaaAmount"].absolute == -300
    assert result.differences["irmaaAmount"].trend == "decrease"


@pytest.mark.unit
def test_zero_base_guards_percent():
    diff = metric_difference(0.0, 2500.0)
    assert diff.absolute == 2500.0
    assert diff.percent == 0
    assert diff.trend == "increase"


@pytest.mark.unit
def test_unchanged_metric():
    diff = metric_difference(1200.0, 1200.0)
    assert diff.absolute == 0
    assert diff.percent == 0
    assert diff.trend == "unchanged"


@pytest.mark.unit
def test_missing_inputs_return_empty(tax_savings_pair):
    base, compare = tax_savings_pair
    assert calculate_scenario_differences(None, [compare]) == []
    assert calculate_scenario_differences(base, None) == []
    assert calculate_scenario_differences(base, []) == []


@pytest.mark.unit
def test_overflowing_difference_stays_finite():
    diff = metric_difference(-1e308, 1e308)
    assert diff.absolute == 0.0
    assert diff.trend == "unchanged"

    tiny_base = metric_difference(1e-300, 1e10)
    assert tiny_base.absolute == 1e10 - 1e-300
    assert tiny_base.percent == 0.0
