import pytest
from typing import Any

from scenario_analyzer.core import NormalizedScenario, aggregate_scenario_data
from scenario_analyzer.testing.fixtures import make_raw_scenario, sample_scenarios


@pytest.fixture
def raw_scenarios() -> list[dict[str, Any]]:
    """Base Case (active), Roth Conversion and Delay Capital Gains."""
    return sample_scenarios()


@pytest.fixture
def normalized_scenarios(raw_scenarios) -> list[NormalizedScenario]:
    normalized = aggregate_scenario_data(raw_scenarios)
    assert normalized is not None
    return normalized


@pytest.fixture
def tax_savings_pair() -> tuple[NormalizedScenario, NormalizedScenario]:
    """Two scenarios with equal income where the second pays $5,000 less tax."""
    normalized = aggregate_scenario_data(
        [
            make_raw_scenario("base", "Current Plan", is_active=True, totalIncome=100000, totalTax=20000),
            make_raw_scenario("alt", "Lower Tax Plan", totalIncome=100000, totalTax=15000),
        ]
    )
    assert normalized is not None
    return normalized[0], normalized[1]

