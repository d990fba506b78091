from __future__ import annotations

from typing import Sequence

from scenario_analyzer.core import (
    MetricDifference,
    NormalizedScenario,
    ScenarioDifference,
    as_number,
    classify_trend,
)


def metric_difference(base_value: float, compare_value: float) -> MetricDifference:
    absolute = as_number(compare_value - base_value)
    percent = as_number(absolute / base_value * 100) if base_value != 0 else 0.0
    return MetricDifference(
        base=base_value,
        compare=compare_value,
        absolute=absolute,
        percent=percent,
        trend=classify_trend(absolute),
    )


def calculate_scenario_differences(
    base_scenario: NormalizedScenario | None,
    compare_scenarios: Sequence[NormalizedScenario] | None,
) -> list[ScenarioDifference]:
    """
    Difference every compare scenario against the base, metric by metric.

    The base scenario's metric keys define the domain; a key missing from a
    compare scenario counts as 0.
    """
    if base_scenario is None or not compare_scenarios:
        return []

    base_metrics = base_scenario.metrics or {}
    results: list[ScenarioDifference] = []
    for scenario in compare_scenarios:
        compare_metrics = scenario.metrics or {}
        differences = {
            key: metric_difference(as_number(base_value), as_number(compare_metrics.get(key)))
            for key, base_value in base_metrics.items()
        }
        results.append(
            ScenarioDifference(
                scenario_id=scenario.id,
                scenario_name=scenario.name,
                differences=differences,
            )
        )
    return results
