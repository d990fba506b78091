"""
Insight rules

Fixed threshold rules that turn per-metric differences into short,
categorized statements for reports. Each rule reads one metric; a metric
absent from a comparison simply produces no insight for that rule.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from scenario_analyzer.core import MetricDifference, ScenarioDifference, format_currency

TAX_CHANGE_THRESHOLD = 1000.0
AFTER_TAX_INCOME_GAIN_THRESHOLD = 5000.0
EFFECTIVE_RATE_DROP_THRESHOLD = 1.0  # percentage points
IRMAA_CHANGE_THRESHOLD = 500.0

INSIGHT_POSITIVE = "positive"
INSIGHT_NEGATIVE = "negative"
INSIGHT_WARNING = "warning"


@dataclass
class Insight:
    type: str
    category: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "category": self.category, "message": self.message}


@dataclass
class InsightGroup:
    scenario_id: Any
    scenario_name: str
    insights: list[Insight] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenarioId": self.scenario_id,
            "scenarioName": self.scenario_name,
            "insights": [insight.to_dict() for insight in self.insights],
        }


def scenario_insights(name: str, differences: dict[str, MetricDifference]) -> list[Insight]:
    insights: list[Insight] = []

    total_tax = differences.get("totalTax")
    if total_tax is not None:
        if total_tax.absolute < -TAX_CHANGE_THRESHOLD:
            insights.append(
                Insight(
                    INSIGHT_POSITIVE,
                    "Tax Savings",
                    f"{name} saves {format_currency(abs(total_tax.absolute))} in total taxes "
                    f"({abs(total_tax.percent):.1f}% reduction)",
                )
            )
        elif total_tax.absolute > TAX_CHANGE_THRESHOLD:
            insights.append(
                Insight(
                    INSIGHT_NEGATIVE,
                    "Tax Increase",
                    f"{name} increases total taxes by {format_currency(total_tax.absolute)} "
                    f"({total_tax.percent:.1f}% increase)",
                )
            )

    after_tax = differences.get("afterTaxIncome")
    if after_tax is not None and after_tax.absolute > AFTER_TAX_INCOME_GAIN_THRESHOLD:
        insights.append(
            Insight(
                INSIGHT_POSITIVE,
                "Income Improvement",
                f"{name} increases after-tax income by {format_currency(after_tax.absolute)}",
            )
        )

    rate = differences.get("effectiveRate")
    if rate is not None and rate.absolute < -EFFECTIVE_RATE_DROP_THRESHOLD:
        insights.append(
            Insight(
                INSIGHT_POSITIVE,
                "Rate Efficiency",
                f"{name} reduces effective tax rate by {abs(rate.absolute):.1f} percentage points",
            )
        )

    irmaa = differences.get("irmaaAmount")
    if irmaa is not None:
        if irmaa.absolute < -IRMAA_CHANGE_THRESHOLD:
            insights.append(
                Insight(
                    INSIGHT_POSITIVE,
                    "Medicare Savings",
                    f"{name} avoids {format_currency(abs(irmaa.absolute))} in IRMAA surcharges",
                )
            )
        elif irmaa.absolute > IRMAA_CHANGE_THRESHOLD:
            insights.append(
                Insight(
                    INSIGHT_WARNING,
                    "Medicare Impact",
                    f"{name} triggers {format_currency(irmaa.absolute)} in additional IRMAA surcharges",
                )
            )

    return insights


def generate_comparison_insights(
    scenario_differences: Sequence[ScenarioDifference] | None,
) -> list[InsightGroup]:
    if not scenario_differences:
        return []

    groups: list[InsightGroup] = []
    for comparison in scenario_differences:
        if not isinstance(comparison.differences, dict):
            continue
        groups.append(
            InsightGroup(
                scenario_id=comparison.scenario_id,
                scenario_name=comparison.scenario_name,
                insights=scenario_insights(comparison.scenario_name, comparison.differences),
            )
        )
    return groups
