"""
Strategic Recommendations Module

Turns a normalized scenario set and its differences into advisor-facing
planning recommendations, plus helpers to bucket them on a timeline and
summarize them for an executive overview.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from scenario_analyzer.core import (
    NormalizedScenario,
    ScenarioDifference,
    format_currency,
    format_percentage,
)

CATEGORY_TAX_OPTIMIZATION = "Tax Optimization"
CATEGORY_INCOME_TIMING = "Income Timing"
CATEGORY_RETIREMENT_PLANNING = "Retirement Planning"
CATEGORY_MEDICARE_PLANNING = "Medicare Planning"
CATEGORY_CAPITAL_GAINS = "Capital Gains Strategy"
CATEGORY_ROTH_CONVERSION = "Roth Conversion"

PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}

SIGNIFICANT_TAX_SAVINGS = 1000.0
LOW_EFFECTIVE_RATE = 15.0
ROTH_CONVERSION_RATE_CEILING = 20.0
INCOME_TIMING_SWING = 5000.0
CAPITAL_GAINS_SWING = 2000.0
SIGNIFICANT_RETIREMENT_INCOME = 50000.0

TIMELINE_BUCKETS = {
    "Current tax year": "immediate",
    "Immediate": "immediate",
    "Current and next tax year": "short_term",
    "1-6 months": "short_term",
    "2 years prior to Medicare enrollment": "medium_term",
    "6-18 months": "medium_term",
}


@dataclass
class Recommendation:
    id: str
    category: str
    priority: str
    title: str
    description: str
    action: str
    impact: str
    timeframe: str
    potential_savings: float | None = None
    considerations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "priority": self.priority,
            "title": self.title,
            "description": self.description,
            "action": self.action,
            "potentialSavings": self.potential_savings,
            "impact": self.impact,
            "timeframe": self.timeframe,
            "considerations": list(self.considerations),
        }


def difference_absolute(comparison: ScenarioDifference, metric: str) -> float | None:
    diff = comparison.differences.get(metric)
    return diff.absolute if diff is not None else None


def tax_optimization_recommendations(
    scenarios: Sequence[NormalizedScenario],
    differences: Sequence[ScenarioDifference],
) -> list[Recommendation]:
    recommendations: list[Recommendation] = []

    savings = [
        comparison
        for comparison in differences
        if (difference_absolute(comparison, "totalTax") or 0.0) < -SIGNIFICANT_TAX_SAVINGS
    ]
    if savings:
        best = min(savings, key=lambda comparison: comparison.differences["totalTax"].absolute)
        total_tax = best.differences["totalTax"]
        recommendations.append(
            Recommendation(
                id="tax-optimization-primary",
                category=CATEGORY_TAX_OPTIMIZATION,
                priority="high",
                title="Significant Tax Savings Opportunity",
                description=(
                    f"{best.scenario_name} could save {format_currency(abs(total_tax.absolute))} in total taxes "
                    f"({format_percentage(abs(total_tax.percent))} reduction)."
                ),
                action=f"Consider implementing the strategies in {best.scenario_name} to optimize your tax position.",
                potential_savings=abs(total_tax.absolute),
                impact="High",
                timeframe="Current tax year",
                considerations=[
                    "Review implementation complexity and requirements",
                    "Consider timing of strategy implementation",
                    "Evaluate long-term vs short-term benefits",
                ],
            )
        )

    low_rate = [s for s in scenarios if s.metrics.get("effectiveRate", 0.0) < LOW_EFFECTIVE_RATE]
    if low_rate:
        best_rate = min(low_rate, key=lambda s: s.metrics.get("effectiveRate", 0.0))
        recommendations.append(
            Recommendation(
                id="effective-rate-optimization",
                category=CATEGORY_TAX_OPTIMIZATION,
                priority="medium",
                title="Low Effective Tax Rate Opportunity",
                description=(
                    f"{best_rate.name} achieves a {format_percentage(best_rate.metrics.get('effectiveRate'))} "
                    "effective tax rate, which is excellent for tax efficiency."
                ),
                action="Consider strategies that maintain or achieve this low effective rate.",
                impact="Medium",
                timeframe="Ongoing",
                considerations=[
                    "Monitor changes in tax law that might affect this rate",
                    "Plan for future income changes",
                    "Consider multi-year tax planning",
                ],
            )
        )

    return recommendations


def income_timing_recommendations(differences: Sequence[ScenarioDifference]) -> list[Recommendation]:
    if not any(abs(difference_absolute(c, "totalIncome") or 0.0) > INCOME_TIMING_SWING for c in differences):
        return []
    return [
        Recommendation(
            id="income-timing-strategy",
            category=CATEGORY_INCOME_TIMING,
            priority="medium",
            title="Income Timing Optimization",
            description="Different income timing strategies show varying tax impacts across scenarios.",
            action="Consider timing income recognition to optimize tax brackets and rates.",
            impact="Medium",
            timeframe="Current and next tax year",
            considerations=[
                "Evaluate cash flow needs and timing",
                "Consider impact on other tax benefits",
                "Plan for multi-year tax optimization",
            ],
        )
    ]


def medicare_planning_recommendations(scenarios: Sequence[NormalizedScenario]) -> list[Recommendation]:
    surcharged = [s for s in scenarios if s.metrics.get("irmaaAmount", 0.0) > 0]
    clear = [s for s in scenarios if s.metrics.get("irmaaAmount", 0.0) == 0]
    if not surcharged or not clear:
        return []

    irmaa_amount = surcharged[0].metrics["irmaaAmount"]
    return [
        Recommendation(
            id="irmaa-avoidance",
            category=CATEGORY_MEDICARE_PLANNING,
            priority="high",
            title="Medicare IRMAA Surcharge Avoidance",
            description=(
                f"Some scenarios trigger {format_currency(irmaa_amount)} in Medicare IRMAA surcharges, "
                "while others avoid them entirely."
            ),
            action="Consider income management strategies to stay below IRMAA thresholds.",
            potential_savings=irmaa_amount,
            impact="High",
            timeframe="2 years prior to Medicare enrollment",
            considerations=[
                "IRMAA is based on income from 2 years prior",
                "Consider Roth conversions in low-income years",
                "Plan retirement income timing carefully",
            ],
        )
    ]


def capital_gains_recommendations(differences: Sequence[ScenarioDifference]) -> list[Recommendation]:
    if not any(abs(difference_absolute(c, "capitalGains") or 0.0) > CAPITAL_GAINS_SWING for c in differences):
        return []
    return [
        Recommendation(
            id="capital-gains-timing",
            category=CATEGORY_CAPITAL_GAINS,
            priority="medium",
            title="Capital Gains Timing Strategy",
            description="Different capital gains realization timing shows varying tax impacts.",
            action="Consider timing capital gains to optimize tax rates and utilize lower brackets.",
            impact="Medium",
            timeframe="Current tax year",
            considerations=[
                "Evaluate 0% capital gains bracket opportunities",
                "Consider tax-loss harvesting strategies",
                "Plan for asset location optimization",
            ],
        )
    ]


def retirement_planning_recommendations(scenarios: Sequence[NormalizedScenario]) -> list[Recommendation]:
    if not any(s.metrics.get("ordinaryIncome", 0.0) > SIGNIFICANT_RETIREMENT_INCOME for s in scenarios):
        return []
    return [
        Recommendation(
            id="retirement-income-optimization",
            category=CATEGORY_RETIREMENT_PLANNING,
            priority="medium",
            title="Retirement Income Optimization",
            description="Different retirement income strategies show varying tax efficiency.",
            action="Consider optimizing the mix of taxable, tax-deferred, and tax-free retirement income.",
            impact="Medium to High",
            timeframe="Long-term retirement planning",
            considerations=[
                "Balance current tax savings with future tax costs",
                "Consider Roth conversion opportunities",
                "Plan for Required Minimum Distributions",
            ],
        )
    ]


def roth_conversion_recommendations(scenarios: Sequence[NormalizedScenario]) -> list[Recommendation]:
    if not any(s.metrics.get("effectiveRate", 0.0) < ROTH_CONVERSION_RATE_CEILING for s in scenarios):
        return []
    return [
        Recommendation(
            id="roth-conversion-opportunity",
            category=CATEGORY_ROTH_CONVERSION,
            priority="medium",
            title="Roth Conversion Opportunity",
            description="Low effective tax rates in some scenarios suggest potential Roth conversion opportunities.",
            action=(
                "Consider Roth conversions during years with lower tax rates to optimize long-term tax efficiency."
            ),
            impact="High (long-term)",
            timeframe="Multi-year strategy",
            considerations=[
                "Evaluate current vs future tax rate expectations",
                "Consider impact on Medicare IRMAA thresholds",
                "Plan conversion amounts to optimize tax brackets",
            ],
        )
    ]


def recommendation_sort_key(recommendation: Recommendation) -> tuple[int, float]:
    return (
        -PRIORITY_ORDER.get(recommendation.priority, 0),
        -(recommendation.potential_savings or 0.0),
    )


def generate_strategic_recommendations(
    scenarios: Sequence[NormalizedScenario] | None,
    differences: Sequence[ScenarioDifference] | None,
) -> list[Recommendation]:
    """
    Build planning recommendations, highest priority first.

    Within a priority, larger potential savings come first; remaining ties
    keep rule order.
    """
    if not scenarios:
        return []
    differences = differences or []

    recommendations: list[Recommendation] = []
    recommendations.extend(tax_optimization_recommendations(scenarios, differences))
    recommendations.extend(income_timing_recommendations(differences))
    recommendations.extend(medicare_planning_recommendations(scenarios))
    recommendations.extend(capital_gains_recommendations(differences))
    recommendations.extend(retirement_planning_recommendations(scenarios))
    recommendations.extend(roth_conversion_recommendations(scenarios))
    return sorted(recommendations, key=recommendation_sort_key)


def build_implementation_timeline(recommendations: Sequence[Recommendation]) -> dict[str, list[Recommendation]]:
    timeline: dict[str, list[Recommendation]] = {
        "immediate": [],
        "short_term": [],
        "medium_term": [],
        "long_term": [],
    }
    for recommendation in recommendations:
        bucket = TIMELINE_BUCKETS.get(recommendation.timeframe, "long_term")
        timeline[bucket].append(recommendation)
    return timeline


def calculate_total_potential_savings(recommendations: Sequence[Recommendation]) -> float:
    return sum(recommendation.potential_savings or 0.0 for recommendation in recommendations)


def summarize_recommendations(recommendations: Sequence[Recommendation]) -> dict[str, Any]:
    total_savings = calculate_total_potential_savings(recommendations)
    high_priority = [r for r in recommendations if r.priority == "high"]
    categories = list(dict.fromkeys(r.category for r in recommendations))

    return {
        "totalRecommendations": len(recommendations),
        "highPriorityCount": len(high_priority),
        "totalPotentialSavings": total_savings,
        "categoriesCount": len(categories),
        "categories": categories,
        "topRecommendation": recommendations[0].to_dict() if recommendations else None,
        "summary": (
            f"{len(recommendations)} strategic recommendations identified with potential savings of "
            f"{format_currency(total_savings)}. {len(high_priority)} high-priority actions require "
            "immediate attention."
        ),
    }
