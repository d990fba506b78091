from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from scenario_analyzer.core import (
    METRIC_DEFINITIONS,
    NormalizedScenario,
    ScenarioDifference,
    aggregate_scenario_data,
    format_comparison_value,
    format_currency,
    format_difference,
    select_base_scenario,
)
from scenario_analyzer.differences import calculate_scenario_differences
from scenario_analyzer.insights import InsightGroup, generate_comparison_insights
from scenario_analyzer.ranking import rank_scenarios
from scenario_analyzer.strategies import Recommendation, summarize_recommendations

logger = logging.getLogger(__name__)

SUMMARY_SCHEMA_VERSION = "1.0.0"

# Metric slot in `recommendations` -> ranking metric.
RECOMMENDATION_METRICS = {
    "bestAfterTaxIncome": "afterTaxIncome",
    "lowestTotalTax": "totalTax",
    "bestEffectiveRate": "effectiveRate",
}

SIDE_BY_SIDE_METRICS = [
    "totalIncome",
    "ordinaryIncome",
    "capitalGains",
    "socialSecurityIncome",
    "federalTax",
    "stateTax",
    "ficaTax",
    "totalTax",
    "marginalRate",
    "effectiveRate",
    "afterTaxIncome",
    "standardDeduction",
    "taxableIncome",
    "irmaaAmount",
]
DELTA_METRICS = [
    "totalIncome",
    "totalTax",
    "effectiveRate",
    "afterTaxIncome",
    "federalTax",
    "stateTax",
    "irmaaAmount",
]
DIFFERENCE_CSV_FIELDS = [
    "scenario_id",
    "scenario_name",
    "metric",
    "base",
    "compare",
    "absolute",
    "percent",
    "trend",
]
CSV_PRECISION = 4


@dataclass
class ComparisonSummary:
    base_scenario: str
    compare_scenarios: list[str]
    total_comparisons: int
    differences: list[ScenarioDifference]
    insights: list[InsightGroup]
    recommendations: dict[str, str] = field(default_factory=dict)


def generate_comparison_summary(
    base_scenario: NormalizedScenario | None,
    compare_scenarios: Sequence[NormalizedScenario] | None,
) -> ComparisonSummary | None:
    """
    Compose differences, insights and per-metric winners for one base scenario.

    Returns None when there is no base or nothing to compare it against.
    """
    if base_scenario is None or not compare_scenarios:
        return None

    differences = calculate_scenario_differences(base_scenario, compare_scenarios)
    insights = generate_comparison_insights(differences)

    all_scenarios = [base_scenario, *compare_scenarios]
    recommendations = {
        slot: rank_scenarios(all_scenarios, metric)[0].name for slot, metric in RECOMMENDATION_METRICS.items()
    }

    return ComparisonSummary(
        base_scenario=base_scenario.name,
        compare_scenarios=[scenario.name for scenario in compare_scenarios],
        total_comparisons=len(compare_scenarios),
        differences=differences,
        insights=insights,
        recommendations=recommendations,
    )


def compare_scenarios(raw_scenarios: Any, base_id: Any = None) -> ComparisonSummary | None:
    """Normalize raw scenario records, pick the base, and summarize."""
    normalized = aggregate_scenario_data(raw_scenarios)
    if not normalized:
        logger.debug("No scenarios to compare")
        return None
    base, others = select_base_scenario(normalized, base_id=base_id)
    return generate_comparison_summary(base, others)


def summary_to_json(
    summary: ComparisonSummary,
    strategies: Sequence[Recommendation] | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "schema_version": SUMMARY_SCHEMA_VERSION,
        "baseScenario": summary.base_scenario,
        "compareScenarios": list(summary.compare_scenarios),
        "totalComparisons": summary.total_comparisons,
        "differences": [diff.to_dict() for diff in summary.differences],
        "insights": [group.to_dict() for group in summary.insights],
        "recommendations": dict(summary.recommendations),
    }
    if strategies is not None:
        payload["strategicRecommendations"] = [rec.to_dict() for rec in strategies]
        payload["strategySummary"] = summarize_recommendations(strategies)
    return payload


def summary_to_markdown(
    summary: ComparisonSummary,
    scenarios: Sequence[NormalizedScenario],
    strategies: Sequence[Recommendation] | None = None,
) -> str:
    lines: list[str] = []

    lines.append("# Scenario Comparison Report")
    lines.append("")
    lines.append(f"- Base Scenario: {summary.base_scenario}")
    lines.append(f"- Comparing: {', '.join(summary.compare_scenarios)}")
    lines.append(f"- Total Comparisons: {summary.total_comparisons}")
    lines.append("")

    headers = [s.name + (" (Current)" if s.is_active else "") for s in scenarios]
    lines.append("## Side-by-Side Metrics")
    lines.append("| Metric | " + " | ".join(headers) + " |")
    lines.append("| :--- |" + " :--- |" * len(headers))
    for key in SIDE_BY_SIDE_METRICS:
        definition = METRIC_DEFINITIONS[key]
        cells = [format_comparison_value(s.metrics.get(key), definition.kind) for s in scenarios]
        lines.append(f"| {definition.label} | " + " | ".join(cells) + " |")
    lines.append("")

    lines.append("## Changes vs Base")
    lines.append("| Metric | " + " | ".join(diff.scenario_name for diff in summary.differences) + " |")
    lines.append("| :--- |" + " :--- |" * len(summary.differences))
    for key in DELTA_METRICS:
        definition = METRIC_DEFINITIONS[key]
        cells = [format_difference(diff.differences.get(key), definition.kind) for diff in summary.differences]
        lines.append(f"| {definition.label} | " + " | ".join(cells) + " |")
    lines.append("")

    lines.append("## Insights")
    for group in summary.insights:
        lines.append(f"### {group.scenario_name}")
        if not group.insights:
            lines.append("- No significant changes")
        for insight in group.insights:
            lines.append(f"- [{insight.type.upper()}] {insight.category}: {insight.message}")
        lines.append("")

    lines.append("## Recommendations")
    lines.append(f"- Best After-Tax Income: {summary.recommendations.get('bestAfterTaxIncome')}")
    lines.append(f"- Lowest Total Tax: {summary.recommendations.get('lowestTotalTax')}")
    lines.append(f"- Best Effective Rate: {summary.recommendations.get('bestEffectiveRate')}")

    if strategies:
        overview = summarize_recommendations(strategies)
        lines.append("")
        lines.append("## Strategic Recommendations")
        lines.append(overview["summary"])
        lines.append("")
        for rec in strategies:
            savings = f" (potential savings {format_currency(rec.potential_savings)})" if rec.potential_savings else ""
            lines.append(f"- **[{rec.priority.upper()}] {rec.title}**{savings}: {rec.description}")
            lines.append(f"  - Action: {rec.action}")

    lines.append("")
    return "\n".join(lines)


def differences_to_csv(summary: ComparisonSummary) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=DIFFERENCE_CSV_FIELDS)
    writer.writeheader()
    for comparison in summary.differences:
        for metric, diff in comparison.differences.items():
            writer.writerow(
                {
                    "scenario_id": comparison.scenario_id,
                    "scenario_name": comparison.scenario_name,
                    "metric": metric,
                    "base": round(diff.base, CSV_PRECISION),
                    "compare": round(diff.compare, CSV_PRECISION),
                    "absolute": round(diff.absolute, CSV_PRECISION),
                    "percent": round(diff.percent, CSV_PRECISION),
                    "trend": diff.trend,
                }
            )
    return buffer.getvalue()
