from scenario_analyzer.core import (
    METRIC_DEFINITIONS,
    METRIC_FIELDS,
    MetricDifference,
    NormalizedScenario,
    ScenarioDifference,
    ScenarioNotFoundError,
    aggregate_scenario_data,
    comparison_direction,
    format_comparison_value,
    format_currency,
    format_difference,
    format_percentage,
    select_base_scenario,
)
from scenario_analyzer.differences import calculate_scenario_differences
from scenario_analyzer.insights import Insight, InsightGroup, generate_comparison_insights
from scenario_analyzer.ranking import LOWER_IS_BETTER_METRICS, RankedScenario, rank_scenarios
from scenario_analyzer.strategies import (
    Recommendation,
    build_implementation_timeline,
    calculate_total_potential_savings,
    generate_strategic_recommendations,
    summarize_recommendations,
)
from scenario_analyzer.summary import (
    ComparisonSummary,
    compare_scenarios,
    differences_to_csv,
    generate_comparison_summary,
    summary_to_json,
    summary_to_markdown,
)

__all__ = [
    "ComparisonSummary",
    "Insight",
    "InsightGroup",
    "LOWER_IS_BETTER_METRICS",
    "METRIC_DEFINITIONS",
    "METRIC_FIELDS",
    "MetricDifference",
    "NormalizedScenario",
    "RankedScenario",
    "Recommendation",
    "ScenarioDifference",
    "ScenarioNotFoundError",
    "aggregate_scenario_data",
    "build_implementation_timeline",
    "calculate_scenario_differences",
    "calculate_total_potential_savings",
    "compare_scenarios",
    "comparison_direction",
    "differences_to_csv",
    "format_comparison_value",
    "format_currency",
    "format_difference",
    "format_percentage",
    "generate_comparison_insights",
    "generate_comparison_summary",
    "generate_strategic_recommendations",
    "rank_scenarios",
    "select_base_scenario",
    "summarize_recommendations",
    "summary_to_json",
    "summary_to_markdown",
]
