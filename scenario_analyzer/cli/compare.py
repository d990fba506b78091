"""
CLI Entry Point: scenario-compare

Compare tax-planning scenarios against a base scenario and write the
comparison summary as JSON, Markdown and CSV.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from scenario_analyzer.core import (
    METRIC_DEFINITIONS,
    ScenarioNotFoundError,
    aggregate_scenario_data,
    comparison_direction,
    format_difference,
    select_base_scenario,
)
from scenario_analyzer.documents import extract_client_scenarios, load_scenario_document
from scenario_analyzer.strategies import generate_strategic_recommendations
from scenario_analyzer.summary import (
    DELTA_METRICS,
    ComparisonSummary,
    differences_to_csv,
    generate_comparison_summary,
    summary_to_json,
    summary_to_markdown,
)
from scenario_analyzer.utils import console
from scenario_analyzer.utils.contracts import LENIENT, STRICT, ContractError, validate_document

logger = logging.getLogger(__name__)

NO_SCENARIOS_MESSAGE = "No scenarios selected for comparison"


def write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def write_json(path: Path, payload: dict[str, Any]) -> None:
    write_text(path, json.dumps(payload, indent=2))


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def output_human(summary: ComparisonSummary) -> None:
    console.print_step(f"Base Scenario: {summary.base_scenario}")

    columns = ["Metric"] + [diff.scenario_name for diff in summary.differences]
    rows = []
    for key in DELTA_METRICS:
        definition = METRIC_DEFINITIONS[key]
        row = [definition.label]
        for comparison in summary.differences:
            diff = comparison.differences.get(key)
            text = format_difference(diff, definition.kind)
            direction = comparison_direction(diff.absolute if diff else 0.0, definition.inverse)
            row.append(console.styled_direction(text, direction))
        rows.append(row)
    console.print_table("Changes vs Base", columns, rows)

    for group in summary.insights:
        if not group.insights:
            console.print_step(f"{group.scenario_name}: no significant changes")
            continue
        console.print_step(group.scenario_name)
        for insight in group.insights:
            if insight.type == "positive":
                console.print_success(insight.message)
            else:
                console.print_warning(insight.message)

    console.print_table(
        "Recommendations",
        ["Goal", "Scenario"],
        [
            ["Best After-Tax Income", summary.recommendations["bestAfterTaxIncome"]],
            ["Lowest Total Tax", summary.recommendations["lowestTotalTax"]],
            ["Best Effective Rate", summary.recommendations["bestEffectiveRate"]],
        ],
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Compare tax-planning scenarios against a base scenario.")
    parser.add_argument("scenarios", type=Path, help="Scenario set JSON (client backup or scenario list).")
    parser.add_argument("--base", default=None, help="Base scenario id (default: active scenario, else first).")
    parser.add_argument("--client", default=None, help="Client id inside a backup (default: active client).")
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON instead of tables.")
    parser.add_argument("--json-out", type=Path, default=None, help="Write the summary JSON to this path.")
    parser.add_argument("--markdown-out", type=Path, default=None, help="Write a Markdown report to this path.")
    parser.add_argument("--csv-out", type=Path, default=None, help="Write per-metric differences as CSV.")
    parser.add_argument("--strategies", action="store_true", help="Include strategic recommendations.")
    parser.add_argument("--strict", action="store_true", help="Fail on data contract violations.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING).")
    args = parser.parse_args()

    configure_logging(args.log_level)
    mode = STRICT if args.strict else LENIENT

    if not args.scenarios.exists():
        sys.exit(f"Error: Scenario file not found: {args.scenarios}")

    try:
        document = load_scenario_document(args.scenarios, mode=mode)
        raw_scenarios = extract_client_scenarios(document, client_id=args.client)
        scenarios = aggregate_scenario_data(raw_scenarios) or []
        base, others = select_base_scenario(scenarios, base_id=args.base)
    except json.JSONDecodeError as e:
        sys.exit(f"Invalid JSON in {args.scenarios}: {e}")
    except (ContractError, ScenarioNotFoundError) as e:
        sys.exit(f"Error: {e}")

    summary = generate_comparison_summary(base, others)
    if summary is None:
        console.print_warning(NO_SCENARIOS_MESSAGE)
        return

    ordered = [base, *others]
    strategies = None
    if args.strategies:
        strategies = generate_strategic_recommendations(ordered, summary.differences)

    payload = summary_to_json(summary, strategies)
    try:
        validate_document(payload, "comparison_summary", mode=mode)
    except ContractError as e:
        sys.exit(f"Error: {e}")

    if args.json_out:
        write_json(args.json_out, payload)
        logger.info("Wrote summary JSON to %s", args.json_out)
    if args.markdown_out:
        write_text(args.markdown_out, summary_to_markdown(summary, ordered, strategies))
        logger.info("Wrote Markdown report to %s", args.markdown_out)
    if args.csv_out:
        write_text(args.csv_out, differences_to_csv(summary))
        logger.info("Wrote differences CSV to %s", args.csv_out)

    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        output_human(summary)


if __name__ == "__main__":
    main()
