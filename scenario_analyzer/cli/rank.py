"""
CLI Entry Point: scenario-rank

Rank tax-planning scenarios best-first by a single metric.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from scenario_analyzer.core import (
    METRIC_DEFINITIONS,
    METRIC_FIELDS,
    ScenarioNotFoundError,
    aggregate_scenario_data,
    format_comparison_value,
)
from scenario_analyzer.cli.compare import NO_SCENARIOS_MESSAGE, configure_logging
from scenario_analyzer.documents import extract_client_scenarios, load_scenario_document
from scenario_analyzer.ranking import DEFAULT_RANKING_METRIC, is_lower_better, rank_scenarios
from scenario_analyzer.utils import console
from scenario_analyzer.utils.contracts import LENIENT, STRICT, ContractError


def main() -> None:
    parser = argparse.ArgumentParser(description="Rank tax-planning scenarios by a metric.")
    parser.add_argument("scenarios", type=Path, help="Scenario set JSON (client backup or scenario list).")
    parser.add_argument(
        "--metric",
        default=DEFAULT_RANKING_METRIC,
        choices=METRIC_FIELDS,
        help=f"Metric to rank by (default: {DEFAULT_RANKING_METRIC}).",
    )
    parser.add_argument("--client", default=None, help="Client id inside a backup (default: active client).")
    parser.add_argument("--json", action="store_true", help="Output machine-readable JSON.")
    parser.add_argument("--strict", action="store_true", help="Fail on data contract violations.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING).")
    args = parser.parse_args()

    configure_logging(args.log_level)

    if not args.scenarios.exists():
        sys.exit(f"Error: Scenario file not found: {args.scenarios}")

    try:
        document = load_scenario_document(args.scenarios, mode=STRICT if args.strict else LENIENT)
        raw_scenarios = extract_client_scenarios(document, client_id=args.client)
    except json.JSONDecodeError as e:
        sys.exit(f"Invalid JSON in {args.scenarios}: {e}")
    except (ContractError, ScenarioNotFoundError) as e:
        sys.exit(f"Error: {e}")

    ranked = rank_scenarios(aggregate_scenario_data(raw_scenarios), args.metric)
    if not ranked:
        console.print_warning(NO_SCENARIOS_MESSAGE)
        return

    if args.json:
        print(json.dumps([scenario.to_dict() for scenario in ranked], indent=2))
        return

    definition = METRIC_DEFINITIONS[args.metric]
    direction = "lower is better" if is_lower_better(args.metric) else "higher is better"
    rows = []
    for scenario in ranked:
        flag = "best" if scenario.is_best else ""
        if scenario.is_worst:
            flag = "best / worst" if scenario.is_best else "worst"
        rows.append(
            [
                str(scenario.rank),
                scenario.name,
                format_comparison_value(scenario.metrics.get(args.metric), definition.kind),
                flag,
            ]
        )
    console.print_table(f"Ranking by {definition.label} ({direction})", ["Rank", "Scenario", "Value", "Flag"], rows)


if __name__ == "__main__":
    main()
