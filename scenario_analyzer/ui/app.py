#!/usr/bin/env python3

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import streamlit as st

from scenario_analyzer.core import (
    METRIC_DEFINITIONS,
    METRIC_FIELDS,
    NormalizedScenario,
    aggregate_scenario_data,
    format_comparison_value,
    format_difference,
    select_base_scenario,
)
from scenario_analyzer.documents import (
    client_labels,
    extract_client_scenarios,
    load_scenario_document,
    prepare_scenario_document,
)
from scenario_analyzer.ranking import rank_scenarios
from scenario_analyzer.strategies import generate_strategic_recommendations, summarize_recommendations
from scenario_analyzer.summary import (
    DELTA_METRICS,
    SIDE_BY_SIDE_METRICS,
    ComparisonSummary,
    differences_to_csv,
    generate_comparison_summary,
    summary_to_json,
    summary_to_markdown,
)

NO_SCENARIOS_MESSAGE = "No scenarios selected for comparison"


def side_by_side_rows(scenarios: list[NormalizedScenario]) -> list[dict[str, str]]:
    rows = []
    for key in SIDE_BY_SIDE_METRICS:
        definition = METRIC_DEFINITIONS[key]
        row = {"Metric": definition.label}
        for scenario in scenarios:
            label = scenario.name + (" (Current)" if scenario.is_active else "")
            row[label] = format_comparison_value(scenario.metrics.get(key), definition.kind)
        rows.append(row)
    return rows


def delta_rows(summary: ComparisonSummary) -> list[dict[str, str]]:
    rows = []
    for key in DELTA_METRICS:
        definition = METRIC_DEFINITIONS[key]
        row = {"Metric": definition.label}
        for comparison in summary.differences:
            row[comparison.scenario_name] = format_difference(comparison.differences.get(key), definition.kind)
        rows.append(row)
    return rows


def ranking_rows(scenarios: list[NormalizedScenario], metric: str) -> list[dict[str, Any]]:
    definition = METRIC_DEFINITIONS[metric]
    return [
        {
            "Rank": ranked.rank,
            "Scenario": ranked.name,
            definition.label: format_comparison_value(ranked.metrics.get(metric), definition.kind),
            "Best": ranked.is_best,
            "Worst": ranked.is_worst,
        }
        for ranked in rank_scenarios(scenarios, metric)
    ]


def load_document_from_sidebar() -> Any:
    uploaded = st.file_uploader("Upload scenario set JSON", type=["json"])
    if uploaded is not None:
        try:
            return prepare_scenario_document(json.loads(uploaded.getvalue().decode("utf-8")))
        except json.JSONDecodeError as e:
            st.error(f"Invalid JSON: {e}")
            return None

    path_text = st.text_input("...or scenario set path", value="")
    if not path_text:
        return None
    path = Path(path_text).expanduser()
    if not path.exists():
        st.error(f"File not found: `{path}`")
        return None
    try:
        return load_scenario_document(path)
    except json.JSONDecodeError as e:
        st.error(f"Invalid JSON: {e}")
        return None


def main() -> None:
    st.set_page_config(page_title="Scenario Comparison", page_icon="📊", layout="wide")
    st.markdown("# Scenario Comparison")
    st.markdown("Compare tax-planning scenarios against a base scenario.")

    with st.sidebar:
        st.header("Scenario Set")
        document = load_document_from_sidebar()
        client_id = None
        clients = client_labels(document)
        if clients:
            names = {cid: name for cid, name in clients}
            client_id = st.selectbox("Client", options=list(names), format_func=lambda cid: names[cid])

    if document is None:
        st.info("Load a scenario set to begin.")
        return

    scenarios = aggregate_scenario_data(extract_client_scenarios(document, client_id=client_id)) or []
    if not scenarios:
        st.info(NO_SCENARIOS_MESSAGE)
        return

    default_base, _ = select_base_scenario(scenarios)
    ids = [str(s.id) for s in scenarios]
    labels = {str(s.id): s.name for s in scenarios}
    base_id = st.selectbox(
        "Base scenario",
        options=ids,
        index=ids.index(str(default_base.id)) if default_base is not None else 0,
        format_func=lambda sid: labels[sid],
    )
    base, others = select_base_scenario(scenarios, base_id=base_id)
    selected = st.multiselect(
        "Compare against",
        options=[str(s.id) for s in others],
        default=[str(s.id) for s in others],
        format_func=lambda sid: labels[sid],
    )
    others = [s for s in others if str(s.id) in selected]

    summary = generate_comparison_summary(base, others)
    if summary is None:
        st.info(NO_SCENARIOS_MESSAGE)
        return

    ordered = [base, *others]
    strategies = generate_strategic_recommendations(ordered, summary.differences)

    c1, c2, c3 = st.columns(3)
    c1.metric("Best After-Tax Income", summary.recommendations["bestAfterTaxIncome"])
    c2.metric("Lowest Total Tax", summary.recommendations["lowestTotalTax"])
    c3.metric("Best Effective Rate", summary.recommendations["bestEffectiveRate"])

    st.markdown("#### Side-by-Side Metrics")
    st.dataframe(side_by_side_rows(ordered), use_container_width=True)

    st.markdown("#### Changes vs Base")
    st.dataframe(delta_rows(summary), use_container_width=True)

    st.markdown("#### Insights")
    for group in summary.insights:
        st.markdown(f"**{group.scenario_name}**")
        if not group.insights:
            st.caption("No significant changes.")
        for insight in group.insights:
            if insight.type == "positive":
                st.success(f"{insight.category}: {insight.message}")
            elif insight.type == "negative":
                st.error(f"{insight.category}: {insight.message}")
            else:
                st.warning(f"{insight.category}: {insight.message}")

    st.markdown("#### Rankings")
    metric = st.selectbox(
        "Rank by",
        options=list(METRIC_FIELDS),
        index=list(METRIC_FIELDS).index("afterTaxIncome"),
        format_func=lambda key: METRIC_DEFINITIONS[key].label,
    )
    st.dataframe(ranking_rows(ordered, metric), use_container_width=True)

    st.markdown("#### Strategic Recommendations")
    st.caption(summarize_recommendations(strategies)["summary"])
    for rec in strategies:
        st.markdown(f"- **[{rec.priority.upper()}] {rec.title}**: {rec.description}")

    st.download_button(
        "Download Summary JSON",
        data=json.dumps(summary_to_json(summary, strategies), indent=2),
        file_name="scenario_comparison.json",
        mime="application/json",
    )
    st.download_button(
        "Download Report Markdown",
        data=summary_to_markdown(summary, ordered, strategies),
        file_name="scenario_comparison.md",
        mime="text/markdown",
    )
    st.download_button(
        "Download Differences CSV",
        data=differences_to_csv(summary),
        file_name="scenario_differences.csv",
        mime="text/csv",
    )


if __name__ == "__main__":
    main()
