#!/usr/bin/env python3

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, NamedTuple

logger = logging.getLogger(__name__)

METRIC_FIELDS = (
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
    "itemizedDeductions",
    "totalDeductions",
    "taxableIncome",
    "irmaaAmount",
    "medicarePartB",
    "medicarePartD",
)
# Metrics computed from other fields rather than read from `data.calculations`.
DERIVED_METRICS = frozenset({"effectiveRate", "afterTaxIncome"})

TREND_INCREASE = "increase"
TREND_DECREASE = "decrease"
TREND_UNCHANGED = "unchanged"


class MetricDefinition(NamedTuple):
    label: str
    kind: str  # "currency" | "percentage"
    inverse: bool  # a decrease is the favorable direction


METRIC_DEFINITIONS: dict[str, MetricDefinition] = {
    "totalIncome": MetricDefinition("Total Income", "currency", False),
    "ordinaryIncome": MetricDefinition("Ordinary Income", "currency", False),
    "capitalGains": MetricDefinition("Capital Gains", "currency", False),
    "socialSecurityIncome": MetricDefinition("Social Security Income", "currency", False),
    "federalTax": MetricDefinition("Federal Tax", "currency", True),
    "stateTax": MetricDefinition("State Tax", "currency", True),
    "ficaTax": MetricDefinition("FICA Tax", "currency", True),
    "totalTax": MetricDefinition("Total Tax", "currency", True),
    "marginalRate": MetricDefinition("Marginal Rate", "percentage", True),
    "effectiveRate": MetricDefinition("Effective Rate", "percentage", True),
    "afterTaxIncome": MetricDefinition("After-Tax Income", "currency", False),
    "standardDeduction": MetricDefinition("Standard Deduction", "currency", False),
    "itemizedDeductions": MetricDefinition("Itemized Deductions", "currency", False),
    "totalDeductions": MetricDefinition("Total Deductions", "currency", False),
    "taxableIncome": MetricDefinition("Taxable Income", "currency", True),
    "irmaaAmount": MetricDefinition("IRMAA Surcharges", "currency", True),
    "medicarePartB": MetricDefinition("Medicare Part B", "currency", True),
    "medicarePartD": MetricDefinition("Medicare Part D", "currency", True),
}


class ScenarioNotFoundError(LookupError):
    """Raised when a caller names a scenario or client that is not present."""

    pass


@dataclass
class NormalizedScenario:
    id: Any
    name: str
    description: str
    is_active: bool
    metrics: dict[str, float]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "isActive": self.is_active,
            "metrics": dict(self.metrics),
        }


@dataclass
class MetricDifference:
    base: float
    compare: float
    absolute: float
    percent: float
    trend: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "base": self.base,
            "compare": self.compare,
            "absolute": self.absolute,
            "percent": self.percent,
            "trend": self.trend,
        }


@dataclass
class ScenarioDifference:
    scenario_id: Any
    scenario_name: str
    differences: dict[str, MetricDifference] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenarioId": self.scenario_id,
            "scenarioName": self.scenario_name,
            "differences": {key: diff.to_dict() for key, diff in self.differences.items()},
        }


def as_number(value: Any, fallback: float = 0.0) -> float:
    """Coerce a loosely typed source value to a finite float."""
    if value is None or isinstance(value, bool):
        return fallback
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return number


def as_mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def build_metrics(calculations: dict[str, Any]) -> dict[str, float]:
    values = {key: as_number(calculations.get(key)) for key in METRIC_FIELDS if key not in DERIVED_METRICS}

    total_income = values["totalIncome"]
    total_tax = values["totalTax"]
    # Derived values can overflow even when every input is finite.
    effective_rate = as_number(total_tax / total_income * 100) if total_income > 0 else 0.0
    after_tax_income = as_number(total_income - total_tax)

    metrics: dict[str, float] = {}
    for key in METRIC_FIELDS:
        if key == "effectiveRate":
            metrics[key] = effective_rate
        elif key == "afterTaxIncome":
            metrics[key] = after_tax_income
        else:
            metrics[key] = values[key]
    return metrics


def normalize_scenario(raw: Any) -> NormalizedScenario:
    scenario = as_mapping(raw)
    data = as_mapping(scenario.get("data"))
    calculations = as_mapping(data.get("calculations"))

    scenario_id = scenario.get("id")
    name = scenario.get("name") or f"Scenario {scenario_id}"
    description = scenario.get("description") or ""

    return NormalizedScenario(
        id=scenario_id,
        name=str(name),
        description=str(description),
        is_active=bool(scenario.get("isActive", False)),
        metrics=build_metrics(calculations),
    )


def aggregate_scenario_data(scenarios: Any) -> list[NormalizedScenario] | None:
    """
    Normalize raw scenario records into fixed-schema metric records.

    Returns None when there is nothing to normalize (None, a non-list, or an
    empty list). Individual malformed entries degrade to all-zero metrics.
    """
    if not scenarios or not isinstance(scenarios, (list, tuple)):
        return None

    normalized = [normalize_scenario(raw) for raw in scenarios]
    missing = sum(
        1
        for raw in scenarios
        if not as_mapping(as_mapping(as_mapping(raw).get("data")).get("calculations"))
    )
    if missing:
        logger.debug("%d of %d scenarios have no calculations; metrics default to 0", missing, len(scenarios))
    return normalized


def select_base_scenario(
    scenarios: Iterable[NormalizedScenario] | None,
    base_id: Any = None,
) -> tuple[NormalizedScenario | None, list[NormalizedScenario]]:
    """
    Split scenarios into (base, others).

    The base is the scenario matching `base_id` when given, else the first
    active scenario, else the first scenario.
    """
    pool = list(scenarios or [])
    if not pool:
        return None, []

    if base_id is not None:
        wanted = str(base_id)
        base_index = next((i for i, s in enumerate(pool) if str(s.id) == wanted), None)
        if base_index is None:
            raise ScenarioNotFoundError(f"No scenario with id {base_id!r}")
    else:
        base_index = next((i for i, s in enumerate(pool) if s.is_active), 0)

    base = pool[base_index]
    others = pool[:base_index] + pool[base_index + 1 :]
    return base, others


def classify_trend(absolute: float) -> str:
    if absolute > 0:
        return TREND_INCREASE
    if absolute < 0:
        return TREND_DECREASE
    return TREND_UNCHANGED


def format_currency(value: Any) -> str:
    """Whole-dollar currency, e.g. 12345.6 -> "$12,346"."""
    if value is None or isinstance(value, bool):
        return "$0"
    number = as_number(value)
    rounded = Decimal(str(number)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    if rounded < 0:
        return f"-${-rounded:,.0f}"
    return f"${rounded:,.0f}"


def format_percentage(rate: Any) -> str:
    """Percentage points with two decimals, e.g. 12.3456 -> "12.35%"."""
    return f"{as_number(rate):.2f}%"


def format_comparison_value(value: Any, kind: str = "currency") -> str:
    if value is None:
        return "N/A"
    if kind == "currency":
        return format_currency(value)
    if kind == "percentage":
        return format_percentage(value)
    if kind == "number":
        number = as_number(value)
        return f"{number:,.0f}" if number.is_integer() else f"{number:,.2f}"
    return str(value)


def format_difference(diff: MetricDifference | None, kind: str = "currency") -> str:
    if diff is None or diff.absolute == 0:
        return "—"
    sign = "+" if diff.absolute > 0 else "-"
    if kind == "currency":
        return f"{sign}{format_currency(abs(diff.absolute))} ({sign}{abs(diff.percent):.1f}%)"
    if kind == "percentage":
        return f"{sign}{abs(diff.absolute):.2f}pp"
    return f"{sign}{abs(diff.absolute):,}"


def comparison_direction(absolute: float, inverse: bool = False) -> str:
    if absolute == 0:
        return "neutral"
    favorable = absolute < 0 if inverse else absolute > 0
    return "favorable" if favorable else "unfavorable"
