from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from scenario_analyzer.core import NormalizedScenario, as_number

DEFAULT_RANKING_METRIC = "afterTaxIncome"
# Surcharge and tax metrics rank ascending; everything else ranks descending.
LOWER_IS_BETTER_METRICS = frozenset({"totalTax", "federalTax", "stateTax", "ficaTax", "irmaaAmount"})


@dataclass
class RankedScenario(NormalizedScenario):
    rank: int
    is_best: bool
    is_worst: bool

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update({"rank": self.rank, "isBest": self.is_best, "isWorst": self.is_worst})
        return payload


def is_lower_better(metric: str) -> bool:
    return metric in LOWER_IS_BETTER_METRICS


def rank_scenarios(
    scenarios: Sequence[NormalizedScenario] | None,
    metric: str = DEFAULT_RANKING_METRIC,
) -> list[RankedScenario]:
    """
    Order scenarios best-first by `metric`.

    Ties keep their input order. Rank 1 is flagged best and the last rank
    worst; a single scenario is both.
    """
    if not scenarios:
        return []

    ordered = sorted(
        scenarios,
        key=lambda scenario: as_number((scenario.metrics or {}).get(metric)),
        reverse=not is_lower_better(metric),
    )
    last = len(ordered) - 1
    return [
        RankedScenario(
            id=scenario.id,
            name=scenario.name,
            description=scenario.description,
            is_active=scenario.is_active,
            metrics=dict(scenario.metrics or {}),
            rank=index + 1,
            is_best=index == 0,
            is_worst=index == last,
        )
        for index, scenario in enumerate(ordered)
    ]
