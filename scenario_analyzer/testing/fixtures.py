#!/usr/bin/env python3
"""
Builds synthetic scenario sets for tests and demos.

Usage: python -m scenario_analyzer.testing.fixtures <output_dir>
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from scenario_analyzer.core import NormalizedScenario


def make_raw_scenario(
    scenario_id: Any,
    name: str | None = None,
    is_active: bool = False,
    description: str | None = None,
    **calculations: Any,
) -> dict[str, Any]:
    """Raw scenario record shaped like the planning app's stored scenarios."""
    scenario: dict[str, Any] = {
        "id": scenario_id,
        "isActive": is_active,
        "data": {"calculations": dict(calculations)},
    }
    if name is not None:
        scenario["name"] = name
    if description is not None:
        scenario["description"] = description
    return scenario


def sample_scenarios() -> list[dict[str, Any]]:
    return [
        make_raw_scenario(
            1,
            "Base Case",
            is_active=True,
            totalIncome=180000,
            ordinaryIncome=150000,
            capitalGains=10000,
            socialSecurityIncome=20000,
            federalTax=28000,
            stateTax=7000,
            ficaTax=0,
            totalTax=35000,
            marginalRate=24,
            standardDeduction=29200,
            totalDeductions=29200,
            taxableIncome=150800,
            irmaaAmount=1200,
            medicarePartB=2800,
            medicarePartD=400,
        ),
        make_raw_scenario(
            2,
            "Roth Conversion",
            totalIncome=220000,
            ordinaryIncome=190000,
            capitalGains=10000,
            socialSecurityIncome=20000,
            federalTax=38000,
            stateTax=8600,
            totalTax=46600,
            marginalRate=32,
            standardDeduction=29200,
            totalDeductions=29200,
            taxableIncome=190800,
            irmaaAmount=2600,
            medicarePartB=4200,
            medicarePartD=900,
        ),
        make_raw_scenario(
            3,
            "Delay Capital Gains",
            totalIncome=170000,
            ordinaryIncome=150000,
            capitalGains=0,
            socialSecurityIncome=20000,
            federalTax=25500,
            stateTax=6600,
            totalTax=32100,
            marginalRate=22,
            standardDeduction=29200,
            totalDeductions=29200,
            taxableIncome=140800,
            irmaaAmount=0,
            medicarePartB=2100,
            medicarePartD=0,
        ),
    ]


def make_normalized_scenario(
    scenario_id: Any,
    name: str,
    is_active: bool = False,
    **metrics: float,
) -> NormalizedScenario:
    """Normalized scenario carrying only the given metrics."""
    return NormalizedScenario(id=scenario_id, name=name, description="", is_active=is_active, metrics=dict(metrics))


def make_client_backup(clients: list[dict[str, Any]]) -> dict[str, Any]:
    return {"version": "1.0", "timestamp": "2025-01-01T00:00:00Z", "clients": clients}


def make_client(
    client_id: str,
    client_name: str,
    scenarios: list[dict[str, Any]],
    is_active: bool = False,
) -> dict[str, Any]:
    return {
        "id": client_id,
        "profile": {"clientName": client_name, "isActive": is_active},
        "scenarios": scenarios,
    }


def write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python -m scenario_analyzer.testing.fixtures <output_dir>")
        sys.exit(1)

    output_dir = Path(sys.argv[1])
    scenarios = sample_scenarios()
    direct = write_json(output_dir / "scenarios.json", {"version": "1.0", "scenarios": scenarios})
    backup = write_json(
        output_dir / "client_backup.json",
        make_client_backup([make_client("client-1", "Sample Household", scenarios, is_active=True)]),
    )
    print(f"Generated scenario set: {direct}")
    print(f"Generated client backup: {backup}")


if __name__ == "__main__":
    main()
