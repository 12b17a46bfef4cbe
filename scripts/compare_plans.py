#!/usr/bin/env python3
"""
compare_plans.py
~~~~~~~~~~~~~~~~
Console front end for the two engines. Reads a YAML or JSON request file and
either compares `planA` against `planB` (optionally personalised by
`userProfile`) or, with `--add-ons`, scores the supplemental catalog for the
household `ages` listed in the file.

    python scripts/compare_plans.py --input request.yaml
    python scripts/compare_plans.py --input request.json --quick --json
    python scripts/compare_plans.py --input household.yaml --add-ons
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict

import structlog
import yaml

from plan_advisor.addons import (
    AddOnConfig,
    catalog_from_config,
    load_catalog,
    preferences_from_mapping,
    risk_factors_from_mapping,
    score_add_ons,
)
from plan_advisor.comparison import (
    ScoringConfig,
    SimulationConfig,
    alternative_from_mapping,
    compare_plans,
    plan_from_mapping,
    profile_from_mapping,
    quick_comparison,
)
from plan_advisor.config import load_config, section
from plan_advisor.errors import ShapeError
from plan_advisor.log import configure_logging

logger = structlog.get_logger()


def _read_request(path: Path) -> Dict[str, Any]:
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ShapeError("input", "expected an object at the top level")
    return data


def _print_comparison(result) -> None:
    a, b = result.plan_a, result.plan_b
    overall = result.overall_winner
    print(f"\n=== PLAN COMPARISON → {a.name} vs {b.name} ===")
    print(" Annual cost by scenario:")
    for row in result.scenarios:
        marker = {"A": a.name, "B": b.name}.get(row.winner, "tie")
        print(f"   {row.name:>12}: A ${row.plan_a.total:>10,.0f} | B ${row.plan_b.total:>10,.0f}  → {marker}")
    print(" Dimensions:")
    for dim in result.dimensions:
        print(f"   {dim.label:>16}: winner {dim.winner:<3} (weight {dim.weight:g}, margin {dim.margin:,.2f})")
    if overall.equivalent:
        print(" Overall: no material difference")
    else:
        print(f" Overall: Plan {overall.plan} ({overall.confidence} confidence, {overall.plan_a_wins}-{overall.plan_b_wins})")
    print(f"\n {result.reasoning}")
    if result.key_differences:
        print("\n Key differences:")
        for line in result.key_differences:
            print(f"  • {line}")
    if result.caveats:
        print("\n Caveats:")
        for line in result.caveats:
            print(f"  • {line}")
    print(
        f"\n Major medical year: A ${result.major_medical.plan_a:,.0f} | "
        f"B ${result.major_medical.plan_b:,.0f}"
    )
    print(f"\n {result.summary}")


def _print_quick(result) -> None:
    print("\n=== QUICK COMPARISON ===")
    print(f" Average annual cost: A ${result.plan_a_annual_cost:,.0f} | B ${result.plan_b_annual_cost:,.0f}")
    if result.moderate_plan_a_cost is not None:
        print(f" Moderate year: A ${result.moderate_plan_a_cost:,.0f} | B ${result.moderate_plan_b_cost:,.0f}")
    print(f" Cheaper monthly: {result.cheaper_monthly}; better protection: {result.better_protection}")
    print(f" {result.summary}")


def _print_add_ons(analysis) -> None:
    groups = ", ".join(f"{g.group_name} ({g.member_count})" for g in analysis.household_age_groups)
    print(f"\n=== ADD-ON RECOMMENDATIONS → {groups or 'empty household'} ===")
    if not analysis.recommendations:
        print(" No supplemental coverage clears the recommendation threshold.")
    for rec in analysis.recommendations:
        print(
            f"  [{rec.priority.value.upper():6}] {rec.insurance.name}: "
            f"{rec.probability_score:.0f}% fit, ${rec.household_cost_per_month:,.2f}/mo "
            f"for {rec.applicable_members} member(s), {rec.age_group}"
        )
        for reason in rec.reasons:
            print(f"           • {reason}")
    print(
        f"\n Monthly totals: high ${analysis.total_monthly_high_priority:,.2f} | "
        f"medium ${analysis.total_monthly_medium_priority:,.2f} | "
        f"low ${analysis.total_monthly_low_priority:,.2f} | "
        f"all ${analysis.total_monthly_all_recommended:,.2f}"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Compare two health plans or recommend supplemental coverage.")
    parser.add_argument("--input", required=True, help="YAML or JSON request file")
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml (defaults apply if absent)")
    parser.add_argument("--quick", action="store_true", help="Cost-only comparison over the default scenarios")
    parser.add_argument("--add-ons", action="store_true", help="Score supplemental products for the household ages")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON instead of a narrative")
    parser.add_argument("--log-level", default="WARNING", help="structlog/stdlib level")
    args = parser.parse_args()

    configure_logging(args.log_level, fmt="console")

    cfg = load_config(args.config) if Path(args.config).exists() else {}
    request = _read_request(Path(args.input))

    try:
        if args.add_ons:
            addons_cfg = section(cfg, "addons")
            catalog = load_catalog(request["catalog"]) if request.get("catalog") is not None else catalog_from_config(addons_cfg)
            result = score_add_ons(
                catalog,
                [int(a) for a in request.get("ages") or []],
                preferences_from_mapping(request.get("preferences")),
                risk_factors_from_mapping(request.get("riskFactors")),
                float(request.get("stateAdjustmentFactor", 1.0)),
                AddOnConfig.from_mapping(addons_cfg),
            )
            printer = _print_add_ons
        else:
            simulation = SimulationConfig.from_mapping(section(cfg, "simulation"))
            scoring = ScoringConfig.from_mapping(section(cfg, "scoring"))
            plan_a = plan_from_mapping(request.get("planA"), "planA")
            plan_b = plan_from_mapping(request.get("planB"), "planB")
            if args.quick:
                result = quick_comparison(plan_a, plan_b, simulation, scoring)
                printer = _print_quick
            else:
                result = compare_plans(
                    plan_a,
                    plan_b,
                    profile_from_mapping(request.get("userProfile")),
                    [alternative_from_mapping(alt) for alt in request.get("alternatives") or []],
                    simulation,
                    scoring,
                )
                printer = _print_comparison
    except ShapeError as exc:
        logger.error("invalid_input", field=exc.field, error=str(exc))
        print(f"Invalid input: {exc}", file=sys.stderr)
        sys.exit(2)

    if args.json:
        print(json.dumps(asdict(result), indent=2, default=str))
    else:
        printer(result)


if __name__ == "__main__":
    main()
