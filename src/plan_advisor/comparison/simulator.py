"""Annual member cost for one plan under one usage scenario."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import structlog

from ..utils.numeric import clamp_money
from .models import PlanDetails
from .scenarios import DEFAULT_SIMULATION, ReferenceCosts, UsageScenario

logger = structlog.get_logger()

# Headroom over the deductible used for the worst-case "major medical event" reference.
MAJOR_EVENT_SPEND = 10_000.0


@dataclass(frozen=True)
class AnnualCost:
    scenario: str
    premiums: float
    copays: float
    deductible_paid: float
    coinsurance_paid: float
    out_of_pocket: float
    total: float
    hit_out_of_pocket_max: bool


def _service_lines(scenario: UsageScenario, costs: ReferenceCosts) -> List[Tuple[float, Optional[str], float]]:
    """(count, copay attribute or None, allowed cost per event) for each priced service."""
    lines = [
        (scenario.doctor_visits, "primary_care_copay", costs.primary_care),
        (scenario.specialist_visits, "specialist_copay", costs.specialist),
        (scenario.er_visits, "emergency_room_copay", costs.emergency_room),
        (scenario.generic_prescriptions, "generic_drug_copay", costs.generic_rx),
        (scenario.brand_prescriptions, "brand_drug_copay", costs.brand_rx),
        (scenario.specialty_prescriptions, None, costs.specialty_rx),
    ]
    if scenario.planned_procedure:
        procedure = scenario.procedure_cost if scenario.procedure_cost is not None else costs.procedure
        lines.append((1.0, None, procedure))
    return lines


def simulate(
    plan: PlanDetails,
    scenario: UsageScenario,
    costs: Optional[ReferenceCosts] = None,
) -> AnnualCost:
    """
    Project the member's annual cost for one plan under one usage scenario.

    Copay-governed services are charged their flat copay regardless of the
    deductible. Everything else is coinsurance-eligible spend priced at the
    reference allowed cost: the first `deductible` dollars are paid in full,
    coinsurance applies to the remainder, and the whole member-paid total is
    capped at the out-of-pocket maximum.
    """
    costs = costs or DEFAULT_SIMULATION.reference_costs

    copays = 0.0
    eligible_spend = 0.0
    for count, copay_field, allowed in _service_lines(scenario, costs):
        count = clamp_money(count)
        if count == 0:
            continue
        copay = plan.copay(copay_field) if copay_field else None
        if copay is not None:
            copays += count * copay
        else:
            eligible_spend += count * clamp_money(allowed)

    deductible = clamp_money(plan.deductible)
    oop_max = clamp_money(plan.out_of_pocket_max)
    rate = plan.coinsurance_rate
    if rate is None:
        rate = costs.default_coinsurance

    deductible_paid = min(eligible_spend, deductible)
    coinsurance_paid = (eligible_spend - deductible_paid) * rate / 100.0
    member_paid = copays + deductible_paid + coinsurance_paid
    out_of_pocket = clamp_money(min(oop_max, member_paid))
    premiums = clamp_money(12 * plan.effective_monthly_premium)

    return AnnualCost(
        scenario=scenario.name,
        premiums=premiums,
        copays=clamp_money(copays),
        deductible_paid=clamp_money(deductible_paid),
        coinsurance_paid=clamp_money(coinsurance_paid),
        out_of_pocket=out_of_pocket,
        total=clamp_money(premiums + out_of_pocket),
        hit_out_of_pocket_max=member_paid > 0 and member_paid >= oop_max,
    )


def simulate_all(
    plan: PlanDetails,
    scenarios: Iterable[UsageScenario],
    costs: Optional[ReferenceCosts] = None,
) -> List[AnnualCost]:
    return [simulate(plan, scenario, costs) for scenario in scenarios]


def major_medical_exposure(plan: PlanDetails) -> float:
    """Worst-case reference: premiums plus a serious-illness year bounded by the OOP max."""
    premiums = 12 * plan.effective_monthly_premium
    exposure = min(clamp_money(plan.out_of_pocket_max), clamp_money(plan.deductible) + MAJOR_EVENT_SPEND)
    return clamp_money(premiums + exposure)


__all__ = ["AnnualCost", "simulate", "simulate_all", "major_medical_exposure", "MAJOR_EVENT_SPEND"]
