"""Full and quick comparisons, plus the reasoning, key differences, caveats and summary text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import structlog

from .models import AlternativeOption, PlanDetails, UserHealthProfile
from .scenarios import DEFAULT_SIMULATION, MODERATE, DefaultUsage, SimulationConfig
from .scoring import (
    DEFAULT_SCORING,
    DimensionScore,
    OverallWinner,
    ScenarioComparison,
    ScoringConfig,
    score,
    score_cost,
)
from .simulator import major_medical_exposure

logger = structlog.get_logger()


@dataclass(frozen=True)
class MajorMedicalExposure:
    plan_a: float
    plan_b: float
    winner: str


@dataclass(frozen=True)
class ComparisonResult:
    plan_a: PlanDetails
    plan_b: PlanDetails
    scenarios: List[ScenarioComparison]
    dimensions: List[DimensionScore]
    overall_winner: OverallWinner
    reasoning: str
    key_differences: List[str]
    caveats: List[str]
    summary: str
    major_medical: MajorMedicalExposure
    alternatives: List[AlternativeOption]
    personalized: bool


@dataclass(frozen=True)
class QuickResult:
    plan_a_annual_cost: float
    plan_b_annual_cost: float
    cost_delta: float  # positive when plan A costs more
    winner: str
    winner_plan_id: Optional[str]
    cheaper_monthly: str
    better_protection: str
    summary: str
    moderate_plan_a_cost: Optional[float] = None
    moderate_plan_b_cost: Optional[float] = None
    moderate_cost_delta: Optional[float] = None


def _lower(value_a: float, value_b: float) -> str:
    if value_a < value_b:
        return "A"
    if value_b < value_a:
        return "B"
    return "tie"


def _money(amount: float) -> str:
    return f"${amount:,.0f}"


# ---------------------------------------------------------------------------
# Narrative
# ---------------------------------------------------------------------------

def build_reasoning(
    dimensions: Sequence[DimensionScore],
    overall: OverallWinner,
    plan_a: PlanDetails,
    plan_b: PlanDetails,
) -> str:
    """
    Lead with the dimension that carries the win, then name every dimension where
    the other plan still leads so a one-sided verdict is never overstated.
    """
    if overall.equivalent:
        return overall.rationale

    winner = overall.plan
    loser_plan = plan_b if winner == "A" else plan_a
    won = [d for d in dimensions if d.winner == winner]
    lost = [d for d in dimensions if d.winner not in (winner, "tie")]

    parts: List[str] = []
    if won:
        dominant = max(won, key=lambda d: abs(d.weighted_margin))
        parts.append(dominant.rationale)
    else:
        parts.append(overall.rationale)

    for dim in lost:
        parts.append(f"However, {loser_plan.name} still leads on {dim.label}: {dim.rationale}")
    return " ".join(parts)


def identify_key_differences(
    plan_a: PlanDetails,
    plan_b: PlanDetails,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> List[str]:
    differences: List[str] = []

    premium_diff = abs(plan_a.monthly_premium - plan_b.monthly_premium)
    if premium_diff > scoring.threshold("premium"):
        cheaper = plan_a if plan_a.monthly_premium < plan_b.monthly_premium else plan_b
        differences.append(f"{cheaper.name} has a {_money(premium_diff)} lower monthly premium.")

    deductible_diff = abs(plan_a.deductible - plan_b.deductible)
    if deductible_diff > scoring.threshold("deductible"):
        lower = plan_a if plan_a.deductible < plan_b.deductible else plan_b
        differences.append(f"{lower.name} has a {_money(deductible_diff)} lower deductible.")

    oop_diff = abs(plan_a.out_of_pocket_max - plan_b.out_of_pocket_max)
    if oop_diff > scoring.threshold("out_of_pocket_max"):
        lower = plan_a if plan_a.out_of_pocket_max < plan_b.out_of_pocket_max else plan_b
        differences.append(f"{lower.name} has a {_money(oop_diff)} lower out-of-pocket maximum.")

    if plan_a.type != plan_b.type:
        differences.append(
            f"{plan_a.name} is a {plan_a.type.value} plan while {plan_b.name} is a {plan_b.type.value} plan."
        )

    if plan_a.quality_rating is not None and plan_b.quality_rating is not None:
        if abs(plan_a.quality_rating - plan_b.quality_rating) >= 1:
            higher, other = (plan_a, plan_b) if plan_a.quality_rating > plan_b.quality_rating else (plan_b, plan_a)
            differences.append(
                f"{higher.name} has a higher quality rating "
                f"({higher.quality_rating:g} vs {other.quality_rating:g} stars)."
            )

    if bool(plan_a.hsa_eligible) != bool(plan_b.hsa_eligible):
        hsa = plan_a if plan_a.hsa_eligible else plan_b
        differences.append(f"{hsa.name} is HSA-eligible, offering tax advantages for healthcare savings.")

    return differences


def build_caveats(
    plan_a: PlanDetails,
    plan_b: PlanDetails,
    cost: DimensionScore,
    profile: Optional[UserHealthProfile],
) -> List[str]:
    if profile is None:
        return []

    caveats: List[str] = []
    lower_premium = _lower(plan_a.effective_monthly_premium, plan_b.effective_monthly_premium)
    if profile.prioritizes_lower_premium and cost.winner != "tie" and lower_premium not in ("tie", cost.winner):
        caveats.append(
            "While you prefer lower premiums, the higher-premium plan is expected to cost less overall given your healthcare needs."
        )
    if profile.has_chronic_conditions:
        protected = plan_a if plan_a.out_of_pocket_max <= plan_b.out_of_pocket_max else plan_b
        caveats.append(
            f"With a chronic condition, the lower out-of-pocket maximum of {protected.name} "
            f"({_money(protected.out_of_pocket_max)}) caps a bad year."
        )
    if profile.needs_specific_providers:
        caveats.append("Confirm your providers are in network for both plans before enrolling.")
    return caveats


def build_summary(plan_a: PlanDetails, plan_b: PlanDetails, overall: OverallWinner) -> str:
    if overall.equivalent:
        return (
            f"Both {plan_a.name} and {plan_b.name} are closely matched. "
            "Your choice should depend on your specific healthcare needs and preferences."
        )
    winner_plan, other_plan = (plan_a, plan_b) if overall.plan == "A" else (plan_b, plan_a)
    return (
        f"Based on this analysis, {winner_plan.name} appears to be the better choice with "
        f"{overall.confidence} confidence over {other_plan.name}."
    )


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def compare_plans(
    plan_a: PlanDetails,
    plan_b: PlanDetails,
    profile: Optional[UserHealthProfile] = None,
    alternatives: Optional[Sequence[AlternativeOption]] = None,
    simulation: SimulationConfig = DEFAULT_SIMULATION,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> ComparisonResult:
    """Full comparison: per-scenario cost tables, dimension scores, winner and narrative."""
    card = score(plan_a, plan_b, profile, simulation, scoring)

    major_a = major_medical_exposure(plan_a)
    major_b = major_medical_exposure(plan_b)

    result = ComparisonResult(
        plan_a=plan_a,
        plan_b=plan_b,
        scenarios=card.scenarios,
        dimensions=card.dimensions,
        overall_winner=card.overall,
        reasoning=build_reasoning(card.dimensions, card.overall, plan_a, plan_b),
        key_differences=identify_key_differences(plan_a, plan_b, scoring),
        caveats=build_caveats(plan_a, plan_b, card.dimension("cost"), profile),
        summary=build_summary(plan_a, plan_b, card.overall),
        major_medical=MajorMedicalExposure(plan_a=major_a, plan_b=major_b, winner=_lower(major_a, major_b)),
        alternatives=list(alternatives or []),
        personalized=card.personalized,
    )

    logger.debug(
        "comparison_assembled",
        plan_a=plan_a.id,
        plan_b=plan_b.id,
        winner=card.overall.plan,
        personalized=card.personalized,
    )
    return result


def quick_comparison(
    plan_a: PlanDetails,
    plan_b: PlanDetails,
    simulation: SimulationConfig = DEFAULT_SIMULATION,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> QuickResult:
    """
    Cost dimension only; no profile involved.

    The winner and `cost_delta` come from the average over the default
    Low/Moderate/High set, the same figure the full comparison scores without a
    profile. The Moderate scenario totals are reported alongside.
    """
    cost, table = score_cost(plan_a, plan_b, DefaultUsage(), simulation, scoring)
    moderate = next((row for row in table if row.name == MODERATE), None)

    if cost.winner == "A":
        winner_id: Optional[str] = plan_a.id
        summary = f"{plan_a.name} is cheaper: {cost.rationale}"
    elif cost.winner == "B":
        winner_id = plan_b.id
        summary = f"{plan_b.name} is cheaper: {cost.rationale}"
    else:
        winner_id = None
        summary = cost.rationale

    return QuickResult(
        plan_a_annual_cost=cost.plan_a_value,
        plan_b_annual_cost=cost.plan_b_value,
        cost_delta=cost.plan_a_value - cost.plan_b_value,
        winner=cost.winner,
        winner_plan_id=winner_id,
        cheaper_monthly=_lower(plan_a.effective_monthly_premium, plan_b.effective_monthly_premium),
        better_protection=_lower(plan_a.out_of_pocket_max, plan_b.out_of_pocket_max),
        summary=summary,
        moderate_plan_a_cost=moderate.plan_a.total if moderate else None,
        moderate_plan_b_cost=moderate.plan_b.total if moderate else None,
        moderate_cost_delta=moderate.difference if moderate else None,
    )


__all__ = [
    "ComparisonResult",
    "QuickResult",
    "MajorMedicalExposure",
    "build_reasoning",
    "identify_key_differences",
    "build_caveats",
    "build_summary",
    "compare_plans",
    "quick_comparison",
]
