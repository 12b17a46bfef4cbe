"""
Four-dimension plan scoring: cost, coverage, quality and risk fit.

Each dimension yields a `DimensionScore` with a winner, a normalised margin and
a rationale sentence; `determine_overall_winner` weighs them into an
`OverallWinner`, keeping an explicit equivalent state when nothing separates
the plans.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np
import structlog

from ..utils.numeric import clamp_money, optional_amount
from .models import PlanDetails, RiskTolerance, UserHealthProfile
from .scenarios import (
    DEFAULT_SIMULATION,
    DefaultUsage,
    PersonalizedUsage,
    SimulationConfig,
    UsageContext,
    build_scenarios,
    resolve_usage_context,
)
from .simulator import AnnualCost, simulate_all

logger = structlog.get_logger()

COST = "cost"
COVERAGE = "coverage"
QUALITY = "quality"
RISK_FIT = "risk_fit"

DIMENSIONS: Tuple[str, ...] = (COST, COVERAGE, QUALITY, RISK_FIT)

DIMENSION_LABELS: Dict[str, str] = {
    COST: "annual cost",
    COVERAGE: "coverage breadth",
    QUALITY: "quality rating",
    RISK_FIT: "risk fit",
}

# Cost and risk fit dominate coverage and quality 2:1 when wins are split.
DEFAULT_WEIGHTS: Dict[str, float] = {
    COST: 2.0,
    RISK_FIT: 2.0,
    COVERAGE: 1.0,
    QUALITY: 1.0,
}

# (exposure weight, premium weight) per risk tolerance.
RISK_WEIGHTS: Dict[RiskTolerance, Tuple[float, float]] = {
    RiskTolerance.LOW: (0.75, 0.25),
    RiskTolerance.MEDIUM: (0.5, 0.5),
    RiskTolerance.HIGH: (0.25, 0.75),
}

DEFAULT_KEY_DIFFERENCE_THRESHOLDS: Dict[str, float] = {
    "premium": 50.0,
    "deductible": 500.0,
    "out_of_pocket_max": 1000.0,
}

NEUTRAL_QUALITY = 3.0
HSA_BONUS = 1.0
SMALL_EPS = 1e-6


@dataclass(frozen=True)
class ScoringConfig:
    weights: Tuple[Tuple[str, float], ...]
    neutral_quality: float
    key_difference_thresholds: Tuple[Tuple[str, float], ...]

    def weight(self, dimension: str) -> float:
        return dict(self.weights).get(dimension, 1.0)

    def threshold(self, key: str) -> float:
        return dict(self.key_difference_thresholds).get(key, 0.0)

    @staticmethod
    def from_mapping(mapping: Optional[Mapping[str, Any]] = None) -> "ScoringConfig":
        mapping = mapping or {}
        weights = dict(DEFAULT_WEIGHTS)
        for key, value in (mapping.get("weights") or {}).items():
            if key in weights and optional_amount(value) is not None:
                weights[key] = float(value)
        thresholds = dict(DEFAULT_KEY_DIFFERENCE_THRESHOLDS)
        for key, value in (mapping.get("key_difference_thresholds") or {}).items():
            if key in thresholds and optional_amount(value) is not None:
                thresholds[key] = float(value)
        neutral = optional_amount(mapping.get("neutral_quality"))
        return ScoringConfig(
            weights=tuple((d, weights[d]) for d in DIMENSIONS),
            neutral_quality=neutral if neutral is not None else NEUTRAL_QUALITY,
            key_difference_thresholds=tuple(thresholds.items()),
        )


DEFAULT_SCORING = ScoringConfig.from_mapping()


@dataclass(frozen=True)
class DimensionScore:
    name: str
    label: str
    plan_a_value: float
    plan_b_value: float
    winner: str  # "A", "B" or "tie"
    margin: float  # signed, positive favours plan A
    normalized_margin: float
    weight: float
    rationale: str

    @property
    def weighted_margin(self) -> float:
        return self.weight * self.normalized_margin


@dataclass(frozen=True)
class ScenarioComparison:
    name: str
    description: str
    plan_a: AnnualCost
    plan_b: AnnualCost
    difference: float  # positive when plan A costs more
    winner: str


@dataclass(frozen=True)
class OverallWinner:
    plan: str  # "A" or "B"
    plan_id: str
    margin: float
    plan_a_wins: int
    plan_b_wins: int
    confidence: str
    equivalent: bool
    rationale: str


@dataclass(frozen=True)
class ScoreCard:
    dimensions: List[DimensionScore]
    scenarios: List[ScenarioComparison]
    overall: OverallWinner
    risk_tolerance: str
    personalized: bool

    def dimension(self, name: str) -> DimensionScore:
        for dim in self.dimensions:
            if dim.name == name:
                return dim
        raise KeyError(name)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _winner_label(margin: float) -> str:
    if margin > 0:
        return "A"
    if margin < 0:
        return "B"
    return "tie"


def _compare(value_a: float, value_b: float, prefer: str) -> Tuple[float, float, str]:
    """Signed margin (positive favours A), normalized margin and winner label."""
    margin = (value_b - value_a) if prefer == "lower" else (value_a - value_b)
    if abs(margin) <= SMALL_EPS:
        return 0.0, 0.0, "tie"
    scale = max(abs(value_a), abs(value_b))
    normalized = margin / scale if scale > SMALL_EPS else 0.0
    return float(margin), float(normalized), _winner_label(margin)


def _pick(winner: str, plan_a: PlanDetails, plan_b: PlanDetails, value_a: float, value_b: float):
    if winner == "A":
        return plan_a, value_a, value_b
    return plan_b, value_b, value_a


def _risk_tolerance(context: UsageContext) -> RiskTolerance:
    if isinstance(context, PersonalizedUsage):
        return context.profile.risk_tolerance
    return RiskTolerance.MEDIUM


# ---------------------------------------------------------------------------
# Dimensions
# ---------------------------------------------------------------------------

def score_cost(
    plan_a: PlanDetails,
    plan_b: PlanDetails,
    context: Optional[UsageContext] = None,
    simulation: SimulationConfig = DEFAULT_SIMULATION,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> Tuple[DimensionScore, List[ScenarioComparison]]:
    """Average annual cost across the context's scenarios; lower wins."""
    context = context or DefaultUsage()
    scenarios = build_scenarios(context, simulation)
    costs_a = simulate_all(plan_a, scenarios, simulation.reference_costs)
    costs_b = simulate_all(plan_b, scenarios, simulation.reference_costs)

    table: List[ScenarioComparison] = []
    for scenario, cost_a, cost_b in zip(scenarios, costs_a, costs_b):
        _, _, winner = _compare(cost_a.total, cost_b.total, "lower")
        table.append(
            ScenarioComparison(
                name=scenario.name,
                description=scenario.description,
                plan_a=cost_a,
                plan_b=cost_b,
                difference=cost_a.total - cost_b.total,
                winner=winner,
            )
        )

    avg_a = clamp_money(np.mean([c.total for c in costs_a]))
    avg_b = clamp_money(np.mean([c.total for c in costs_b]))
    margin, normalized, winner = _compare(avg_a, avg_b, "lower")

    n = len(scenarios)
    if winner == "tie":
        rationale = f"Both plans cost about the same per year on average across {n} usage scenarios (${avg_a:,.0f})."
    else:
        plan, best, other = _pick(winner, plan_a, plan_b, avg_a, avg_b)
        rationale = (
            f"{plan.name} costs ${other - best:,.0f} less per year on average across {n} usage scenarios "
            f"(${best:,.0f} vs ${other:,.0f})."
        )

    dim = DimensionScore(
        name=COST,
        label=DIMENSION_LABELS[COST],
        plan_a_value=avg_a,
        plan_b_value=avg_b,
        winner=winner,
        margin=margin,
        normalized_margin=normalized,
        weight=scoring.weight(COST),
        rationale=rationale,
    )
    return dim, table


def coverage_points(plan: PlanDetails) -> float:
    return float(plan.defined_copays) + (HSA_BONUS if plan.hsa_eligible else 0.0)


def score_coverage(plan_a: PlanDetails, plan_b: PlanDetails, scoring: ScoringConfig = DEFAULT_SCORING) -> DimensionScore:
    value_a, value_b = coverage_points(plan_a), coverage_points(plan_b)
    margin, normalized, winner = _compare(value_a, value_b, "higher")
    if winner == "tie":
        rationale = f"Both plans offer the same coverage breadth ({value_a:g} points)."
    else:
        plan, best, other = _pick(winner, plan_a, plan_b, value_a, value_b)
        rationale = f"{plan.name} sets fixed copays for more services ({best:g} vs {other:g} coverage points, HSA eligibility included)."
    return DimensionScore(
        name=COVERAGE,
        label=DIMENSION_LABELS[COVERAGE],
        plan_a_value=value_a,
        plan_b_value=value_b,
        winner=winner,
        margin=margin,
        normalized_margin=normalized,
        weight=scoring.weight(COVERAGE),
        rationale=rationale,
    )


def quality_value(plan: PlanDetails, neutral: float = NEUTRAL_QUALITY) -> float:
    rating = optional_amount(plan.quality_rating)
    if rating is None or not 1 <= rating <= 5:
        return neutral
    return rating


def score_quality(plan_a: PlanDetails, plan_b: PlanDetails, scoring: ScoringConfig = DEFAULT_SCORING) -> DimensionScore:
    value_a = quality_value(plan_a, scoring.neutral_quality)
    value_b = quality_value(plan_b, scoring.neutral_quality)
    margin, normalized, winner = _compare(value_a, value_b, "higher")
    if winner == "tie":
        rationale = f"Both plans score {value_a:.1f} stars on quality."
    else:
        plan, best, other = _pick(winner, plan_a, plan_b, value_a, value_b)
        rationale = f"{plan.name} has a higher quality rating ({best:.1f} vs {other:.1f} stars)."
    if plan_a.quality_rating is None or plan_b.quality_rating is None:
        rationale += f" Unrated plans are scored at {scoring.neutral_quality:g} stars."
    return DimensionScore(
        name=QUALITY,
        label=DIMENSION_LABELS[QUALITY],
        plan_a_value=value_a,
        plan_b_value=value_b,
        winner=winner,
        margin=margin,
        normalized_margin=normalized,
        weight=scoring.weight(QUALITY),
        rationale=rationale,
    )


def risk_exposure(plan: PlanDetails, tolerance: RiskTolerance) -> float:
    """Blend of deductible/OOP exposure and annual premium; lower is a better fit."""
    exposure_weight, premium_weight = RISK_WEIGHTS[tolerance]
    exposure = (clamp_money(plan.deductible) + clamp_money(plan.out_of_pocket_max)) / 2.0
    premium = 12 * clamp_money(plan.effective_monthly_premium)
    return clamp_money(exposure_weight * exposure + premium_weight * premium)


_RISK_FOCUS: Dict[RiskTolerance, str] = {
    RiskTolerance.LOW: "lower deductible and out-of-pocket exposure",
    RiskTolerance.MEDIUM: "a balance of premium and out-of-pocket exposure",
    RiskTolerance.HIGH: "a lower monthly premium",
}


def score_risk_fit(
    plan_a: PlanDetails,
    plan_b: PlanDetails,
    tolerance: RiskTolerance = RiskTolerance.MEDIUM,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> DimensionScore:
    value_a, value_b = risk_exposure(plan_a, tolerance), risk_exposure(plan_b, tolerance)
    margin, normalized, winner = _compare(value_a, value_b, "lower")
    if winner == "tie":
        rationale = f"Both plans fit a {tolerance.value} risk tolerance equally well."
    else:
        plan, _, _ = _pick(winner, plan_a, plan_b, value_a, value_b)
        rationale = f"{plan.name} better fits a {tolerance.value} risk tolerance, favouring {_RISK_FOCUS[tolerance]}."
    return DimensionScore(
        name=RISK_FIT,
        label=DIMENSION_LABELS[RISK_FIT],
        plan_a_value=value_a,
        plan_b_value=value_b,
        winner=winner,
        margin=margin,
        normalized_margin=normalized,
        weight=scoring.weight(RISK_FIT),
        rationale=rationale,
    )


# ---------------------------------------------------------------------------
# Overall winner
# ---------------------------------------------------------------------------

def _confidence(win_gap: int) -> str:
    if win_gap >= 3:
        return "high"
    if win_gap == 2:
        return "medium"
    return "low"


def determine_overall_winner(
    dimensions: List[DimensionScore],
    plan_a: PlanDetails,
    plan_b: PlanDetails,
) -> OverallWinner:
    a_wins = sum(1 for d in dimensions if d.winner == "A")
    b_wins = sum(1 for d in dimensions if d.winner == "B")
    weighted = float(sum(d.weighted_margin for d in dimensions))
    n = len(dimensions)

    if a_wins != b_wins:
        plan = "A" if a_wins > b_wins else "B"
        decided_by = "wins"
    elif abs(weighted) > SMALL_EPS:
        plan = "A" if weighted > 0 else "B"
        decided_by = "margin"
    else:
        if a_wins == 0:
            rationale = (
                f"No material difference: {plan_a.name} and {plan_b.name} are even on every dimension. "
                f"{plan_a.name} is listed first by default, not because it is better."
            )
        else:
            rationale = (
                f"{plan_a.name} and {plan_b.name} are effectively equivalent: they split dimension wins "
                f"{a_wins}-{b_wins} and their weighted margins cancel out. "
                f"{plan_a.name} is listed first by default, not because it is better."
            )
        return OverallWinner(
            plan="A",
            plan_id=plan_a.id,
            margin=0.0,
            plan_a_wins=a_wins,
            plan_b_wins=b_wins,
            confidence="low",
            equivalent=True,
            rationale=rationale,
        )

    winner_plan = plan_a if plan == "A" else plan_b
    won = [d.label for d in dimensions if d.winner == plan]
    wins = a_wins if plan == "A" else b_wins
    rationale = f"{winner_plan.name} wins {wins} of {n} dimensions ({', '.join(won) or 'none outright'})."
    if decided_by == "margin":
        rationale += f" Dimension wins are split {a_wins}-{b_wins}, so the weighted margin decides."

    return OverallWinner(
        plan=plan,
        plan_id=winner_plan.id,
        margin=abs(weighted),
        plan_a_wins=a_wins,
        plan_b_wins=b_wins,
        confidence=_confidence(abs(a_wins - b_wins)),
        equivalent=False,
        rationale=rationale,
    )


def score(
    plan_a: PlanDetails,
    plan_b: PlanDetails,
    profile: Optional[UserHealthProfile] = None,
    simulation: SimulationConfig = DEFAULT_SIMULATION,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> ScoreCard:
    """Score two plans on cost, coverage breadth, quality and risk fit."""
    context = resolve_usage_context(profile)
    tolerance = _risk_tolerance(context)

    cost, scenarios = score_cost(plan_a, plan_b, context, simulation, scoring)
    dimensions = [
        cost,
        score_coverage(plan_a, plan_b, scoring),
        score_quality(plan_a, plan_b, scoring),
        score_risk_fit(plan_a, plan_b, tolerance, scoring),
    ]
    overall = determine_overall_winner(dimensions, plan_a, plan_b)

    logger.debug(
        "plans_scored",
        plan_a=plan_a.id,
        plan_b=plan_b.id,
        winner=overall.plan,
        equivalent=overall.equivalent,
        scenarios=len(scenarios),
    )

    return ScoreCard(
        dimensions=dimensions,
        scenarios=scenarios,
        overall=overall,
        risk_tolerance=tolerance.value,
        personalized=isinstance(context, PersonalizedUsage),
    )


__all__ = [
    "COST",
    "COVERAGE",
    "QUALITY",
    "RISK_FIT",
    "DIMENSIONS",
    "DIMENSION_LABELS",
    "DEFAULT_WEIGHTS",
    "RISK_WEIGHTS",
    "ScoringConfig",
    "DEFAULT_SCORING",
    "DimensionScore",
    "ScenarioComparison",
    "OverallWinner",
    "ScoreCard",
    "score_cost",
    "score_coverage",
    "score_quality",
    "score_risk_fit",
    "coverage_points",
    "quality_value",
    "risk_exposure",
    "determine_overall_winner",
    "score",
]
