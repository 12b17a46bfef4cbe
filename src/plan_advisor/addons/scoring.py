"""
Per-product add-on scoring.

Every member is matched against the product's age brackets; the highest
matching threshold sets the probability and its bracket sets the priority.
Household risk factors then nudge the score within 0 to 100.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from ..utils.numeric import clamp_money
from .grouping import NO_APPLICABLE_MEMBERS, dominant_age_group, group_ages
from .models import (
    DEFAULT_ADDON_CONFIG,
    PRIORITY_RANK,
    AddOnCategory,
    AddOnConfig,
    AddOnInsurance,
    AddOnRecommendation,
    AgeRecommendation,
    HouseholdAgeGroup,
    HouseholdRiskFactors,
    Priority,
    reason_text,
)

logger = structlog.get_logger()

CHRONIC_BONUS = 10.0
CHRONIC_CATEGORIES = frozenset(
    {AddOnCategory.CRITICAL_ILLNESS, AddOnCategory.HOSPITAL_INDEMNITY, AddOnCategory.DISABILITY}
)
RESIDENCE_BONUS = 5.0
RESIDENCE_CATEGORIES = frozenset({AddOnCategory.ACCIDENT, AddOnCategory.HOSPITAL_INDEMNITY})
TIGHT_BUDGET = 500.0
EXPENSIVE_PRODUCT = 100.0
BUDGET_PENALTY = 10.0

NOT_IN_HEALTH_PLAN = frozenset({AddOnCategory.DENTAL, AddOnCategory.VISION})


def priority_for_score(score: float, config: AddOnConfig = DEFAULT_ADDON_CONFIG) -> Priority:
    if score >= config.high:
        return Priority.HIGH
    if score >= config.medium:
        return Priority.MEDIUM
    return Priority.LOW


def bracket_priority(bracket: AgeRecommendation, config: AddOnConfig = DEFAULT_ADDON_CONFIG) -> Priority:
    if bracket.priority is not None:
        return bracket.priority
    return priority_for_score(bracket.probability_threshold, config)


def governing_bracket(
    insurance: AddOnInsurance,
    age: int,
    config: AddOnConfig = DEFAULT_ADDON_CONFIG,
) -> Optional[AgeRecommendation]:
    """Highest-threshold bracket matching `age`; higher priority, then catalog order, breaks ties."""
    best: Optional[AgeRecommendation] = None
    for bracket in insurance.age_recommendations:
        if not bracket.matches(age):
            continue
        if best is None:
            best = bracket
            continue
        key = (bracket.probability_threshold, PRIORITY_RANK[bracket_priority(bracket, config)])
        best_key = (best.probability_threshold, PRIORITY_RANK[bracket_priority(best, config)])
        if key > best_key:
            best = bracket
    return best


def _risk_modifiers(
    insurance: AddOnInsurance,
    risk_factors: Optional[HouseholdRiskFactors],
) -> Tuple[float, List[str]]:
    if risk_factors is None:
        return 0.0, []

    adjustment = 0.0
    reasons: List[str] = []
    if risk_factors.has_chronic_conditions and insurance.category in CHRONIC_CATEGORIES:
        adjustment += CHRONIC_BONUS
        reasons.append("Chronic conditions in the household raise the value of this coverage")
    if risk_factors.multiple_residences and insurance.category in RESIDENCE_CATEGORIES:
        adjustment += RESIDENCE_BONUS
        reasons.append("Splitting time across residences increases travel and injury exposure")
    budget = risk_factors.monthly_budget
    if budget is not None and budget < TIGHT_BUDGET and insurance.base_cost_per_month > EXPENSIVE_PRODUCT:
        adjustment -= BUDGET_PENALTY
        reasons.append("Higher-cost coverage weighed against a tight monthly budget")
    return adjustment, reasons


def _composition_note(groups: Sequence[HouseholdAgeGroup]) -> str:
    parts = [f"{g.member_count} in {g.group_name}" for g in groups]
    return "Household composition: " + ", ".join(parts)


def score_product(
    insurance: AddOnInsurance,
    ages: Sequence[int],
    risk_factors: Optional[HouseholdRiskFactors] = None,
    state_adjustment_factor: float = 1.0,
    config: AddOnConfig = DEFAULT_ADDON_CONFIG,
    groups: Optional[Sequence[HouseholdAgeGroup]] = None,
) -> AddOnRecommendation:
    """
    Score one catalog product for a household.

    Each member is governed by their highest-threshold matching bracket; the
    product takes the maximum governed threshold across members and that
    bracket's priority. Products nobody matches score 0 with low priority.
    Risk-factor modifiers shift the score (clamped to 0-100) but never the
    priority.
    """
    ages = [int(a) for a in ages if int(a) >= 0]
    if groups is None:
        groups = group_ages(ages)
    factor = clamp_money(state_adjustment_factor)

    governed: List[Tuple[int, AgeRecommendation]] = []
    for age in ages:
        bracket = governing_bracket(insurance, age, config)
        if bracket is not None:
            governed.append((age, bracket))

    adjusted_cost = round(clamp_money(insurance.base_cost_per_month * factor), 2)

    if not governed:
        return AddOnRecommendation(
            insurance=insurance,
            priority=Priority.LOW,
            probability_score=0.0,
            adjusted_cost_per_month=adjusted_cost,
            household_cost_per_month=0.0,
            applicable_members=0,
            reasons=[],
            age_group=NO_APPLICABLE_MEMBERS,
        )

    # max() keeps the first of equal keys, i.e. the earliest member
    _, top = max(
        governed,
        key=lambda item: (item[1].probability_threshold, PRIORITY_RANK[bracket_priority(item[1], config)]),
    )
    adjustment, modifier_reasons = _risk_modifiers(insurance, risk_factors)
    probability = min(100.0, max(0.0, top.probability_threshold + adjustment))

    applicable = len(governed)
    household_cost = round(clamp_money(insurance.base_cost_per_month * applicable * factor), 2)

    reasons: List[str] = []
    seen: Dict[str, None] = {}
    for _, bracket in sorted(governed, key=lambda item: -item[1].probability_threshold):
        text = reason_text(bracket.reason_code)
        if text not in seen:
            seen[text] = None
            reasons.append(text)
    reasons.append(f"Applies to {applicable} of {len(ages)} household members")
    reasons.append(_composition_note(groups))
    reasons.extend(modifier_reasons)
    if insurance.category in NOT_IN_HEALTH_PLAN:
        reasons.append("Typically not covered by standard health insurance")

    logger.debug(
        "addon_scored",
        product=insurance.id,
        probability=probability,
        applicable_members=applicable,
        modifier=adjustment,
    )
    return AddOnRecommendation(
        insurance=insurance,
        priority=bracket_priority(top, config),
        probability_score=probability,
        adjusted_cost_per_month=adjusted_cost,
        household_cost_per_month=household_cost,
        applicable_members=applicable,
        reasons=reasons,
        age_group=dominant_age_group(groups, [age for age, _ in governed]),
    )


__all__ = [
    "priority_for_score",
    "bracket_priority",
    "governing_bracket",
    "score_product",
]
