"""Household-level add-on analysis and the bundle and budget helpers."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

import structlog

from .models import (
    DEFAULT_ADDON_CONFIG,
    PRIORITY_RANK,
    AddOnConfig,
    AddOnInsurance,
    AddOnInsuranceAnalysis,
    AddOnPreferences,
    AddOnRecommendation,
    HouseholdRiskFactors,
    Priority,
)
from .grouping import group_ages
from .scoring import score_product

logger = structlog.get_logger()


def _sorted(recs: Sequence[AddOnRecommendation]) -> List[AddOnRecommendation]:
    # sorted() is stable, so equal keys keep catalog order
    return sorted(recs, key=lambda r: (-PRIORITY_RANK[r.priority], -r.probability_score))


def _total(recs: Iterable[AddOnRecommendation]) -> float:
    return round(sum(r.household_cost_per_month for r in recs), 2)


def filter_by_budget(recommendations: Sequence[AddOnRecommendation], max_budget: float) -> List[AddOnRecommendation]:
    """Walk in order, keeping each item that still fits under the running total."""
    total = 0.0
    kept: List[AddOnRecommendation] = []
    for rec in recommendations:
        if total + rec.household_cost_per_month <= max_budget:
            kept.append(rec)
            total += rec.household_cost_per_month
    return kept


def score_add_ons(
    catalog: Sequence[AddOnInsurance],
    ages: Sequence[int],
    preferences: Optional[AddOnPreferences] = None,
    risk_factors: Optional[HouseholdRiskFactors] = None,
    state_adjustment_factor: float = 1.0,
    config: AddOnConfig = DEFAULT_ADDON_CONFIG,
) -> AddOnInsuranceAnalysis:
    """
    Score every catalog product for the household and bucket the results.

    `all_recommendations` holds every product not excluded by preference,
    including zero-probability ones. `recommendations` keeps those scoring at
    least the `low` threshold, then applies the optional monthly budget.
    Preferences only filter; they never change a score.
    """
    preferences = preferences or AddOnPreferences()
    ages = [int(a) for a in ages if int(a) >= 0]
    groups = group_ages(ages)

    scored = [
        score_product(product, ages, risk_factors, state_adjustment_factor, config, groups)
        for product in catalog
    ]

    all_recs = _sorted([r for r in scored if r.insurance.category not in preferences.exclude_categories])
    recommended = [r for r in all_recs if r.applicable_members > 0 and r.probability_score >= config.low]
    if preferences.max_monthly_budget is not None:
        recommended = filter_by_budget(recommended, preferences.max_monthly_budget)

    high = [r for r in recommended if r.priority == Priority.HIGH]
    medium = [r for r in recommended if r.priority == Priority.MEDIUM]
    low = [r for r in recommended if r.priority == Priority.LOW]

    logger.info(
        "addons_scored",
        members=len(ages),
        products=len(catalog),
        recommended=len(recommended),
        excluded=len(scored) - len(all_recs),
    )

    return AddOnInsuranceAnalysis(
        recommendations=recommended,
        all_recommendations=all_recs,
        high_priority=high,
        medium_priority=medium,
        low_priority=low,
        total_monthly_high_priority=_total(high),
        total_monthly_medium_priority=_total(medium),
        total_monthly_low_priority=_total(low),
        total_monthly_all_recommended=_total(recommended),
        household_age_groups=groups,
    )


# ---------------------------------------------------------------------------
# Selection helpers
# ---------------------------------------------------------------------------

def bundle_discount(selected: Sequence[AddOnRecommendation], config: AddOnConfig = DEFAULT_ADDON_CONFIG) -> float:
    if len(selected) >= config.bundle_min_items:
        return config.bundle_discount
    return 1.0


def total_add_on_cost(selected: Sequence[AddOnRecommendation], config: AddOnConfig = DEFAULT_ADDON_CONFIG) -> float:
    subtotal = sum(r.household_cost_per_month for r in selected)
    return round(subtotal * bundle_discount(selected, config), 2)


def recommendations_by_priority(analysis: AddOnInsuranceAnalysis, priority: Priority) -> List[AddOnRecommendation]:
    return [r for r in analysis.recommendations if r.priority == priority]


__all__ = [
    "score_add_ons",
    "filter_by_budget",
    "bundle_discount",
    "total_add_on_cost",
    "recommendations_by_priority",
]
