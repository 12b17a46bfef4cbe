"""Supplemental insurance recommendations from household age composition."""

from .aggregate import (
    bundle_discount,
    filter_by_budget,
    recommendations_by_priority,
    score_add_ons,
    total_add_on_cost,
)
from .catalog import DEFAULT_CATALOG, catalog_from_config, get_by_category, get_by_id, load_catalog
from .grouping import AGE_BRACKETS, dominant_age_group, group_ages
from .models import (
    AddOnCategory,
    AddOnConfig,
    AddOnInsurance,
    AddOnInsuranceAnalysis,
    AddOnPreferences,
    AddOnRecommendation,
    AgeRecommendation,
    HouseholdAgeGroup,
    HouseholdRiskFactors,
    Priority,
    ReasonCode,
    add_on_from_mapping,
    preferences_from_mapping,
    risk_factors_from_mapping,
)
from .scoring import score_product

__all__ = [
    "bundle_discount",
    "filter_by_budget",
    "recommendations_by_priority",
    "score_add_ons",
    "total_add_on_cost",
    "DEFAULT_CATALOG",
    "catalog_from_config",
    "get_by_category",
    "get_by_id",
    "load_catalog",
    "AGE_BRACKETS",
    "dominant_age_group",
    "group_ages",
    "AddOnCategory",
    "AddOnConfig",
    "AddOnInsurance",
    "AddOnInsuranceAnalysis",
    "AddOnPreferences",
    "AddOnRecommendation",
    "AgeRecommendation",
    "HouseholdAgeGroup",
    "HouseholdRiskFactors",
    "Priority",
    "ReasonCode",
    "add_on_from_mapping",
    "preferences_from_mapping",
    "risk_factors_from_mapping",
    "score_product",
]
