"""Add-on catalog records, recommendation results, thresholds and mapping constructors."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

import numpy as np

from ..errors import ShapeError
from ..utils.numeric import optional_amount


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_RANK: Dict[Priority, int] = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


class AddOnCategory(str, Enum):
    DENTAL = "dental"
    VISION = "vision"
    ACCIDENT = "accident"
    CRITICAL_ILLNESS = "critical-illness"
    HOSPITAL_INDEMNITY = "hospital-indemnity"
    DISABILITY = "disability"
    LONG_TERM_CARE = "long-term-care"
    LIFE = "life"


class ReasonCode(str, Enum):
    YOUNG_ADULT = "YOUNG_ADULT"
    FAMILY_PLANNING = "FAMILY_PLANNING"
    MID_CAREER = "MID_CAREER"
    PRE_RETIREMENT = "PRE_RETIREMENT"
    SENIOR_HEALTH = "SENIOR_HEALTH"
    MEDICARE_GAPS = "MEDICARE_GAPS"
    CHILDREN_PRESENT = "CHILDREN_PRESENT"
    DEPENDENTS = "DEPENDENTS"
    PRIMARY_EARNER = "PRIMARY_EARNER"
    CHRONIC_CONDITIONS = "CHRONIC_CONDITIONS"
    PREVENTIVE_CARE = "PREVENTIVE_CARE"
    HOSPITAL_RISK = "HOSPITAL_RISK"
    INCOME_REPLACEMENT = "INCOME_REPLACEMENT"
    CATASTROPHIC_PROTECTION = "CATASTROPHIC_PROTECTION"
    OUT_OF_POCKET = "OUT_OF_POCKET"


REASON_TEXT: Dict[ReasonCode, str] = {
    ReasonCode.YOUNG_ADULT: "Young adults benefit from accident protection",
    ReasonCode.FAMILY_PLANNING: "Common need for families planning for the future",
    ReasonCode.MID_CAREER: "Peak earning years require income protection",
    ReasonCode.PRE_RETIREMENT: "Important to secure coverage before retirement",
    ReasonCode.SENIOR_HEALTH: "Higher likelihood of critical health events",
    ReasonCode.MEDICARE_GAPS: "Covers expenses not included in Medicare",
    ReasonCode.CHILDREN_PRESENT: "Recommended for households with children",
    ReasonCode.DEPENDENTS: "Important protection for dependents",
    ReasonCode.PRIMARY_EARNER: "Critical for primary household earners",
    ReasonCode.CHRONIC_CONDITIONS: "Beneficial for those with chronic conditions",
    ReasonCode.PREVENTIVE_CARE: "Essential preventive care coverage",
    ReasonCode.HOSPITAL_RISK: "Higher risk of hospitalization in this age group",
    ReasonCode.INCOME_REPLACEMENT: "Replaces lost income during disability",
    ReasonCode.CATASTROPHIC_PROTECTION: "Protection against catastrophic costs",
    ReasonCode.OUT_OF_POCKET: "Covers out-of-pocket medical expenses",
}


def reason_text(code: ReasonCode) -> str:
    return REASON_TEXT[code]


@dataclass(frozen=True)
class AgeRecommendation:
    min_age: int
    max_age: int
    priority: Optional[Priority]
    probability_threshold: float
    reason_code: ReasonCode

    def matches(self, age: int) -> bool:
        return self.min_age <= age <= self.max_age


@dataclass(frozen=True)
class AddOnInsurance:
    id: str
    name: str
    category: AddOnCategory
    base_cost_per_month: float
    age_recommendations: Tuple[AgeRecommendation, ...]
    benefits: Tuple[str, ...] = ()
    short_name: str = ""
    description: str = ""
    typical_coverage: str = ""
    best_for: Tuple[str, ...] = ()


@dataclass(frozen=True)
class HouseholdAgeGroup:
    group_name: str
    min_age: int
    max_age: Optional[int]
    member_count: int
    ages: List[int]


@dataclass(frozen=True)
class AddOnPreferences:
    exclude_categories: FrozenSet[AddOnCategory] = frozenset()
    max_monthly_budget: Optional[float] = None


@dataclass(frozen=True)
class HouseholdRiskFactors:
    has_chronic_conditions: bool = False
    multiple_residences: bool = False
    monthly_budget: Optional[float] = None


@dataclass(frozen=True)
class AddOnRecommendation:
    insurance: AddOnInsurance
    priority: Priority
    probability_score: float
    adjusted_cost_per_month: float
    household_cost_per_month: float
    applicable_members: int
    reasons: List[str]
    age_group: str


@dataclass(frozen=True)
class AddOnInsuranceAnalysis:
    recommendations: List[AddOnRecommendation]
    all_recommendations: List[AddOnRecommendation]
    high_priority: List[AddOnRecommendation]
    medium_priority: List[AddOnRecommendation]
    low_priority: List[AddOnRecommendation]
    total_monthly_high_priority: float
    total_monthly_medium_priority: float
    total_monthly_low_priority: float
    total_monthly_all_recommended: float
    household_age_groups: List[HouseholdAgeGroup] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

DEFAULT_THRESHOLDS: Dict[str, float] = {
    "high": 75.0,
    "medium": 50.0,
    "low": 25.0,
    "bundle_discount": 0.95,
    "bundle_min_items": 3,
}


@dataclass(frozen=True)
class AddOnConfig:
    high: float
    medium: float
    low: float
    bundle_discount: float
    bundle_min_items: int

    @staticmethod
    def from_mapping(mapping: Optional[Mapping[str, Any]] = None) -> "AddOnConfig":
        data = dict(DEFAULT_THRESHOLDS)
        for key, value in ((mapping or {}).get("thresholds") or {}).items():
            if key in data and optional_amount(value) is not None:
                data[key] = float(value)
        return AddOnConfig(
            high=data["high"],
            medium=data["medium"],
            low=data["low"],
            bundle_discount=min(data["bundle_discount"], 1.0),
            bundle_min_items=int(data["bundle_min_items"]),
        )


DEFAULT_ADDON_CONFIG = AddOnConfig.from_mapping()


# ---------------------------------------------------------------------------
# Mapping constructors (boundary validation)
# ---------------------------------------------------------------------------

def _get(mapping: Mapping[str, Any], snake: str, camel: str) -> Any:
    return mapping[snake] if snake in mapping else mapping.get(camel)


def _number(raw: Any, field_name: str) -> float:
    if raw is None:
        raise ShapeError(field_name, "missing required field")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or not np.isfinite(float(raw)):
        raise ShapeError(field_name, "expected a finite number")
    return float(raw)


def _closed(enum_cls, raw: Any, field_name: str):
    try:
        return enum_cls(raw)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ShapeError(field_name, f"{raw!r} is not one of {allowed}") from None


def age_recommendation_from_mapping(mapping: Mapping[str, Any], label: str) -> AgeRecommendation:
    if not isinstance(mapping, Mapping):
        raise ShapeError(label, "expected an object")
    min_age = int(_number(_get(mapping, "min_age", "minAge"), f"{label}.minAge"))
    max_age = int(_number(_get(mapping, "max_age", "maxAge"), f"{label}.maxAge"))
    if min_age < 0 or max_age < min_age:
        raise ShapeError(f"{label}.maxAge", "age bracket must satisfy 0 <= minAge <= maxAge")
    threshold = _number(_get(mapping, "probability_threshold", "probabilityThreshold"), f"{label}.probabilityThreshold")
    if not 0 <= threshold <= 100:
        raise ShapeError(f"{label}.probabilityThreshold", "must be between 0 and 100")
    return AgeRecommendation(
        min_age=min_age,
        max_age=max_age,
        priority=(
            _closed(Priority, mapping["priority"], f"{label}.priority")
            if mapping.get("priority") is not None
            else None
        ),
        probability_threshold=threshold,
        reason_code=_closed(ReasonCode, _get(mapping, "reason_code", "reasonCode"), f"{label}.reasonCode"),
    )


def add_on_from_mapping(mapping: Mapping[str, Any], label: str = "catalog") -> AddOnInsurance:
    if not isinstance(mapping, Mapping):
        raise ShapeError(label, "expected an object")
    product_id = mapping.get("id")
    if not product_id:
        raise ShapeError(f"{label}.id", "missing required field")
    label = f"{label}[{product_id}]"
    base_cost = _number(_get(mapping, "base_cost_per_month", "baseCostPerMonth"), f"{label}.baseCostPerMonth")
    if base_cost < 0:
        raise ShapeError(f"{label}.baseCostPerMonth", "must be non-negative")
    brackets = _get(mapping, "age_recommendations", "ageRecommendations") or []
    return AddOnInsurance(
        id=str(product_id),
        name=str(mapping.get("name") or product_id),
        category=_closed(AddOnCategory, mapping.get("category"), f"{label}.category"),
        base_cost_per_month=base_cost,
        age_recommendations=tuple(
            age_recommendation_from_mapping(entry, f"{label}.ageRecommendations[{i}]")
            for i, entry in enumerate(brackets)
        ),
        benefits=tuple(str(b) for b in (mapping.get("benefits") or [])),
        short_name=str(_get(mapping, "short_name", "shortName") or ""),
        description=str(mapping.get("description") or ""),
        typical_coverage=str(_get(mapping, "typical_coverage", "typicalCoverage") or ""),
        best_for=tuple(str(b) for b in (_get(mapping, "best_for", "bestFor") or [])),
    )


def preferences_from_mapping(mapping: Optional[Mapping[str, Any]], label: str = "preferences") -> Optional[AddOnPreferences]:
    if mapping is None:
        return None
    if not isinstance(mapping, Mapping):
        raise ShapeError(label, "expected an object")
    excluded = _get(mapping, "exclude_categories", "excludeCategories") or []
    budget = _get(mapping, "max_monthly_budget", "maxMonthlyBudget")
    if budget is not None:
        budget = _number(budget, f"{label}.maxMonthlyBudget")
        if budget < 0:
            raise ShapeError(f"{label}.maxMonthlyBudget", "must be non-negative")
    return AddOnPreferences(
        exclude_categories=frozenset(
            _closed(AddOnCategory, c, f"{label}.excludeCategories[{i}]") for i, c in enumerate(excluded)
        ),
        max_monthly_budget=budget,
    )


def risk_factors_from_mapping(mapping: Optional[Mapping[str, Any]], label: str = "riskFactors") -> Optional[HouseholdRiskFactors]:
    if mapping is None:
        return None
    if not isinstance(mapping, Mapping):
        raise ShapeError(label, "expected an object")
    budget = _get(mapping, "monthly_budget", "monthlyBudget")
    return HouseholdRiskFactors(
        has_chronic_conditions=bool(_get(mapping, "has_chronic_conditions", "hasChronicConditions")),
        multiple_residences=bool(_get(mapping, "multiple_residences", "multipleResidences")),
        monthly_budget=_number(budget, f"{label}.monthlyBudget") if budget is not None else None,
    )


__all__ = [
    "Priority",
    "PRIORITY_RANK",
    "AddOnCategory",
    "ReasonCode",
    "REASON_TEXT",
    "reason_text",
    "AgeRecommendation",
    "AddOnInsurance",
    "HouseholdAgeGroup",
    "AddOnPreferences",
    "HouseholdRiskFactors",
    "AddOnRecommendation",
    "AddOnInsuranceAnalysis",
    "AddOnConfig",
    "DEFAULT_ADDON_CONFIG",
    "DEFAULT_THRESHOLDS",
    "age_recommendation_from_mapping",
    "add_on_from_mapping",
    "preferences_from_mapping",
    "risk_factors_from_mapping",
]
