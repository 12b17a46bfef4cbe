"""
Plan and profile records for the comparison engine.

Records are frozen; the `*_from_mapping` constructors accept snake_case or the
camelCase wire names and raise `ShapeError` naming the offending field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np

from ..errors import ShapeError
from ..utils.numeric import optional_amount, optional_percentage


class PlanType(str, Enum):
    HMO = "HMO"
    PPO = "PPO"
    EPO = "EPO"
    POS = "POS"
    HDHP = "HDHP"


class MetalLevel(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    CATASTROPHIC = "catastrophic"


class RiskTolerance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Service types that a flat copay can govern, paired with the plan attribute.
COPAY_FIELDS: Tuple[str, ...] = (
    "primary_care_copay",
    "specialist_copay",
    "generic_drug_copay",
    "brand_drug_copay",
    "emergency_room_copay",
    "urgent_care_copay",
)


@dataclass(frozen=True)
class PlanDetails:
    id: str
    name: str
    issuer: str
    type: PlanType
    monthly_premium: float
    deductible: float
    out_of_pocket_max: float
    metal_level: Optional[MetalLevel] = None
    monthly_premium_after_subsidy: Optional[float] = None
    primary_care_copay: Optional[float] = None
    specialist_copay: Optional[float] = None
    generic_drug_copay: Optional[float] = None
    brand_drug_copay: Optional[float] = None
    emergency_room_copay: Optional[float] = None
    urgent_care_copay: Optional[float] = None
    coinsurance: Optional[float] = None
    hsa_eligible: Optional[bool] = None
    quality_rating: Optional[float] = None
    has_national_network: Optional[bool] = None
    additional_benefits: Tuple[str, ...] = ()

    @property
    def effective_monthly_premium(self) -> float:
        # a subsidy never raises the premium above list price
        subsidised = optional_amount(self.monthly_premium_after_subsidy)
        if subsidised is None:
            return self.monthly_premium
        return min(subsidised, self.monthly_premium)

    def copay(self, field_name: str) -> Optional[float]:
        return optional_amount(getattr(self, field_name, None))

    @property
    def coinsurance_rate(self) -> Optional[float]:
        return optional_percentage(self.coinsurance)

    @property
    def defined_copays(self) -> int:
        return sum(1 for name in COPAY_FIELDS if self.copay(name) is not None)


@dataclass(frozen=True)
class UserHealthProfile:
    expected_doctor_visits: float = 0.0
    expected_specialist_visits: float = 0.0
    expected_er_visits: float = 0.0
    expected_prescriptions: float = 0.0
    avg_prescription_tier: float = 1.0
    has_planned_procedures: bool = False
    planned_procedure_cost: Optional[float] = None
    risk_tolerance: RiskTolerance = RiskTolerance.MEDIUM
    prioritizes_lower_premium: bool = False
    needs_specific_providers: bool = False
    has_chronic_conditions: bool = False


@dataclass(frozen=True)
class AlternativeOption:
    """Related plan hint supplied by the caller's catalog; carried through verbatim."""

    plan_id: str
    name: str
    pros: List[str] = field(default_factory=list)
    cons: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Mapping constructors (boundary validation)
# ---------------------------------------------------------------------------

def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


_CAMEL_OVERRIDES = {
    "expected_er_visits": "expectedERVisits",
}


def _wire(name: str) -> str:
    return _CAMEL_OVERRIDES.get(name, _camel(name))


def _lookup(mapping: Mapping[str, Any], name: str) -> Any:
    if name in mapping:
        return mapping[name]
    return mapping.get(_wire(name))


def _required_number(mapping: Mapping[str, Any], name: str, label: str) -> float:
    raw = _lookup(mapping, name)
    if raw is None:
        raise ShapeError(f"{label}.{_wire(name)}", "missing required field")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ShapeError(f"{label}.{_wire(name)}", "expected a number")
    val = float(raw)
    if not np.isfinite(val) or val < 0:
        raise ShapeError(f"{label}.{_wire(name)}", "must be a finite, non-negative number")
    return val


def _optional_number(mapping: Mapping[str, Any], name: str, label: str) -> Optional[float]:
    raw = _lookup(mapping, name)
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ShapeError(f"{label}.{_wire(name)}", "expected a number")
    return float(raw)


def _optional_bool(mapping: Mapping[str, Any], name: str, label: str) -> Optional[bool]:
    raw = _lookup(mapping, name)
    if raw is None:
        return None
    if not isinstance(raw, bool):
        raise ShapeError(f"{label}.{_wire(name)}", "expected a boolean")
    return raw


def _required_str(mapping: Mapping[str, Any], name: str, label: str) -> str:
    raw = _lookup(mapping, name)
    if raw is None or str(raw).strip() == "":
        raise ShapeError(f"{label}.{_wire(name)}", "missing required field")
    return str(raw)


def _enum(enum_cls, raw: Any, field_name: str):
    try:
        return enum_cls(raw)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ShapeError(field_name, f"{raw!r} is not one of {allowed}") from None


def plan_from_mapping(mapping: Mapping[str, Any], label: str = "plan") -> PlanDetails:
    if not isinstance(mapping, Mapping):
        raise ShapeError(label, "expected an object")

    plan_type = _enum(PlanType, _required_str(mapping, "type", label), f"{label}.type")
    metal_raw = _lookup(mapping, "metal_level")
    metal = _enum(MetalLevel, metal_raw, f"{label}.metalLevel") if metal_raw is not None else None

    deductible = _required_number(mapping, "deductible", label)
    oop_max = _required_number(mapping, "out_of_pocket_max", label)
    if oop_max < deductible:
        raise ShapeError(f"{label}.outOfPocketMax", "must be greater than or equal to deductible")

    coinsurance = _optional_number(mapping, "coinsurance", label)
    if coinsurance is not None and not 0 <= coinsurance <= 100:
        raise ShapeError(f"{label}.coinsurance", "must be a percentage between 0 and 100")

    rating = _optional_number(mapping, "quality_rating", label)
    if rating is not None and not 1 <= rating <= 5:
        raise ShapeError(f"{label}.qualityRating", "must be between 1 and 5")

    premium = _required_number(mapping, "monthly_premium", label)
    subsidised = _optional_number(mapping, "monthly_premium_after_subsidy", label)
    if subsidised is not None and subsidised > premium:
        raise ShapeError(f"{label}.monthlyPremiumAfterSubsidy", "must not exceed monthlyPremium")

    benefits = _lookup(mapping, "additional_benefits") or ()

    return PlanDetails(
        id=_required_str(mapping, "id", label),
        name=_required_str(mapping, "name", label),
        issuer=_required_str(mapping, "issuer", label),
        type=plan_type,
        metal_level=metal,
        monthly_premium=premium,
        monthly_premium_after_subsidy=subsidised,
        deductible=deductible,
        out_of_pocket_max=oop_max,
        primary_care_copay=_optional_number(mapping, "primary_care_copay", label),
        specialist_copay=_optional_number(mapping, "specialist_copay", label),
        generic_drug_copay=_optional_number(mapping, "generic_drug_copay", label),
        brand_drug_copay=_optional_number(mapping, "brand_drug_copay", label),
        emergency_room_copay=_optional_number(mapping, "emergency_room_copay", label),
        urgent_care_copay=_optional_number(mapping, "urgent_care_copay", label),
        coinsurance=coinsurance,
        hsa_eligible=_optional_bool(mapping, "hsa_eligible", label),
        quality_rating=rating,
        has_national_network=_optional_bool(mapping, "has_national_network", label),
        additional_benefits=tuple(str(b) for b in benefits),
    )


def profile_from_mapping(mapping: Optional[Mapping[str, Any]], label: str = "userProfile") -> Optional[UserHealthProfile]:
    if mapping is None:
        return None
    if not isinstance(mapping, Mapping):
        raise ShapeError(label, "expected an object")

    counts: Dict[str, float] = {}
    for name in (
        "expected_doctor_visits",
        "expected_specialist_visits",
        "expected_er_visits",
        "expected_prescriptions",
    ):
        val = _optional_number(mapping, name, label)
        if val is not None and val < 0:
            raise ShapeError(f"{label}.{_wire(name)}", "must be non-negative")
        counts[name] = val or 0.0

    tier = _optional_number(mapping, "avg_prescription_tier", label)
    if tier is not None and not 1 <= tier <= 4:
        raise ShapeError(f"{label}.avgPrescriptionTier", "must be between 1 and 4")

    tolerance_raw = _lookup(mapping, "risk_tolerance")
    tolerance = (
        _enum(RiskTolerance, tolerance_raw, f"{label}.riskTolerance")
        if tolerance_raw is not None
        else RiskTolerance.MEDIUM
    )

    procedure_cost = _optional_number(mapping, "planned_procedure_cost", label)

    return UserHealthProfile(
        expected_doctor_visits=counts["expected_doctor_visits"],
        expected_specialist_visits=counts["expected_specialist_visits"],
        expected_er_visits=counts["expected_er_visits"],
        expected_prescriptions=counts["expected_prescriptions"],
        avg_prescription_tier=tier if tier is not None else 1.0,
        has_planned_procedures=bool(_optional_bool(mapping, "has_planned_procedures", label)),
        planned_procedure_cost=procedure_cost,
        risk_tolerance=tolerance,
        prioritizes_lower_premium=bool(_optional_bool(mapping, "prioritizes_lower_premium", label)),
        needs_specific_providers=bool(_optional_bool(mapping, "needs_specific_providers", label)),
        has_chronic_conditions=bool(_optional_bool(mapping, "has_chronic_conditions", label)),
    )


def alternative_from_mapping(mapping: Mapping[str, Any]) -> AlternativeOption:
    if not isinstance(mapping, Mapping):
        raise ShapeError("alternatives", "expected an object")
    return AlternativeOption(
        plan_id=str(_lookup(mapping, "plan_id") or ""),
        name=str(_lookup(mapping, "name") or ""),
        pros=[str(p) for p in (_lookup(mapping, "pros") or [])],
        cons=[str(c) for c in (_lookup(mapping, "cons") or [])],
    )


__all__ = [
    "PlanType",
    "MetalLevel",
    "RiskTolerance",
    "COPAY_FIELDS",
    "PlanDetails",
    "UserHealthProfile",
    "AlternativeOption",
    "plan_from_mapping",
    "profile_from_mapping",
    "alternative_from_mapping",
]
