"""
Usage scenarios and the reference tables the simulator prices them with.

Defaults mirror the `simulation` section of config.yaml; `SimulationConfig.from_mapping`
overlays whatever the config supplies, so regional tables can be swapped in
without touching the engine.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import structlog

from ..utils.numeric import clamp_money, optional_amount
from .models import UserHealthProfile

logger = structlog.get_logger()

LOW = "Low"
MODERATE = "Moderate"
HIGH = "High"
PERSONALIZED = "Personalized"

SCENARIO_ORDER: Tuple[str, ...] = (LOW, MODERATE, HIGH, PERSONALIZED)

DEFAULT_REFERENCE_COSTS: Dict[str, float] = {
    "primary_care": 150.0,
    "specialist": 250.0,
    "emergency_room": 1800.0,
    "generic_rx": 20.0,
    "brand_rx": 350.0,
    "specialty_rx": 2500.0,
    "procedure": 5000.0,
    "default_coinsurance": 20.0,
}

DEFAULT_SCENARIOS: Dict[str, Dict[str, Any]] = {
    LOW: {
        "description": "Healthy year: a couple of check-ups and occasional generic prescriptions",
        "doctor_visits": 2,
        "specialist_visits": 0,
        "er_visits": 0,
        "generic_prescriptions": 2,
        "brand_prescriptions": 0,
    },
    MODERATE: {
        "description": "Routine care: regular doctor visits, one specialist visit, generic prescriptions",
        "doctor_visits": 4,
        "specialist_visits": 1,
        "er_visits": 0,
        "generic_prescriptions": 6,
        "brand_prescriptions": 0,
    },
    HIGH: {
        "description": "Heavy use: frequent visits, an ER trip, ongoing prescriptions and a procedure",
        "doctor_visits": 12,
        "specialist_visits": 6,
        "er_visits": 1,
        "generic_prescriptions": 24,
        "brand_prescriptions": 12,
        "planned_procedure": True,
    },
}

DEFAULT_PERSONALIZED_SCALING: Dict[str, float] = {
    LOW: 0.5,
    MODERATE: 1.0,
    HIGH: 2.0,
}


@dataclass(frozen=True)
class ReferenceCosts:
    """Assumed allowed cost per event, used whenever a service falls to coinsurance."""

    primary_care: float
    specialist: float
    emergency_room: float
    generic_rx: float
    brand_rx: float
    specialty_rx: float
    procedure: float
    default_coinsurance: float

    @staticmethod
    def from_mapping(mapping: Optional[Mapping[str, Any]] = None) -> "ReferenceCosts":
        data = dict(DEFAULT_REFERENCE_COSTS)
        for key, value in (mapping or {}).items():
            if key in data and optional_amount(value) is not None:
                data[key] = float(value)
        data["default_coinsurance"] = min(data["default_coinsurance"], 100.0)
        return ReferenceCosts(**data)


@dataclass(frozen=True)
class UsageScenario:
    name: str
    description: str = ""
    doctor_visits: float = 0.0
    specialist_visits: float = 0.0
    er_visits: float = 0.0
    generic_prescriptions: float = 0.0
    brand_prescriptions: float = 0.0
    specialty_prescriptions: float = 0.0
    planned_procedure: bool = False
    procedure_cost: Optional[float] = None

    @staticmethod
    def from_mapping(name: str, mapping: Mapping[str, Any]) -> "UsageScenario":
        return UsageScenario(
            name=name,
            description=str(mapping.get("description", "")),
            doctor_visits=clamp_money(mapping.get("doctor_visits", 0)),
            specialist_visits=clamp_money(mapping.get("specialist_visits", 0)),
            er_visits=clamp_money(mapping.get("er_visits", 0)),
            generic_prescriptions=clamp_money(mapping.get("generic_prescriptions", 0)),
            brand_prescriptions=clamp_money(mapping.get("brand_prescriptions", 0)),
            specialty_prescriptions=clamp_money(mapping.get("specialty_prescriptions", 0)),
            planned_procedure=bool(mapping.get("planned_procedure", False)),
            procedure_cost=optional_amount(mapping.get("procedure_cost")),
        )

    def scaled(self, factor: float, name: Optional[str] = None, planned_procedure: Optional[bool] = None) -> "UsageScenario":
        return replace(
            self,
            name=name or self.name,
            doctor_visits=self.doctor_visits * factor,
            specialist_visits=self.specialist_visits * factor,
            er_visits=self.er_visits * factor,
            generic_prescriptions=self.generic_prescriptions * factor,
            brand_prescriptions=self.brand_prescriptions * factor,
            specialty_prescriptions=self.specialty_prescriptions * factor,
            planned_procedure=self.planned_procedure if planned_procedure is None else planned_procedure,
        )


@dataclass(frozen=True)
class SimulationConfig:
    reference_costs: ReferenceCosts
    scenarios: Tuple[UsageScenario, ...]
    personalized_scaling: Tuple[Tuple[str, float], ...]

    @staticmethod
    def from_mapping(mapping: Optional[Mapping[str, Any]] = None) -> "SimulationConfig":
        mapping = mapping or {}
        scenario_cfg = {k: dict(v) for k, v in DEFAULT_SCENARIOS.items()}
        for key, entry in (mapping.get("scenarios") or {}).items():
            name = str(key).capitalize()
            if name in scenario_cfg and isinstance(entry, Mapping):
                scenario_cfg[name].update(entry)

        scaling = dict(DEFAULT_PERSONALIZED_SCALING)
        for key, value in (mapping.get("personalized_scaling") or {}).items():
            name = str(key).capitalize()
            if name in scaling and optional_amount(value) is not None:
                scaling[name] = float(value)

        return SimulationConfig(
            reference_costs=ReferenceCosts.from_mapping(mapping.get("reference_costs")),
            scenarios=tuple(UsageScenario.from_mapping(name, scenario_cfg[name]) for name in (LOW, MODERATE, HIGH)),
            personalized_scaling=tuple((name, scaling[name]) for name in (LOW, MODERATE, HIGH)),
        )


DEFAULT_SIMULATION = SimulationConfig.from_mapping()


# ---------------------------------------------------------------------------
# Usage context
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DefaultUsage:
    """No profile supplied: the fixed Low/Moderate/High reference bundles apply."""


@dataclass(frozen=True)
class PersonalizedUsage:
    profile: UserHealthProfile


UsageContext = Union[DefaultUsage, PersonalizedUsage]


def resolve_usage_context(profile: Optional[UserHealthProfile]) -> UsageContext:
    if profile is None:
        return DefaultUsage()
    return PersonalizedUsage(profile=profile)


def _prescription_tier(avg_tier: float) -> int:
    tier = avg_tier if math.isfinite(avg_tier) else 1.0
    return int(min(max(math.floor(tier + 0.5), 1), 4))


def scenario_from_profile(profile: UserHealthProfile, name: str = PERSONALIZED) -> UsageScenario:
    """Translate a household profile into an annual usage bundle."""
    fills = clamp_money(profile.expected_prescriptions) * 12
    tier = _prescription_tier(profile.avg_prescription_tier)
    generic = fills if tier == 1 else 0.0
    brand = fills if tier in (2, 3) else 0.0
    specialty = fills if tier == 4 else 0.0
    return UsageScenario(
        name=name,
        description="Based on your health profile and expected needs",
        doctor_visits=clamp_money(profile.expected_doctor_visits),
        specialist_visits=clamp_money(profile.expected_specialist_visits),
        er_visits=clamp_money(profile.expected_er_visits),
        generic_prescriptions=generic,
        brand_prescriptions=brand,
        specialty_prescriptions=specialty,
        planned_procedure=bool(profile.has_planned_procedures),
        procedure_cost=optional_amount(profile.planned_procedure_cost),
    )


def build_scenarios(context: UsageContext, config: SimulationConfig = DEFAULT_SIMULATION) -> List[UsageScenario]:
    """Return the scenario set for a context, always in Low, Moderate, High[, Personalized] order."""
    if isinstance(context, PersonalizedUsage):
        personal = scenario_from_profile(context.profile)
        descriptions = {s.name: s.description for s in config.scenarios}
        scenarios = []
        for name, factor in config.personalized_scaling:
            variant = personal.scaled(factor, name=name, planned_procedure=(name == HIGH))
            scenarios.append(replace(variant, description=f"{descriptions.get(name, name)} (scaled ×{factor:g} from your profile)"))
        scenarios.append(personal)
    else:
        scenarios = list(config.scenarios)

    logger.debug("scenarios_built", count=len(scenarios), personalized=isinstance(context, PersonalizedUsage))
    return scenarios


__all__ = [
    "LOW",
    "MODERATE",
    "HIGH",
    "PERSONALIZED",
    "SCENARIO_ORDER",
    "DEFAULT_REFERENCE_COSTS",
    "DEFAULT_SCENARIOS",
    "ReferenceCosts",
    "UsageScenario",
    "SimulationConfig",
    "DEFAULT_SIMULATION",
    "DefaultUsage",
    "PersonalizedUsage",
    "UsageContext",
    "resolve_usage_context",
    "scenario_from_profile",
    "build_scenarios",
]
