from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Mapping, Optional, Sequence

import structlog

from plan_advisor.comparison import (
    ScoringConfig,
    SimulationConfig,
    alternative_from_mapping,
    compare_plans,
    plan_from_mapping,
    profile_from_mapping,
    quick_comparison,
)

logger = structlog.get_logger()


class ComparisonService:
    def __init__(self, simulation: SimulationConfig, scoring: ScoringConfig):
        self.simulation = simulation
        self.scoring = scoring

    def compare(
        self,
        plan_a: Mapping[str, Any],
        plan_b: Mapping[str, Any],
        user_profile: Optional[Mapping[str, Any]] = None,
        alternatives: Optional[Sequence[Mapping[str, Any]]] = None,
        mode: str = "full",
    ) -> Dict:
        a = plan_from_mapping(plan_a, "planA")
        b = plan_from_mapping(plan_b, "planB")

        if mode == "quick":
            result = quick_comparison(a, b, self.simulation, self.scoring)
            logger.info("quick_comparison", plan_a=a.id, plan_b=b.id, winner=result.winner)
            return asdict(result)

        profile = profile_from_mapping(user_profile, "userProfile")
        options = [alternative_from_mapping(alt) for alt in (alternatives or [])]
        result = compare_plans(a, b, profile, options, self.simulation, self.scoring)
        logger.info(
            "full_comparison",
            plan_a=a.id,
            plan_b=b.id,
            winner=result.overall_winner.plan,
            confidence=result.overall_winner.confidence,
            personalized=result.personalized,
        )
        return asdict(result)

    @staticmethod
    def describe() -> Dict:
        return {
            "endpoint": "/api/v1/comparison",
            "method": "POST",
            "modes": ["full", "quick"],
            "required": ["planA", "planB"],
            "optional": ["userProfile", "mode", "alternatives"],
            "planFields": [
                "id", "name", "issuer", "type", "monthlyPremium", "deductible", "outOfPocketMax",
                "metalLevel", "monthlyPremiumAfterSubsidy", "primaryCareCopay", "specialistCopay",
                "genericDrugCopay", "brandDrugCopay", "emergencyRoomCopay", "urgentCareCopay",
                "coinsurance", "hsaEligible", "qualityRating", "hasNationalNetwork", "additionalBenefits",
            ],
            "profileFields": [
                "expectedDoctorVisits", "expectedSpecialistVisits", "expectedERVisits",
                "expectedPrescriptions", "avgPrescriptionTier", "hasPlannedProcedures",
                "plannedProcedureCost", "riskTolerance", "prioritizesLowerPremium",
                "needsSpecificProviders", "hasChronicConditions",
            ],
            "description": "Compare two health plans across usage scenarios and a weighted multi-criteria score.",
        }
