from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from plan_advisor.comparison import MetalLevel, PlanType, RiskTolerance


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_mapping(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PlanInput(CamelModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    issuer: str = Field(..., min_length=1)
    type: PlanType
    metal_level: Optional[MetalLevel] = None
    monthly_premium: float = Field(..., ge=0, allow_inf_nan=False)
    monthly_premium_after_subsidy: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    deductible: float = Field(..., ge=0, allow_inf_nan=False)
    out_of_pocket_max: float = Field(..., ge=0, allow_inf_nan=False)
    primary_care_copay: Optional[float] = Field(default=None, ge=0)
    specialist_copay: Optional[float] = Field(default=None, ge=0)
    generic_drug_copay: Optional[float] = Field(default=None, ge=0)
    brand_drug_copay: Optional[float] = Field(default=None, ge=0)
    emergency_room_copay: Optional[float] = Field(default=None, ge=0)
    urgent_care_copay: Optional[float] = Field(default=None, ge=0)
    coinsurance: Optional[float] = Field(default=None, ge=0, le=100)
    hsa_eligible: Optional[bool] = None
    quality_rating: Optional[float] = Field(default=None, ge=1, le=5)
    has_national_network: Optional[bool] = None
    additional_benefits: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _oop_covers_deductible(self) -> "PlanInput":
        if self.out_of_pocket_max < self.deductible:
            raise ValueError("outOfPocketMax must be greater than or equal to deductible")
        if self.monthly_premium_after_subsidy is not None and self.monthly_premium_after_subsidy > self.monthly_premium:
            raise ValueError("monthlyPremiumAfterSubsidy must not exceed monthlyPremium")
        return self


class UserProfileInput(CamelModel):
    expected_doctor_visits: float = Field(default=0, ge=0)
    expected_specialist_visits: float = Field(default=0, ge=0)
    expected_er_visits: float = Field(default=0, ge=0, alias="expectedERVisits")
    expected_prescriptions: float = Field(default=0, ge=0)
    avg_prescription_tier: float = Field(default=1, ge=1, le=4)
    has_planned_procedures: bool = False
    planned_procedure_cost: Optional[float] = Field(default=None, ge=0)
    risk_tolerance: RiskTolerance = RiskTolerance.MEDIUM
    prioritizes_lower_premium: bool = False
    needs_specific_providers: bool = False
    has_chronic_conditions: bool = False


class AlternativeInput(CamelModel):
    plan_id: str
    name: str
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
