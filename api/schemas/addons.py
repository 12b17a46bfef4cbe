from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from plan_advisor.addons import AddOnCategory, Priority, ReasonCode

from .plan import CamelModel


class AgeRecommendationInput(CamelModel):
    min_age: int = Field(..., ge=0)
    max_age: int = Field(..., ge=0)
    priority: Optional[Priority] = None
    probability_threshold: float = Field(..., ge=0, le=100)
    reason_code: ReasonCode

    @model_validator(mode="after")
    def _ordered(self) -> "AgeRecommendationInput":
        if self.max_age < self.min_age:
            raise ValueError("maxAge must be greater than or equal to minAge")
        return self


class AddOnProductInput(CamelModel):
    id: str = Field(..., min_length=1)
    name: str
    category: AddOnCategory
    base_cost_per_month: float = Field(..., ge=0, allow_inf_nan=False)
    age_recommendations: List[AgeRecommendationInput] = Field(default_factory=list)
    benefits: List[str] = Field(default_factory=list)
    short_name: Optional[str] = None
    description: Optional[str] = None
    typical_coverage: Optional[str] = None
    best_for: List[str] = Field(default_factory=list)


class PreferencesInput(CamelModel):
    exclude_categories: List[AddOnCategory] = Field(default_factory=list)
    max_monthly_budget: Optional[float] = Field(default=None, ge=0)


class RiskFactorsInput(CamelModel):
    has_chronic_conditions: bool = False
    multiple_residences: bool = False
    monthly_budget: Optional[float] = Field(default=None, ge=0)


class AddOnRequest(CamelModel):
    ages: List[int] = Field(..., description="Age of every household member")
    preferences: Optional[PreferencesInput] = None
    risk_factors: Optional[RiskFactorsInput] = None
    state_adjustment_factor: float = Field(default=1.0, gt=0, allow_inf_nan=False)
    catalog: Optional[List[AddOnProductInput]] = None


class AddOnResponse(BaseModel):
    success: bool = True
    result: Dict[str, Any]


class CatalogResponse(BaseModel):
    products: List[Dict[str, Any]]
