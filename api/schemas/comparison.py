from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .plan import AlternativeInput, CamelModel, PlanInput, UserProfileInput


class ComparisonRequest(CamelModel):
    plan_a: PlanInput
    plan_b: PlanInput
    user_profile: Optional[UserProfileInput] = None
    mode: Literal["full", "quick"] = "full"
    alternatives: List[AlternativeInput] = Field(default_factory=list)


class ComparisonResponse(BaseModel):
    success: bool = True
    mode: Literal["full", "quick"]
    result: Dict[str, Any]
