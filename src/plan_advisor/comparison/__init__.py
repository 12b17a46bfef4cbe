"""Plan comparison engine: cost simulation, multi-criteria scoring and narrative."""

from .models import (
    AlternativeOption,
    MetalLevel,
    PlanDetails,
    PlanType,
    RiskTolerance,
    UserHealthProfile,
    alternative_from_mapping,
    plan_from_mapping,
    profile_from_mapping,
)
from .orchestrator import ComparisonResult, QuickResult, compare_plans, quick_comparison
from .scenarios import (
    DefaultUsage,
    PersonalizedUsage,
    ReferenceCosts,
    SimulationConfig,
    UsageScenario,
    build_scenarios,
    resolve_usage_context,
)
from .scoring import ScoreCard, ScoringConfig, score
from .simulator import AnnualCost, simulate

__all__ = [
    "AlternativeOption",
    "MetalLevel",
    "PlanDetails",
    "PlanType",
    "RiskTolerance",
    "UserHealthProfile",
    "alternative_from_mapping",
    "plan_from_mapping",
    "profile_from_mapping",
    "ComparisonResult",
    "QuickResult",
    "compare_plans",
    "quick_comparison",
    "DefaultUsage",
    "PersonalizedUsage",
    "ReferenceCosts",
    "SimulationConfig",
    "UsageScenario",
    "build_scenarios",
    "resolve_usage_context",
    "ScoreCard",
    "ScoringConfig",
    "score",
    "AnnualCost",
    "simulate",
]
