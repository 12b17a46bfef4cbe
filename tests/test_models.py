from __future__ import annotations

import pytest

from plan_advisor.addons import add_on_from_mapping, preferences_from_mapping
from plan_advisor.comparison import PlanType, RiskTolerance, plan_from_mapping, profile_from_mapping
from plan_advisor.errors import ShapeError


def test_plan_accepts_camel_and_snake_keys(plan_a_data):
    snake = {
        "id": "p",
        "name": "P",
        "issuer": "I",
        "type": "HMO",
        "monthly_premium": 100,
        "deductible": 0,
        "out_of_pocket_max": 500,
    }
    plan = plan_from_mapping(snake)
    assert plan.type is PlanType.HMO
    assert plan.out_of_pocket_max == 500

    camel = plan_from_mapping(plan_a_data)
    assert camel.primary_care_copay == 20
    assert camel.coinsurance is None


def test_oop_below_deductible_is_rejected(plan_a_data):
    plan_a_data["outOfPocketMax"] = 500
    with pytest.raises(ShapeError) as err:
        plan_from_mapping(plan_a_data, "planA")
    assert err.value.field == "planA.outOfPocketMax"


@pytest.mark.parametrize(
    "field, value",
    [
        ("monthlyPremium", -1),
        ("monthlyPremium", "300"),
        ("deductible", float("nan")),
        ("type", "INDEMNITY"),
        ("coinsurance", 150),
        ("qualityRating", 7),
    ],
)
def test_malformed_plan_fields(plan_a_data, field, value):
    plan_a_data[field] = value
    with pytest.raises(ShapeError) as err:
        plan_from_mapping(plan_a_data, "planA")
    assert err.value.field == f"planA.{field}"


def test_missing_required_field(plan_a_data):
    del plan_a_data["issuer"]
    with pytest.raises(ShapeError, match="missing required field"):
        plan_from_mapping(plan_a_data, "planA")


def test_subsidised_premium_drives_premium_math(plan_a_data):
    plan_a_data["monthlyPremiumAfterSubsidy"] = 120
    plan = plan_from_mapping(plan_a_data)
    assert plan.effective_monthly_premium == 120


def test_profile_defaults_and_none():
    assert profile_from_mapping(None) is None
    profile = profile_from_mapping({})
    assert profile.risk_tolerance is RiskTolerance.MEDIUM
    assert profile.avg_prescription_tier == 1.0
    assert profile.expected_er_visits == 0


def test_profile_rejects_out_of_range_tier():
    with pytest.raises(ShapeError) as err:
        profile_from_mapping({"avgPrescriptionTier": 5})
    assert err.value.field == "userProfile.avgPrescriptionTier"


def test_profile_er_visits_wire_name():
    profile = profile_from_mapping({"expectedERVisits": 2})
    assert profile.expected_er_visits == 2
    with pytest.raises(ShapeError) as err:
        profile_from_mapping({"expectedERVisits": -1})
    assert err.value.field == "userProfile.expectedERVisits"


def test_add_on_entry_validation():
    with pytest.raises(ShapeError):
        add_on_from_mapping({"id": "x", "category": "pet", "baseCostPerMonth": 10})
    with pytest.raises(ShapeError):
        add_on_from_mapping(
            {
                "id": "x",
                "category": "dental",
                "baseCostPerMonth": 10,
                "ageRecommendations": [
                    {"minAge": 40, "maxAge": 30, "probabilityThreshold": 50, "reasonCode": "DEPENDENTS"}
                ],
            }
        )


def test_preferences_reject_unknown_category():
    with pytest.raises(ShapeError):
        preferences_from_mapping({"excludeCategories": ["pet"]})


def test_subsidy_above_list_premium_is_rejected(plan_a_data):
    plan_a_data["monthlyPremiumAfterSubsidy"] = 900
    with pytest.raises(ShapeError) as err:
        plan_from_mapping(plan_a_data, "planA")
    assert err.value.field == "planA.monthlyPremiumAfterSubsidy"

    plan_a_data["monthlyPremiumAfterSubsidy"] = 120
    assert plan_from_mapping(plan_a_data).effective_monthly_premium == 120
