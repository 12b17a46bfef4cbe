from __future__ import annotations

import dataclasses

import pytest

from plan_advisor.comparison.scenarios import (
    DEFAULT_SIMULATION,
    HIGH,
    LOW,
    MODERATE,
    PERSONALIZED,
    DefaultUsage,
    PersonalizedUsage,
    UsageScenario,
    build_scenarios,
    scenario_from_profile,
)
from plan_advisor.comparison.simulator import major_medical_exposure, simulate


def _scenario(name):
    return next(s for s in DEFAULT_SIMULATION.scenarios if s.name == name)


def test_moderate_breakdown_plan_a(plan_a):
    cost = simulate(plan_a, _scenario(MODERATE))
    assert cost.copays == pytest.approx(80.0)
    assert cost.deductible_paid == pytest.approx(370.0)
    assert cost.coinsurance_paid == pytest.approx(0.0)
    assert cost.premiums == pytest.approx(3600.0)
    assert cost.total == pytest.approx(4050.0)
    assert not cost.hit_out_of_pocket_max


def test_moderate_breakdown_plan_b(plan_b):
    cost = simulate(plan_b, _scenario(MODERATE))
    # zero copay still governs primary care; specialist and generics fall to coinsurance
    assert cost.copays == pytest.approx(0.0)
    assert cost.coinsurance_paid == pytest.approx(74.0)
    assert cost.total == pytest.approx(5474.0)


def test_high_scenario_totals(plan_a, plan_b):
    assert simulate(plan_a, _scenario(HIGH)).total == pytest.approx(7236.0)
    assert simulate(plan_b, _scenario(HIGH)).total == pytest.approx(7996.0)


def test_out_of_pocket_is_capped(plan_a):
    capped = dataclasses.replace(plan_a, out_of_pocket_max=2000.0, deductible=1000.0)
    cost = simulate(capped, _scenario(HIGH))
    assert cost.out_of_pocket == pytest.approx(2000.0)
    assert cost.hit_out_of_pocket_max


def test_zero_usage_costs_only_premiums(plan_a):
    cost = simulate(plan_a, UsageScenario(name="Empty"))
    assert cost.out_of_pocket == 0
    assert cost.total == pytest.approx(3600.0)
    assert not cost.hit_out_of_pocket_max


@pytest.mark.parametrize("name", [LOW, MODERATE, HIGH])
def test_annual_cost_never_exceeds_premiums_plus_oop(plan_a, plan_b, name):
    overstated_subsidy = dataclasses.replace(plan_a, monthly_premium_after_subsidy=900.0)
    for plan in (plan_a, plan_b, overstated_subsidy):
        cost = simulate(plan, _scenario(name))
        assert cost.total <= 12 * plan.monthly_premium + plan.out_of_pocket_max + 1e-9


def test_higher_deductible_never_lowers_personalized_cost(plan_a, profile):
    scenario = scenario_from_profile(profile)
    previous = None
    for deductible in (0, 250, 1000, 3000, 6000):
        plan = dataclasses.replace(plan_a, deductible=float(deductible))
        total = simulate(plan, scenario).total
        if previous is not None:
            assert total >= previous - 1e-9
        previous = total


def test_profile_prescriptions_route_by_tier(profile):
    scenario = scenario_from_profile(profile)
    assert scenario.brand_prescriptions == 24
    assert scenario.generic_prescriptions == 0
    specialty = scenario_from_profile(dataclasses.replace(profile, avg_prescription_tier=3.6))
    assert specialty.specialty_prescriptions == 24


def test_scenario_order_is_fixed(profile):
    assert [s.name for s in build_scenarios(DefaultUsage())] == [LOW, MODERATE, HIGH]
    personal = build_scenarios(PersonalizedUsage(profile))
    assert [s.name for s in personal] == [LOW, MODERATE, HIGH, PERSONALIZED]
    assert personal[0].doctor_visits == pytest.approx(profile.expected_doctor_visits * 0.5)
    assert personal[2].planned_procedure


def test_major_medical_exposure(plan_a, plan_b):
    assert major_medical_exposure(plan_a) == pytest.approx(9600.0)
    assert major_medical_exposure(plan_b) == pytest.approx(9400.0)


def test_subsidy_lowers_but_never_raises_premiums(plan_a):
    subsidised = dataclasses.replace(plan_a, monthly_premium_after_subsidy=120.0)
    assert simulate(subsidised, _scenario(MODERATE)).premiums == pytest.approx(1440.0)
    overstated = dataclasses.replace(plan_a, monthly_premium_after_subsidy=900.0)
    assert overstated.effective_monthly_premium == pytest.approx(300.0)
    assert simulate(overstated, _scenario(HIGH)).premiums == pytest.approx(3600.0)


@pytest.mark.parametrize(
    "field, value",
    [
        ("primary_care_copay", float("nan")),
        ("primary_care_copay", -15.0),
        ("primary_care_copay", float("inf")),
        ("coinsurance", 150.0),
        ("coinsurance", float("nan")),
        ("coinsurance", -5.0),
    ],
)
def test_malformed_optional_terms_count_as_absent(plan_a, field, value):
    malformed = dataclasses.replace(plan_a, **{field: value})
    absent = dataclasses.replace(plan_a, **{field: None})
    for name in (LOW, MODERATE, HIGH):
        assert simulate(malformed, _scenario(name)) == simulate(absent, _scenario(name))


def test_nan_copay_routes_visits_through_the_deductible(plan_a):
    cost = simulate(dataclasses.replace(plan_a, primary_care_copay=float("nan")), _scenario(MODERATE))
    assert cost.copays == pytest.approx(0.0)
    assert cost.deductible_paid > 370.0


def test_non_finite_counts_and_amounts_are_clamped(plan_a):
    scenario = UsageScenario(name="Broken", doctor_visits=float("nan"), specialist_visits=-3)
    cost = simulate(plan_a, scenario)
    assert cost.out_of_pocket == 0
    assert cost.total == pytest.approx(3600.0)
    broken_plan = dataclasses.replace(plan_a, deductible=float("nan"), out_of_pocket_max=float("inf"))
    for field in ("premiums", "copays", "deductible_paid", "coinsurance_paid", "out_of_pocket", "total"):
        value = getattr(simulate(broken_plan, _scenario(HIGH)), field)
        assert value >= 0 and value != float("inf") and value == value
