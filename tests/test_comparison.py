from __future__ import annotations

import dataclasses

import pytest

from plan_advisor.comparison import AlternativeOption, RiskTolerance, compare_plans, quick_comparison, score
from plan_advisor.comparison.scoring import (
    DEFAULT_SCORING,
    ScoringConfig,
    risk_exposure,
    score_quality,
)


def test_quick_comparison_prefers_plan_a(plan_a, plan_b):
    quick = quick_comparison(plan_a, plan_b)
    assert quick.winner == "A"
    assert quick.winner_plan_id == "plan-a"
    assert quick.plan_a_annual_cost < quick.plan_b_annual_cost
    assert quick.cost_delta == pytest.approx(quick.plan_a_annual_cost - quick.plan_b_annual_cost)
    assert quick.cheaper_monthly == "A"
    assert quick.better_protection == "B"
    assert quick.summary.startswith("Plan A is cheaper")


def test_quick_comparison_reports_moderate_year(plan_a, plan_b):
    quick = quick_comparison(plan_a, plan_b)
    assert quick.moderate_plan_a_cost == pytest.approx(4050.0)
    assert quick.moderate_plan_b_cost == pytest.approx(5474.0)
    assert quick.moderate_cost_delta == pytest.approx(-1424.0)


def test_quick_and_full_agree_on_cost_winner(plan_a, plan_b):
    full = compare_plans(plan_a, plan_b)
    quick = quick_comparison(plan_a, plan_b)
    cost = next(d for d in full.dimensions if d.name == "cost")
    assert cost.winner == quick.winner
    assert cost.plan_a_value == pytest.approx(quick.plan_a_annual_cost)


def test_full_comparison_without_profile(plan_a, plan_b):
    result = compare_plans(plan_a, plan_b)
    winners = {d.name: d.winner for d in result.dimensions}
    assert winners == {"cost": "A", "coverage": "tie", "quality": "tie", "risk_fit": "A"}
    assert result.overall_winner.plan == "A"
    assert result.overall_winner.confidence == "medium"
    assert not result.overall_winner.equivalent
    assert not result.personalized
    assert [s.name for s in result.scenarios] == ["Low", "Moderate", "High"]
    assert result.caveats == []
    assert "Plan A" in result.summary


def test_overall_winner_is_symmetric(plan_a, plan_b, profile):
    forward = compare_plans(plan_a, plan_b, profile).overall_winner
    backward = compare_plans(plan_b, plan_a, profile).overall_winner
    assert {forward.plan, backward.plan} == {"A", "B"}
    assert forward.plan_id == backward.plan_id
    assert forward.margin == pytest.approx(backward.margin)
    assert forward.plan_a_wins == backward.plan_b_wins


def test_identical_plans_are_equivalent_not_forced(plan_a):
    twin = dataclasses.replace(plan_a, id="plan-a2", name="Plan A2")
    winner = compare_plans(plan_a, twin).overall_winner
    assert winner.equivalent
    assert winner.plan == "A"
    assert winner.margin == 0
    assert "No material difference" in winner.rationale


def test_personalized_comparison_adds_scenario_and_caveats(plan_a, plan_b, profile):
    chronic = dataclasses.replace(profile, has_chronic_conditions=True, needs_specific_providers=True)
    result = compare_plans(plan_a, plan_b, chronic)
    assert result.personalized
    assert result.scenarios[-1].name == "Personalized"
    assert any("chronic" in c for c in result.caveats)
    assert any("in network" in c for c in result.caveats)


def test_reasoning_names_dimension_the_loser_leads(plan_a, plan_b):
    rated_b = dataclasses.replace(plan_b, quality_rating=5.0)
    result = compare_plans(plan_a, rated_b)
    assert result.overall_winner.plan == "A"
    assert "However, Plan B still leads on quality rating" in result.reasoning


def test_key_differences(plan_a, plan_b):
    diffs = compare_plans(plan_a, plan_b).key_differences
    assert any("$150 lower monthly premium" in d for d in diffs)
    assert any("lower deductible" in d and d.startswith("Plan B") for d in diffs)
    assert any("out-of-pocket maximum" in d for d in diffs)


def test_alternatives_pass_through(plan_a, plan_b):
    options = [AlternativeOption(plan_id="plan-c", name="Plan C", pros=["cheap"], cons=[])]
    assert compare_plans(plan_a, plan_b, alternatives=options).alternatives == options


def test_risk_tolerance_reweights_exposure(plan_a, plan_b):
    # A: exposure 3500, premiums 3600; B: exposure 2000, premiums 5400
    assert risk_exposure(plan_a, RiskTolerance.LOW) == pytest.approx(0.75 * 3500 + 0.25 * 3600)
    assert risk_exposure(plan_b, RiskTolerance.HIGH) == pytest.approx(0.25 * 2000 + 0.75 * 5400)
    card = score(plan_a, plan_b, None)
    assert card.risk_tolerance == "medium"


def test_unrated_quality_scores_neutral(plan_a, plan_b):
    rated = dataclasses.replace(plan_b, quality_rating=3.0)
    dim = score_quality(plan_a, rated)
    assert dim.winner == "tie"
    assert "Unrated plans" in dim.rationale


def test_custom_weights_flow_through(plan_a, plan_b):
    scoring = ScoringConfig.from_mapping({"weights": {"cost": 5}})
    card = score(plan_a, plan_b, scoring=scoring)
    assert card.dimension("cost").weight == 5
    assert card.dimension("coverage").weight == DEFAULT_SCORING.weight("coverage")
