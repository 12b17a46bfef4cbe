from __future__ import annotations

import pytest

from plan_advisor.addons import (
    DEFAULT_CATALOG,
    AddOnCategory,
    AddOnConfig,
    AddOnPreferences,
    HouseholdRiskFactors,
    Priority,
    add_on_from_mapping,
    bundle_discount,
    get_by_id,
    recommendations_by_priority,
    score_add_ons,
    score_product,
    total_add_on_cost,
)


def _by_id(recs):
    return {r.insurance.id: r for r in recs}


def test_default_catalog_has_eight_products():
    assert len(DEFAULT_CATALOG) == 8
    assert {p.category for p in DEFAULT_CATALOG} == set(AddOnCategory)


def test_single_child_household():
    analysis = score_add_ons(DEFAULT_CATALOG, [10])
    assert [r.insurance.id for r in analysis.recommendations] == ["dental", "vision", "accident"]
    assert [r.insurance.id for r in analysis.high_priority] == ["dental", "vision"]
    assert [r.insurance.id for r in analysis.medium_priority] == ["accident"]
    assert analysis.low_priority == []
    assert analysis.total_monthly_high_priority == pytest.approx(67.0)
    assert analysis.total_monthly_medium_priority == pytest.approx(35.0)
    assert analysis.total_monthly_all_recommended == pytest.approx(102.0)
    assert len(analysis.all_recommendations) == 8


def test_unmatched_products_score_zero_and_stay_in_all_recommendations():
    analysis = score_add_ons(DEFAULT_CATALOG, [10])
    disability = _by_id(analysis.all_recommendations)["disability"]
    assert disability.probability_score == 0
    assert disability.applicable_members == 0
    assert disability.household_cost_per_month == 0
    assert disability.priority is Priority.LOW
    assert "disability" not in _by_id(analysis.recommendations)
    # zero-probability entries trail in catalog order
    assert [r.insurance.id for r in analysis.all_recommendations[3:]] == [
        "critical-illness",
        "hospital-indemnity",
        "disability",
        "long-term-care",
        "term-life",
    ]


def test_mixed_household_takes_maximum_threshold():
    analysis = score_add_ons(DEFAULT_CATALOG, [5, 34, 67])
    recs = _by_id(analysis.all_recommendations)

    dental = recs["dental"]
    assert dental.probability_score == 95
    assert dental.priority is Priority.HIGH
    assert dental.applicable_members == 3
    assert dental.household_cost_per_month == pytest.approx(135.0)
    assert dental.age_group == "Medicare-eligible 65+"
    assert "Typically not covered by standard health insurance" in dental.reasons

    disability = recs["disability"]
    assert disability.probability_score == 90
    assert disability.applicable_members == 2
    assert disability.household_cost_per_month == pytest.approx(250.0)

    ltc = recs["long-term-care"]
    assert ltc.probability_score == 85
    assert ltc.priority is Priority.HIGH
    assert ltc.reasons[0] == "Higher likelihood of critical health events"


def test_household_cost_uses_state_adjustment_factor():
    rec = score_product(get_by_id(DEFAULT_CATALOG, "dental"), [10, 12], state_adjustment_factor=1.2)
    assert rec.adjusted_cost_per_month == pytest.approx(54.0)
    assert rec.household_cost_per_month == pytest.approx(108.0)


def test_adding_member_in_high_bracket_never_lowers_applicable_members():
    base = [34]
    before = _by_id(score_add_ons(DEFAULT_CATALOG, base).all_recommendations)
    for product in DEFAULT_CATALOG:
        for bracket in product.age_recommendations:
            if bracket.priority is not Priority.HIGH:
                continue
            after = score_product(product, base + [bracket.min_age])
            assert after.applicable_members >= before[product.id].applicable_members


def test_empty_household_is_well_formed():
    analysis = score_add_ons(DEFAULT_CATALOG, [])
    assert analysis.recommendations == []
    assert analysis.household_age_groups == []
    assert analysis.total_monthly_all_recommended == 0
    assert all(r.probability_score == 0 for r in analysis.all_recommendations)


def test_excluded_categories_are_filtered_not_rescored():
    plain = _by_id(score_add_ons(DEFAULT_CATALOG, [10]).all_recommendations)
    prefs = AddOnPreferences(exclude_categories=frozenset({AddOnCategory.DENTAL}))
    analysis = score_add_ons(DEFAULT_CATALOG, [10], prefs)
    assert "dental" not in _by_id(analysis.all_recommendations)
    assert [r.insurance.id for r in analysis.recommendations] == ["vision", "accident"]
    assert _by_id(analysis.recommendations)["vision"] == plain["vision"]


@pytest.mark.parametrize(
    "budget, expected",
    [
        (60, ["dental"]),
        (70, ["dental", "vision"]),
        (30, ["vision"]),
        (0, []),
    ],
)
def test_budget_keeps_items_greedily(budget, expected):
    prefs = AddOnPreferences(max_monthly_budget=budget)
    analysis = score_add_ons(DEFAULT_CATALOG, [10], prefs)
    assert [r.insurance.id for r in analysis.recommendations] == expected


def test_risk_modifiers_shift_score_but_not_priority():
    risks = HouseholdRiskFactors(has_chronic_conditions=True, monthly_budget=400)
    recs = _by_id(score_add_ons(DEFAULT_CATALOG, [45], risk_factors=risks).all_recommendations)

    assert recs["critical-illness"].probability_score == 90
    assert recs["hospital-indemnity"].probability_score == 70
    assert recs["hospital-indemnity"].priority is Priority.MEDIUM
    # 90 + 10 chronic - 10 budget
    assert recs["disability"].probability_score == 90
    # long-term care 30 - 10 falls under the recommendation threshold
    assert recs["long-term-care"].probability_score == 20
    assert any("budget" in r for r in recs["long-term-care"].reasons)


def test_modifiers_never_lift_unmatched_products():
    risks = HouseholdRiskFactors(has_chronic_conditions=True, multiple_residences=True)
    recs = _by_id(score_add_ons(DEFAULT_CATALOG, [10], risk_factors=risks).all_recommendations)
    assert recs["disability"].probability_score == 0
    assert recs["hospital-indemnity"].probability_score == 0
    assert recs["accident"].probability_score == 75


def test_bracket_without_priority_derives_it_from_threshold():
    product = add_on_from_mapping(
        {
            "id": "custom",
            "name": "Custom",
            "category": "accident",
            "baseCostPerMonth": 10,
            "ageRecommendations": [
                {"minAge": 0, "maxAge": 120, "probabilityThreshold": 80, "reasonCode": "OUT_OF_POCKET"},
            ],
        }
    )
    assert score_product(product, [30]).priority is Priority.HIGH
    strict = AddOnConfig.from_mapping({"thresholds": {"high": 90}})
    assert score_product(product, [30], config=strict).priority is Priority.MEDIUM


def test_selection_helpers():
    analysis = score_add_ons(DEFAULT_CATALOG, [10])
    assert bundle_discount(analysis.recommendations[:2]) == 1.0
    assert bundle_discount(analysis.recommendations) == pytest.approx(0.95)
    assert total_add_on_cost(analysis.recommendations) == pytest.approx(96.9)
    high = recommendations_by_priority(analysis, Priority.HIGH)
    assert [r.insurance.id for r in high] == ["dental", "vision"]
