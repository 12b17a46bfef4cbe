from __future__ import annotations

from plan_advisor.addons import dominant_age_group, group_ages


def test_empty_household():
    assert group_ages([]) == []


def test_three_members_three_groups_ascending():
    groups = group_ages([10, 40, 70])
    assert [g.group_name for g in groups] == ["Children 0–17", "Adults 31–50", "Medicare-eligible 65+"]
    assert all(g.member_count == 1 for g in groups)


def test_concrete_household_ages_kept_per_group():
    groups = group_ages([5, 34, 67])
    assert [(g.group_name, g.member_count, g.ages) for g in groups] == [
        ("Children 0–17", 1, [5]),
        ("Adults 31–50", 1, [34]),
        ("Medicare-eligible 65+", 1, [67]),
    ]
    assert groups[-1].max_age is None


def test_bracket_edges_are_inclusive():
    groups = group_ages([17, 18, 30, 31, 50, 51, 64, 65])
    assert [g.member_count for g in groups] == [1, 2, 2, 2, 1]


def test_negative_ages_are_ignored():
    assert [g.ages for g in group_ages([-3, 8])] == [[8]]


def test_dominant_group_breaks_ties_toward_older_bracket():
    groups = group_ages([5, 34, 67])
    assert dominant_age_group(groups, [5, 34, 67]) == "Medicare-eligible 65+"
    assert dominant_age_group(groups, [5]) == "Children 0–17"
    assert dominant_age_group(groups, []) == "No applicable members"


def test_dominant_group_prefers_larger_group():
    groups = group_ages([6, 9, 40])
    assert dominant_age_group(groups, [6, 9, 40]) == "Children 0–17"
