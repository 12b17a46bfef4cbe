"""Household age brackets."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from .models import HouseholdAgeGroup

# (name, min age, max age); None means no upper bound
AGE_BRACKETS: Tuple[Tuple[str, int, Optional[int]], ...] = (
    ("Children 0–17", 0, 17),
    ("Young Adults 18–30", 18, 30),
    ("Adults 31–50", 31, 50),
    ("Adults 51–64", 51, 64),
    ("Medicare-eligible 65+", 65, None),
)

NO_APPLICABLE_MEMBERS = "No applicable members"


def _in_bracket(age: int, lo: int, hi: Optional[int]) -> bool:
    return age >= lo and (hi is None or age <= hi)


def group_ages(ages: Iterable[int]) -> List[HouseholdAgeGroup]:
    """
    Partition household ages into the fixed brackets, ascending.

    Empty brackets are omitted; negative ages belong to no bracket and are
    dropped. Each group keeps its member ages in input order.
    """
    ages = [int(a) for a in ages]
    groups: List[HouseholdAgeGroup] = []
    for name, lo, hi in AGE_BRACKETS:
        members = [a for a in ages if _in_bracket(a, lo, hi)]
        if members:
            groups.append(
                HouseholdAgeGroup(
                    group_name=name,
                    min_age=lo,
                    max_age=hi,
                    member_count=len(members),
                    ages=members,
                )
            )
    return groups


def dominant_age_group(groups: Sequence[HouseholdAgeGroup], applicable_ages: Iterable[int]) -> str:
    """Group holding the most applicable members; ties go to the older bracket."""
    applicable = list(applicable_ages)
    best_name = NO_APPLICABLE_MEMBERS
    best_count = 0
    # ascending order, so >= lets a later (older) bracket win a tie
    for group in groups:
        count = sum(1 for a in applicable if _in_bracket(a, group.min_age, group.max_age))
        if count > 0 and count >= best_count:
            best_name, best_count = group.group_name, count
    return best_name


__all__ = ["AGE_BRACKETS", "NO_APPLICABLE_MEMBERS", "group_ages", "dominant_age_group"]
