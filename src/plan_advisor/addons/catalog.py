"""
Default supplemental-insurance catalog.

Base costs are national monthly averages per covered member; callers resolve
state pricing themselves and pass a `state_adjustment_factor` to the scorer.
A catalog from config or an API payload replaces this one wholesale.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .models import AddOnCategory, AddOnInsurance, add_on_from_mapping


def _brackets(*rows) -> List[Dict[str, Any]]:
    return [
        {
            "min_age": lo,
            "max_age": hi,
            "priority": priority,
            "probability_threshold": threshold,
            "reason_code": reason,
        }
        for lo, hi, priority, threshold, reason in rows
    ]


DEFAULT_CATALOG_DATA: List[Dict[str, Any]] = [
    {
        "id": "dental",
        "name": "Dental Insurance",
        "short_name": "Dental",
        "description": "Coverage for preventive care, basic procedures, and major dental work",
        "category": "dental",
        "base_cost_per_month": 45,
        "benefits": [
            "2 cleanings & exams per year",
            "X-rays and diagnostics",
            "Fillings and extractions",
            "Root canals and crowns",
            "Orthodontics (some plans)",
        ],
        "typical_coverage": "100% preventive, 80% basic, 50% major",
        "best_for": ["Families with children", "Anyone needing regular dental care", "Orthodontic needs"],
        "age_recommendations": _brackets(
            (0, 17, "high", 95, "CHILDREN_PRESENT"),
            (18, 30, "medium", 70, "PREVENTIVE_CARE"),
            (31, 50, "high", 85, "PREVENTIVE_CARE"),
            (51, 64, "high", 85, "PREVENTIVE_CARE"),
            (65, 120, "high", 90, "MEDICARE_GAPS"),
        ),
    },
    {
        "id": "vision",
        "name": "Vision Insurance",
        "short_name": "Vision",
        "description": "Coverage for eye exams, glasses, contact lenses, and vision correction",
        "category": "vision",
        "base_cost_per_month": 22,
        "benefits": [
            "Annual eye exam",
            "Prescription glasses or contacts",
            "Discounts on LASIK surgery",
            "Frames and lenses allowance",
        ],
        "typical_coverage": "$150-300 frames allowance, exam covered",
        "best_for": ["Anyone who wears glasses/contacts", "Families with children", "Computer workers"],
        "age_recommendations": _brackets(
            (0, 17, "high", 90, "CHILDREN_PRESENT"),
            (18, 40, "medium", 65, "PREVENTIVE_CARE"),
            (41, 64, "medium", 70, "PREVENTIVE_CARE"),
            (65, 120, "high", 85, "MEDICARE_GAPS"),
        ),
    },
    {
        "id": "accident",
        "name": "Accident Insurance",
        "short_name": "Accident",
        "description": "Cash benefits for injuries from accidents, covering out-of-pocket costs",
        "category": "accident",
        "base_cost_per_month": 35,
        "benefits": [
            "Emergency room visits",
            "Ambulance transportation",
            "Fractures and dislocations",
            "Burns and lacerations",
            "Follow-up care",
        ],
        "typical_coverage": "Lump sum payments based on injury type",
        "best_for": ["Active individuals", "Families with children", "High-deductible health plans"],
        "age_recommendations": _brackets(
            (0, 17, "medium", 70, "CHILDREN_PRESENT"),
            (18, 30, "high", 85, "YOUNG_ADULT"),
            (31, 50, "medium", 60, "OUT_OF_POCKET"),
            (51, 120, "low", 40, "OUT_OF_POCKET"),
        ),
    },
    {
        "id": "critical-illness",
        "name": "Critical Illness Insurance",
        "short_name": "Critical Illness",
        "description": "Lump sum payment upon diagnosis of major illnesses like cancer, heart attack, or stroke",
        "category": "critical-illness",
        "base_cost_per_month": 100,
        "benefits": [
            "Cancer diagnosis coverage",
            "Heart attack and stroke",
            "Organ transplant",
            "Kidney failure",
            "Major burn coverage",
        ],
        "typical_coverage": "$10,000-$100,000 lump sum benefit",
        "best_for": ["Mid-career professionals", "Those with family history", "High-deductible plans"],
        "age_recommendations": _brackets(
            (18, 30, "low", 30, "CATASTROPHIC_PROTECTION"),
            (31, 40, "medium", 60, "FAMILY_PLANNING"),
            (41, 50, "high", 80, "MID_CAREER"),
            (51, 64, "high", 90, "PRE_RETIREMENT"),
            (65, 74, "high", 85, "SENIOR_HEALTH"),
            (75, 120, "medium", 65, "SENIOR_HEALTH"),
        ),
    },
    {
        "id": "hospital-indemnity",
        "name": "Hospital Indemnity Insurance",
        "short_name": "Hospital Indemnity",
        "description": "Daily cash benefit for hospital stays, regardless of medical bills",
        "category": "hospital-indemnity",
        "base_cost_per_month": 55,
        "benefits": [
            "Daily hospital confinement benefit",
            "ICU daily benefit (higher amount)",
            "Hospital admission benefit",
            "Emergency room benefit",
            "Ambulance benefit",
        ],
        "typical_coverage": "$100-500 per day of hospitalization",
        "best_for": ["High-deductible plans", "Frequent travelers", "Older adults"],
        "age_recommendations": _brackets(
            (18, 40, "low", 35, "OUT_OF_POCKET"),
            (41, 50, "medium", 60, "OUT_OF_POCKET"),
            (51, 64, "high", 75, "HOSPITAL_RISK"),
            (65, 74, "high", 85, "HOSPITAL_RISK"),
            (75, 120, "high", 95, "HOSPITAL_RISK"),
        ),
    },
    {
        "id": "disability",
        "name": "Disability Insurance (Income Protection)",
        "short_name": "Disability",
        "description": "Replaces portion of income if unable to work due to illness or injury",
        "category": "disability",
        "base_cost_per_month": 125,
        "benefits": [
            "Short-term disability (90 days - 2 years)",
            "Long-term disability (2+ years)",
            "50-70% income replacement",
            "Own-occupation coverage",
            "Residual benefits for partial disability",
        ],
        "typical_coverage": "60% of pre-disability income",
        "best_for": ["Primary earners", "Self-employed", "Single-income households"],
        "age_recommendations": _brackets(
            (18, 30, "low", 40, "INCOME_REPLACEMENT"),
            (31, 40, "high", 90, "PRIMARY_EARNER"),
            (41, 50, "high", 90, "PRIMARY_EARNER"),
            (51, 64, "medium", 70, "PRE_RETIREMENT"),
            (65, 120, "low", 20, "INCOME_REPLACEMENT"),
        ),
    },
    {
        "id": "long-term-care",
        "name": "Long-Term Care Insurance",
        "short_name": "Long-Term Care",
        "description": "Coverage for extended care services like nursing homes, assisted living, or in-home care",
        "category": "long-term-care",
        "base_cost_per_month": 200,
        "benefits": [
            "Nursing home care",
            "Assisted living facility",
            "In-home care services",
            "Adult day care",
            "Respite care for caregivers",
        ],
        "typical_coverage": "$150-300 per day for 3-5 years",
        "best_for": ["Ages 50-60 (best rates)", "Those with family history", "Asset protection"],
        "age_recommendations": _brackets(
            (18, 40, "low", 10, "CATASTROPHIC_PROTECTION"),
            (41, 50, "low", 30, "FAMILY_PLANNING"),
            (51, 64, "medium", 70, "PRE_RETIREMENT"),
            (65, 74, "high", 85, "SENIOR_HEALTH"),
            (75, 120, "high", 90, "SENIOR_HEALTH"),
        ),
    },
    {
        "id": "term-life",
        "name": "Term Life Insurance",
        "short_name": "Term Life",
        "description": "Death benefit to protect dependents and replace income for 10-30 years",
        "category": "life",
        "base_cost_per_month": 60,
        "benefits": [
            "Death benefit payment",
            "Income replacement",
            "Mortgage protection",
            "College fund protection",
            "Final expense coverage",
        ],
        "typical_coverage": "$250,000-$1,000,000 death benefit",
        "best_for": ["Parents with children", "Primary earners", "Mortgage holders"],
        "age_recommendations": _brackets(
            (18, 30, "low", 40, "FAMILY_PLANNING"),
            (31, 40, "high", 85, "DEPENDENTS"),
            (41, 50, "high", 85, "DEPENDENTS"),
            (51, 64, "medium", 60, "DEPENDENTS"),
            (65, 120, "low", 30, "CATASTROPHIC_PROTECTION"),
        ),
    },
]


def load_catalog(entries: Iterable[Mapping[str, Any]], label: str = "catalog") -> List[AddOnInsurance]:
    return [add_on_from_mapping(entry, f"{label}[{i}]") for i, entry in enumerate(entries)]


DEFAULT_CATALOG: List[AddOnInsurance] = load_catalog(DEFAULT_CATALOG_DATA)


def catalog_from_config(addons_cfg: Optional[Mapping[str, Any]]) -> List[AddOnInsurance]:
    entries = (addons_cfg or {}).get("catalog")
    if not entries:
        return list(DEFAULT_CATALOG)
    return load_catalog(entries)


def get_by_id(catalog: Sequence[AddOnInsurance], product_id: str) -> Optional[AddOnInsurance]:
    return next((p for p in catalog if p.id == product_id), None)


def get_by_category(catalog: Sequence[AddOnInsurance], category: AddOnCategory) -> List[AddOnInsurance]:
    return [p for p in catalog if p.category == category]


__all__ = [
    "DEFAULT_CATALOG_DATA",
    "DEFAULT_CATALOG",
    "load_catalog",
    "catalog_from_config",
    "get_by_id",
    "get_by_category",
]
