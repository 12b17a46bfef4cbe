import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for path in (SRC, ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from plan_advisor.comparison import plan_from_mapping, profile_from_mapping
from plan_advisor.config import load_config


@pytest.fixture(scope="session")
def config_path() -> Path:
    return ROOT / "config.yaml"


@pytest.fixture(scope="session")
def cfg(config_path):
    return load_config(config_path)


@pytest.fixture
def plan_a_data():
    return {
        "id": "plan-a",
        "name": "Plan A",
        "issuer": "Acme Health",
        "type": "PPO",
        "monthlyPremium": 300,
        "deductible": 1000,
        "outOfPocketMax": 6000,
        "primaryCareCopay": 20,
    }


@pytest.fixture
def plan_b_data():
    return {
        "id": "plan-b",
        "name": "Plan B",
        "issuer": "Beacon Mutual",
        "type": "PPO",
        "monthlyPremium": 450,
        "deductible": 0,
        "outOfPocketMax": 4000,
        "primaryCareCopay": 0,
        "coinsurance": 20,
    }


@pytest.fixture
def plan_a(plan_a_data):
    return plan_from_mapping(plan_a_data, "planA")


@pytest.fixture
def plan_b(plan_b_data):
    return plan_from_mapping(plan_b_data, "planB")


@pytest.fixture
def profile_data():
    return {
        "expectedDoctorVisits": 6,
        "expectedSpecialistVisits": 3,
        "expectedERVisits": 1,
        "expectedPrescriptions": 2,
        "avgPrescriptionTier": 2,
        "hasPlannedProcedures": False,
        "riskTolerance": "low",
    }


@pytest.fixture
def profile(profile_data):
    return profile_from_mapping(profile_data)
