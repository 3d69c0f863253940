"""Shared fixtures for SiteBoss tests."""

import copy
import os
import pytest
from fastapi.testclient import TestClient

# Ensure we use test settings
os.environ.setdefault("FB_VERIFY_TOKEN", "test-verify-token")
os.environ["FB_PAGE_ACCESS_TOKEN"] = ""

from quoting.core_config import CoreConfig
from quoting.lead_extractor import LeadExtractor
from quoting.rules_engine import RulesEngine
from quoting.reply_decider import ReplyDecider


CORE_DOC = {
    "version": "test-1",
    "business_rules": {
        "supported_services": [
            "colorbond_fencing",
            "aluminium_fencing",
            "timber_fencing",
            "retaining_walls",
            "excavation",
            "landscaping",
        ],
        "minimum_job_value": 1500,
        "tight_access_minimum": 3000,
        "wet_season_multiplier": 1.1,
        "deposit_percentage_default": 0.2,
        "block_new_work_if_overdue": True,
    },
    "pricing_engine": {
        "base_rates": {
            "colorbond_fencing": 80,
            "aluminium_fencing": 120,
            "timber_fencing": 95,
            "retaining_walls": 350,
            "excavation": 90,
            "landscaping": 65,
        },
        "multipliers": {
            "height": {"1.2m": 0.9, "1.5m": 0.95, "1.8m": 1.0, "2.1m": 1.15},
            "access": {"easy": 1.0, "restricted": 1.15, "tight": 1.35},
            "ground": {"unknown": 1.0, "soft": 1.05, "rocky": 1.3},
        },
        "range": {"low_factor": 0.9, "high_factor": 1.2},
    },
    "lead_filtering": {
        "rules": [
            {"id": "unsupported_service", "message": "Sorry, we don't do that job."},
            {"id": "min_job_value", "message": "Sorry, our minimum job is $1,500."},
            {"id": "tight_access_min", "message": "Sorry, tight access jobs start at $3,000."},
        ]
    },
    "payment_chasing": {
        "schedule": [
            {"day": 0, "type": "invoice_sent"},
            {"day": 7, "type": "friendly_reminder"},
            {"day": 14, "type": "final_notice"},
        ]
    },
}


@pytest.fixture
def core_doc():
    """Raw core config document (safe to modify per test)."""
    return copy.deepcopy(CORE_DOC)


@pytest.fixture
def core_config(core_doc):
    return CoreConfig.from_dict(core_doc)


@pytest.fixture
def engine(core_config):
    return RulesEngine(core_config)


@pytest.fixture
def extractor():
    return LeadExtractor(minimum_job_value=1500)


@pytest.fixture
def decider(engine):
    return ReplyDecider(engine=engine)


@pytest.fixture
def client():
    """Create a FastAPI test client (runs start-up with the bundled core config)."""
    from api.main import app
    with TestClient(app) as test_client:
        yield test_client
