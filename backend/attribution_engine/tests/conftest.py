"""Pytest configuration for HTTP-level tests

WHAT: Provides a TestClient over the FastAPI app and a realistic snapshot payload
WHY: Endpoint tests should exercise the real router, schemas and service
     wiring without a .env file or Sentry
REFERENCES:
    - attribution_engine/main.py: FastAPI application
    - attribution_engine/deps.py: Settings and dependency providers
"""

import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Set test environment before the app reads its settings
os.environ.setdefault("ENVIRONMENT", "test")
os.environ["SENTRY_DSN"] = ""
os.environ["TIMEZONE"] = "UTC"

from attribution_engine.deps import Settings, get_settings  # noqa: E402
from attribution_engine.main import create_app  # noqa: E402


# ============================================================================
# Application & Client Fixtures
# ============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Deterministic settings, independent of any local .env."""
    return Settings(
        _env_file=None,
        TIMEZONE="UTC",
        DEFAULT_PERIOD="this_month",
        DEFAULT_TOP_K=5,
        UNKNOWN_NAME_LABEL="Unknown",
        UNSPECIFIED_REASON_LABEL="Unspecified",
        RANK_REVENUE_ONLY_ENTITIES=False,
        SENTRY_DSN=None,
    )


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    """Test client with settings overridden."""
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: test_settings
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============================================================================
# Payload Fixtures
# ============================================================================


@pytest.fixture
def snapshot_payload() -> dict:
    """Two campaigns, two creatives, March 2024 metrics and sales."""
    return {
        "campaigns": [
            {"id": "C", "name": "Spring Launch", "status": "Active"},
            {"id": "D", "name": "Retargeting", "status": "Paused"},
        ],
        "ad_sets": [
            {"id": "A", "campaign_id": "C", "name": "Broad"},
            {"id": "B", "campaign_id": "D", "name": "Warm"},
        ],
        "creatives": [
            {"id": "X", "ad_set_id": "A", "name": "Hero video", "format": "Video"},
            {"id": "Y", "ad_set_id": "B", "name": "Testimonial", "format": "Image"},
        ],
        "daily_metrics": [
            {
                "id": "m1",
                "date": "2024-03-10",
                "campaign_id": "C",
                "ad_set_id": "A",
                "creative_id": "X",
                "spend": 100,
                "impressions": 2000,
                "clicks": 40,
                "leads": 4,
                "qualified_leads": 2,
            },
            {
                "id": "m2",
                "date": "2024-03-12T09:30:00",
                "campaign_id": "D",
                "ad_set_id": "B",
                "creative_id": "Y",
                "spend": 50,
                "impressions": 1000,
                "clicks": 10,
                "leads": 5,
                "qualified_leads": 1,
            },
        ],
        "sales": [
            {"id": "s1", "status": "Delivered", "value": 120, "creative_id": "X", "delivery_date": "2024-03-10"},
            {"id": "s2", "status": "Delivered", "value": 80, "creative_id": "X", "delivery_date": "2024-03-12"},
            {"id": "s3", "status": "Delivered", "value": 75, "creative_id": "FREE", "delivery_date": "2024-03-11"},
            {"id": "s4", "status": "Scheduled", "value": 500, "creative_id": "Y", "scheduled_date": "2024-03-20"},
            {"id": "s5", "status": "Lost", "value": 60, "scheduled_date": "2024-03-14", "loss_reason_id": "r1"},
            {"id": "s6", "status": "Lost", "value": 40, "scheduled_date": "2024-03-13", "loss_reason_id": "r1"},
            {"id": "s7", "status": "Lost", "value": 30, "scheduled_date": "2024-03-09", "loss_reason_id": "r1"},
            {"id": "s8", "status": "Lost", "value": 20, "scheduled_date": "2024-03-11"},
        ],
        "frustration_reasons": [{"id": "r1", "name": "No show", "category": "Client"}],
    }


@pytest.fixture
def last_7_days() -> dict:
    return {"tag": "last_7_days", "reference_date": "2024-03-15"}
