"""Shared fixtures for hazard_relay tests."""

from __future__ import annotations

import json
import random
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from hazard_relay.api import create_app
from hazard_relay.config import RelayConfig
from hazard_relay.models import MLPredictionInput

FIXTURES_DIR = Path(__file__).parent / "fixtures"

FEED_URL = "https://feed.test/all_day.geojson"
CHATBOT_URL = "https://chatbot.test/chatbot"
PREDICTION_URL = "https://model.test/predict"


@pytest.fixture
def sample_feed() -> dict:
    return json.loads((FIXTURES_DIR / "feed_sample.json").read_text())


@pytest.fixture
def sample_features(sample_feed: dict) -> list[dict]:
    return sample_feed["features"]


@pytest.fixture
def relay_config() -> RelayConfig:
    """Config pointing every upstream at a test host."""
    return RelayConfig(
        feed_url=FEED_URL,
        chatbot_url=CHATBOT_URL,
        prediction_url=PREDICTION_URL,
        request_timeout=5,
    )


@pytest.fixture
def client(relay_config: RelayConfig) -> Generator[TestClient, None, None]:
    """TestClient with lifespan entered so app.state is initialised.

    A fresh app per test keeps the in-memory store isolated.
    """
    with TestClient(create_app(relay_config, rng=random.Random(1234))) as c:
        yield c


@pytest.fixture
def small_asteroid() -> MLPredictionInput:
    return MLPredictionInput(
        diameter=0.5, velocity=20.0, distance=384400, mass=1e10, trajectory_angle=45
    )


@pytest.fixture
def large_asteroid() -> MLPredictionInput:
    return MLPredictionInput(
        diameter=2.5, velocity=30.0, distance=1000, mass=1e14, trajectory_angle=60
    )
