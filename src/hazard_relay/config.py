"""Configuration model for the hazard relay service."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

USGS_FEED_URL = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary/all_day.geojson"
CHATBOT_URL = "https://chatbot-nasa-7ikr.onrender.com/chatbot"
PREDICTION_URL = "https://nasa-hackathon-ml-model.streamlit.app/predict"


class RelayConfig(BaseSettings):
    """All configurable parameters for the relay service.

    Values can be set via constructor arguments, environment variables
    prefixed with HAZARD_RELAY_, or defaults.
    """

    model_config = {"env_prefix": "HAZARD_RELAY_"}

    feed_url: str = Field(
        default=USGS_FEED_URL, description="USGS GeoJSON summary feed URL."
    )
    chatbot_url: str = Field(
        default=CHATBOT_URL, description="External chatbot endpoint."
    )
    prediction_url: str = Field(
        default=PREDICTION_URL, description="External ML inference endpoint."
    )
    request_timeout: float = Field(
        default=30.0, ge=1.0, le=300.0, description="Per-call HTTP timeout in seconds."
    )
    http_retries: int = Field(
        default=0, ge=0, le=10, description="Retries for idempotent upstream calls."
    )
    host: str = Field(default="127.0.0.1", description="Bind address for `serve`.")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port for `serve`.")
