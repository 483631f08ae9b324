"""FastAPI surface for the hazard relay."""

from __future__ import annotations

import logging
import random
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Annotated, Any

from fastapi import Body, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from hazard_relay import __version__
from hazard_relay.cache import MemoryStore
from hazard_relay.config import RelayConfig
from hazard_relay.fetchers.usgs import fetch_earthquakes, fetch_tsunami_alerts
from hazard_relay.http import create_session
from hazard_relay.models import EarthquakeEvent, MLPredictionInput, TsunamiAlert, to_wire
from hazard_relay.relays.chatbot import ChatbotError, ask_chatbot
from hazard_relay.relays.prediction import predict_impact

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, details: Any = None) -> JSONResponse:
    content: dict[str, Any] = {"error": message}
    if details is not None:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content)


def _refresh_earthquakes(application: FastAPI) -> list[EarthquakeEvent]:
    state = application.state
    earthquakes = fetch_earthquakes(
        url=state.config.feed_url,
        timeout=state.config.request_timeout,
        session=state.session,
    )
    state.store.set_earthquakes(earthquakes)
    logger.info("Fetched %d earthquakes", len(earthquakes))
    return earthquakes


def _refresh_tsunami_alerts(application: FastAPI) -> list[TsunamiAlert]:
    state = application.state
    alerts = fetch_tsunami_alerts(
        url=state.config.feed_url,
        timeout=state.config.request_timeout,
        session=state.session,
    )
    state.store.set_tsunami_alerts(alerts)
    logger.info("Fetched %d tsunami alerts", len(alerts))
    return alerts


def create_app(
    config: RelayConfig | None = None,
    rng: random.Random | None = None,
) -> FastAPI:
    """Build the application.

    The store, HTTP session and random source are created per application
    in the lifespan and live on ``app.state``.
    """

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncGenerator[None, None]:
        state = application.state
        state.config = config or RelayConfig()
        state.store = MemoryStore()
        state.session = create_session(retries=state.config.http_retries)
        state.rng = rng or random.Random()
        state.start_time = datetime.now(tz=timezone.utc)
        try:
            yield
        finally:
            state.session.close()

    application = FastAPI(
        title="Hazard Relay API",
        description="Live earthquake and tsunami feed with chatbot and impact-prediction relays.",
        version=__version__,
        lifespan=lifespan,
    )

    @application.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [{k: v for k, v in err.items() if k != "input"} for err in exc.errors()]
        return _error(400, "Invalid request body", details)

    @application.get("/health")
    def health(request: Request) -> dict[str, Any]:
        """Server health check with uptime, version, and cache freshness."""
        state = request.app.state
        now = datetime.now(tz=timezone.utc)
        eq_at = state.store.earthquakes_updated_at
        ts_at = state.store.tsunami_alerts_updated_at
        return {
            "status": "ok",
            "version": __version__,
            "uptime_seconds": round((now - state.start_time).total_seconds(), 1),
            "feed_url": state.config.feed_url,
            "earthquakes_updated_at": eq_at.isoformat() if eq_at else None,
            "tsunami_alerts_updated_at": ts_at.isoformat() if ts_at else None,
        }

    @application.get("/api/earthquakes")
    def get_earthquakes(request: Request) -> JSONResponse:
        try:
            earthquakes = request.app.state.store.get_earthquakes()
            if not earthquakes:
                earthquakes = _refresh_earthquakes(request.app)
            return JSONResponse(content=[to_wire(eq) for eq in earthquakes])
        except Exception:
            logger.exception("Failed to fetch earthquakes")
            return _error(500, "Failed to fetch earthquakes")

    @application.get("/api/earthquakes/refresh")
    def refresh_earthquakes(request: Request) -> JSONResponse:
        try:
            earthquakes = _refresh_earthquakes(request.app)
            return JSONResponse(content=[to_wire(eq) for eq in earthquakes])
        except Exception:
            logger.exception("Failed to refresh earthquakes")
            return _error(500, "Failed to refresh earthquakes")

    @application.get("/api/tsunami-alerts")
    def get_tsunami_alerts(request: Request) -> JSONResponse:
        try:
            alerts = request.app.state.store.get_tsunami_alerts()
            if not alerts:
                alerts = _refresh_tsunami_alerts(request.app)
            return JSONResponse(content=[to_wire(a) for a in alerts])
        except Exception:
            logger.exception("Failed to fetch tsunami alerts")
            return _error(500, "Failed to fetch tsunami alerts")

    @application.get("/api/tsunami-alerts/refresh")
    def refresh_tsunami_alerts(request: Request) -> JSONResponse:
        try:
            alerts = _refresh_tsunami_alerts(request.app)
            return JSONResponse(content=[to_wire(a) for a in alerts])
        except Exception:
            logger.exception("Failed to refresh tsunami alerts")
            return _error(500, "Failed to refresh tsunami alerts")

    @application.post("/api/chatbot")
    def chatbot(
        request: Request,
        payload: Annotated[Any, Body()] = None,
    ) -> JSONResponse:
        """Forward ``{"question": ...}`` to the chatbot and relay its reply."""
        question = payload.get("question") if isinstance(payload, dict) else None
        if not question:
            return _error(400, "Question is required")

        state = request.app.state
        try:
            answer = ask_chatbot(
                question,
                url=state.config.chatbot_url,
                timeout=state.config.request_timeout,
                session=state.session,
            )
            return JSONResponse(content=answer)
        except ChatbotError:
            logger.warning("Chatbot relay failed", exc_info=True)
            return _error(500, "Failed to get chatbot response")
        except Exception:
            logger.exception("Failed to relay chatbot response")
            return _error(500, "Failed to get chatbot response")

    @application.post("/api/ml/predict")
    def ml_predict(
        request: Request,
        payload: Annotated[Any, Body()] = None,
    ) -> JSONResponse:
        """Predict asteroid impact effects via the ML service.

        The ``X-Prediction-Source`` header is ``model`` for upstream results
        and ``fallback`` for the local synthetic estimate.
        """
        try:
            params = MLPredictionInput.model_validate(payload)
        except ValidationError as exc:
            return _error(
                400,
                "Invalid prediction parameters",
                exc.errors(include_url=False, include_input=False),
            )

        state = request.app.state
        try:
            result = predict_impact(
                params,
                url=state.config.prediction_url,
                timeout=state.config.request_timeout,
                session=state.session,
                rng=state.rng,
            )
        except Exception:
            logger.exception("Failed to get ML prediction")
            return _error(500, "Failed to get ML prediction")
        return JSONResponse(
            content=result.output.to_wire(),
            headers={"X-Prediction-Source": result.source},
        )

    return application


app = create_app()
