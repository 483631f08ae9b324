"""Relay for the external impact-prediction model, with a local fallback."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Any, Literal

from requests import Session

from hazard_relay.config import PREDICTION_URL
from hazard_relay.http import create_session
from hazard_relay.models import RISK_LEVELS, MLPredictionInput, MLPredictionOutput

logger = logging.getLogger(__name__)

PredictionSource = Literal["model", "fallback"]

LARGE_DIAMETER_KM = 1.0
FAST_VELOCITY_KMS = 50.0
ENERGY_FACTOR = 0.5

_DAMAGE_TEXT = {
    True: "Significant regional damage expected",
    False: "Localized damage possible",
}
_ACTION_TEXT = {
    True: "Immediate evacuation and deflection mission required",
    False: "Continue monitoring and prepare response plans",
}


@dataclass(frozen=True)
class PredictionResult:
    """A normalized prediction and where it came from."""

    output: MLPredictionOutput
    source: PredictionSource


def fallback_prediction(
    params: MLPredictionInput,
    rng: random.Random | None = None,
) -> MLPredictionOutput:
    """Synthetic estimate used when the model service is unavailable.

    The impact probability is drawn from *rng*; everything else is a fixed
    function of diameter and velocity.
    """
    rng = rng or random.Random()
    large = params.diameter > LARGE_DIAMETER_KM
    if large:
        risk = "high"
    elif params.velocity > FAST_VELOCITY_KMS:
        risk = "medium"
    else:
        risk = "low"

    return MLPredictionOutput(
        impact_probability=round(rng.uniform(0, 100), 2),
        risk_level=risk,
        potential_damage=_DAMAGE_TEXT[large],
        recommended_action=_ACTION_TEXT[large],
        estimated_energy=round(params.diameter * params.velocity * ENERGY_FACTOR, 2),
    )


def _pick(raw: dict[str, Any], snake: str, camel: str) -> Any:
    return raw.get(snake) or raw.get(camel)


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_prediction(raw: Any) -> MLPredictionOutput:
    """Coerce a model response into the output shape.

    Each field is read from its snake_case key, falling back to camelCase.
    """
    if not isinstance(raw, dict):
        raw = {}

    risk = str(_pick(raw, "risk_level", "riskLevel") or "low").lower()
    if risk not in RISK_LEVELS:
        logger.warning("Unknown risk level %r from prediction model, using 'low'", risk)
        risk = "low"

    return MLPredictionOutput(
        impact_probability=_to_float(_pick(raw, "impact_probability", "impactProbability")) or 0.0,
        risk_level=risk,
        potential_damage=str(_pick(raw, "potential_damage", "potentialDamage") or "Unknown"),
        recommended_action=str(
            _pick(raw, "recommended_action", "recommendedAction") or "Monitor closely"
        ),
        estimated_energy=_to_float(_pick(raw, "estimated_energy", "estimatedEnergy")),
    )


def predict_impact(
    params: MLPredictionInput,
    url: str = PREDICTION_URL,
    timeout: float = 30,
    session: Session | None = None,
    rng: random.Random | None = None,
) -> PredictionResult:
    """Ask the model service for a prediction.

    Transport failures and non-2xx responses are absorbed: both yield
    :func:`fallback_prediction`. A 2xx response whose body is not JSON
    propagates as an exception.
    """
    if session is None:
        session = create_session()

    try:
        resp = session.post(url, json=params.to_upstream(), timeout=timeout)
    except Exception:
        logger.warning("Prediction model unreachable at %s, using fallback", url, exc_info=True)
        return PredictionResult(fallback_prediction(params, rng), "fallback")

    logger.info("Prediction model responded with status %d", resp.status_code)
    if not 200 <= resp.status_code < 300:
        logger.warning("Prediction model returned %d, using fallback", resp.status_code)
        return PredictionResult(fallback_prediction(params, rng), "fallback")

    return PredictionResult(normalize_prediction(resp.json()), "model")
