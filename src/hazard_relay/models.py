"""Data models for the hazard relay."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Severity = Literal["warning", "watch", "advisory", "information"]
RiskLevel = Literal["low", "medium", "high", "critical"]

RISK_LEVELS: tuple[str, ...] = ("low", "medium", "high", "critical")


@dataclass(frozen=True)
class EarthquakeEvent:
    """A single event from the USGS summary feed."""

    id: str
    magnitude: float
    location: str
    depth: float
    time: int
    latitude: float
    longitude: float
    url: str
    tsunami: bool
    felt: int | None
    significance: int


@dataclass(frozen=True)
class TsunamiAlert:
    """A tsunami alert derived from a feed event with the tsunami flag set."""

    id: str
    event: str
    severity: Severity
    areas: tuple[str, ...]
    issue_time: int
    expires: int | None
    wave_height: str | None
    message: str
    url: str


@dataclass(frozen=True)
class InsertUser:
    username: str
    password: str


@dataclass(frozen=True)
class User:
    id: str
    username: str
    password: str


def to_wire(record: EarthquakeEvent | TsunamiAlert) -> dict[str, Any]:
    """Serialize a record to a JSON-ready dict with camelCase keys."""
    data = asdict(record)
    for key, value in data.items():
        if isinstance(value, tuple):
            data[key] = list(value)
    return {to_camel(key): value for key, value in data.items()}


class MLPredictionInput(BaseModel):
    """Impact-prediction parameters, validated before any upstream call."""

    model_config = ConfigDict(
        strict=True,
        populate_by_name=True,
        alias_generator=to_camel,
        frozen=True,
    )

    diameter: float = Field(ge=0.001, le=1000, allow_inf_nan=False, description="km")
    velocity: float = Field(ge=0.1, le=100, allow_inf_nan=False, description="km/s")
    distance: float = Field(ge=1, le=1_000_000, allow_inf_nan=False)
    mass: float = Field(ge=1, le=1e15, allow_inf_nan=False, description="kg")
    trajectory_angle: float = Field(ge=0, le=90, allow_inf_nan=False, description="degrees")

    def to_upstream(self) -> dict[str, float]:
        """Payload for the ML service, which expects snake_case keys."""
        return self.model_dump(by_alias=False)


class MLPredictionOutput(BaseModel):
    """Normalized prediction returned to callers."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    impact_probability: float
    risk_level: RiskLevel
    potential_damage: str
    recommended_action: str
    estimated_energy: float | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
