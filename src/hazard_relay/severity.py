"""Magnitude threshold tables for tsunami alerts."""

from __future__ import annotations

from hazard_relay.models import Severity

# (minimum magnitude, severity), checked in order
SEVERITY_THRESHOLDS: tuple[tuple[float, Severity], ...] = (
    (7.5, "warning"),
    (7.0, "watch"),
    (6.5, "advisory"),
)

WAVE_HEIGHT_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (7.5, "3-10m"),
    (7.0, "1-3m"),
)
DEFAULT_WAVE_HEIGHT = "0.5-1m"


def tsunami_severity(magnitude: float | None) -> Severity:
    """Map a magnitude to a tsunami alert severity band."""
    mag = magnitude or 0.0
    for threshold, severity in SEVERITY_THRESHOLDS:
        if mag >= threshold:
            return severity
    return "information"


def wave_height_band(magnitude: float | None) -> str:
    """Descriptive wave-height range for a magnitude, using the same tiers."""
    mag = magnitude or 0.0
    for threshold, band in WAVE_HEIGHT_THRESHOLDS:
        if mag >= threshold:
            return band
    return DEFAULT_WAVE_HEIGHT


def format_magnitude(magnitude: float | None) -> str:
    """Whole magnitudes print without a decimal, others at full precision."""
    mag = float(magnitude or 0)
    return str(int(mag)) if mag.is_integer() else repr(mag)


def tsunami_message(magnitude: float | None) -> str:
    return f"Earthquake of magnitude {format_magnitude(magnitude)} detected. Tsunami possible."
