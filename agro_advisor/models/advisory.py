"""
Advisory input and output models.

``AdvisoryInputs`` is the normalized (trimmed, null-safe) request handed to
every resolver. ``WeatherReading`` is the optional live weather snapshot.

``CategoryAdvice`` / ``WeatherAdvice`` are the per-domain results, and
``Advisory`` is the complete structured recommendation for one request.

All models are frozen: an ``Advisory`` is constructed fresh per request and
never mutated afterwards. Translation builds a *new* ``Advisory`` with the
same shape (see ``agro_advisor.translation.reconstructor``).

Field names are snake_case in Python; ``model_dump(by_alias=True)`` emits the
camelCase wire names (``cropAdvice``, ``ruleApplied``, ``confidenceScore``).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from agro_advisor.taxonomy.advisory_taxonomy import (
    UNKNOWN_CROP,
    WarningSeverity,
    WarningType,
)

_WIRE_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class AdvisoryInputs(BaseModel):
    """Normalized resolver inputs.

    Attributes:
        crop: Trimmed crop name, or ``None`` when absent or blank.
        soil_type: Trimmed soil type ("" when absent).
        season: Trimmed season ("" when absent).
    """

    model_config = _WIRE_CONFIG

    crop: Optional[str] = None
    soil_type: str = ""
    season: str = ""

    @classmethod
    def normalize(
        cls,
        crop: Optional[str],
        soil_type: Optional[str],
        season: Optional[str],
    ) -> "AdvisoryInputs":
        """Trim all strings; blank or missing crop becomes ``None``."""
        crop_clean = crop.strip() if crop else None
        return cls(
            crop=crop_clean or None,
            soil_type=soil_type.strip() if soil_type else "",
            season=season.strip() if season else "",
        )

    @property
    def crop_known(self) -> bool:
        """True when a real crop was given (not absent and not "unknown")."""
        return self.crop is not None and self.crop.lower() != UNKNOWN_CROP


class WeatherReading(BaseModel):
    """Current weather at the farm.

    Attributes:
        temperature: Air temperature in °C.
        humidity: Relative humidity in percent (0–100).
        description: Free-text condition, e.g. ``"light rain"``.
    """

    model_config = ConfigDict(frozen=True)

    temperature: float
    humidity: float
    description: str = ""

    @field_validator("humidity")
    @classmethod
    def validate_humidity(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"humidity must be in [0, 100], got {v}.")
        return v


class CategoryAdvice(BaseModel):
    """Advice for one rule category.

    Attributes:
        recommendation: Advice text.
        confidence: Integer confidence, nominally 1–10.
        explanation: Why this advice was chosen.
        rule_applied: Matched rule id or a ``FallbackTag`` value.
    """

    model_config = _WIRE_CONFIG

    recommendation: str
    confidence: int
    explanation: str
    rule_applied: str


class WeatherWarning(BaseModel):
    """One weather risk warning."""

    model_config = _WIRE_CONFIG

    type: WarningType
    severity: WarningSeverity
    message: str


class CurrentWeather(BaseModel):
    """Weather snapshot stringified with units, e.g. ``"36°C"`` / ``"50%"``."""

    model_config = _WIRE_CONFIG

    temperature: str
    humidity: str
    description: str


class WeatherAdvice(BaseModel):
    """Threshold-derived weather risk advice.

    Attributes:
        current_weather: Snapshot with units.
        warnings: Co-occurring warnings, in evaluation order.
        recommendations: Actions, in evaluation order.
        confidence: 6 (no warnings), 8 (base) or 9 (more than two warnings).
        explanation: Summary of what was analysed.
        rule_applied: Always ``"weather_analysis"``.
    """

    model_config = _WIRE_CONFIG

    current_weather: CurrentWeather
    warnings: tuple[WeatherWarning, ...] = ()
    recommendations: tuple[str, ...] = ()
    confidence: int
    explanation: str
    rule_applied: str = "weather_analysis"


class Advisory(BaseModel):
    """Complete advisory for one farmer request.

    ``confidence_score`` is the one-decimal mean of the three category
    confidences; weather advice never contributes to it.
    """

    model_config = _WIRE_CONFIG

    crop_advice: CategoryAdvice
    fertilizer_advice: CategoryAdvice
    irrigation_advice: CategoryAdvice
    weather_advice: Optional[WeatherAdvice] = None
    confidence_score: float

    @property
    def category_advice(self) -> tuple[CategoryAdvice, CategoryAdvice, CategoryAdvice]:
        """The three mandatory category advices in canonical order."""
        return (self.crop_advice, self.fertilizer_advice, self.irrigation_advice)

    def to_wire(self) -> dict:
        """JSON-ready dict using camelCase names; ``weatherAdvice`` omitted when absent."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
