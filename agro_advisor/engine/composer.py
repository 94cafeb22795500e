"""
Advisory composer: the public entry point of the engine.

Pipeline for one request::

    raw (crop, soil, season, weather?)
      → AdvisoryInputs.normalize()
      → CropResolver / FertilizerResolver / IrrigationResolver
      → resolve_weather_advice()         (only when weather is given)
      → aggregate_confidence()           (category advice only)
      → Advisory

Composition is deterministic: no randomness and no wall-clock reads, so the
same inputs and rule table always yield an equal ``Advisory``.
"""

from __future__ import annotations

import logging
from typing import Optional

from agro_advisor.engine.confidence import aggregate_confidence
from agro_advisor.engine.resolvers import CategoryResolver, build_resolvers
from agro_advisor.engine.weather_risk import resolve_weather_advice
from agro_advisor.models.advisory import Advisory, AdvisoryInputs, WeatherReading
from agro_advisor.models.rule import RuleTable
from agro_advisor.taxonomy.advisory_taxonomy import RuleCategory

logger = logging.getLogger(__name__)


class AdvisoryComposer:
    """Composes advisories against one shared, read-only ``RuleTable``.

    Safe to share across threads: the resolvers keep no per-request state.

    Attributes:
        table: Rule table injected into every resolver.
    """

    def __init__(self, table: RuleTable) -> None:
        self.table = table
        self._resolvers: dict[RuleCategory, CategoryResolver] = build_resolvers(table)

    def compose(
        self,
        crop: Optional[str],
        soil_type: Optional[str],
        season: Optional[str],
        weather: Optional[WeatherReading] = None,
    ) -> Advisory:
        """Build the advisory for one request.

        Args:
            crop: Crop name; ``None``, blank or ``"unknown"`` selects
                recommendation mode.
            soil_type: Soil type, e.g. ``"Clay"``.
            season: Season, e.g. ``"Kharif"``.
            weather: Optional live reading; adds ``weather_advice`` when given.

        Returns:
            A new frozen ``Advisory``.
        """
        inputs = AdvisoryInputs.normalize(crop, soil_type, season)

        crop_advice = self._resolvers[RuleCategory.CROP_SUITABILITY].resolve(inputs)
        fertilizer_advice = self._resolvers[RuleCategory.FERTILIZER_ADVICE].resolve(inputs)
        irrigation_advice = self._resolvers[RuleCategory.IRRIGATION_ADVICE].resolve(inputs)

        weather_advice = (
            resolve_weather_advice(weather, inputs) if weather is not None else None
        )

        score = aggregate_confidence([crop_advice, fertilizer_advice, irrigation_advice])

        logger.debug(
            "Composed advisory crop=%r soil=%r season=%r rules=(%s, %s, %s) score=%.1f",
            inputs.crop, inputs.soil_type, inputs.season,
            crop_advice.rule_applied,
            fertilizer_advice.rule_applied,
            irrigation_advice.rule_applied,
            score,
        )

        return Advisory(
            crop_advice=crop_advice,
            fertilizer_advice=fertilizer_advice,
            irrigation_advice=irrigation_advice,
            weather_advice=weather_advice,
            confidence_score=score,
        )


def compose_advisory(
    crop: Optional[str],
    soil_type: Optional[str],
    season: Optional[str],
    weather: Optional[WeatherReading] = None,
    *,
    rule_table: RuleTable,
) -> Advisory:
    """Functional form of ``AdvisoryComposer(rule_table).compose(...)``."""
    return AdvisoryComposer(rule_table).compose(crop, soil_type, season, weather)
