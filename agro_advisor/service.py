"""
AdvisoryService: configuration plus collaborators bundled behind one object.

The rule table is loaded once at construction and shared read-only by every
call. Weather and translation are optional collaborators; when they are
unavailable the service degrades instead of raising (no weather advice,
translation not performed).

Usage::

    from agro_advisor.config import load_config
    from agro_advisor.service import AdvisoryService

    service = AdvisoryService(load_config())
    request = service.validate({"crop": "Rice", "soilType": "Clay", "season": "Kharif"})
    advisory = service.generate(request)
    outcome = service.translate_advisory(advisory, "hi")
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

from agro_advisor.config import AppConfig
from agro_advisor.engine.composer import AdvisoryComposer
from agro_advisor.engine.validation import AdvisoryRequest, validate_request
from agro_advisor.ingestion.weather_client import WeatherClient, WeatherFetchResult
from agro_advisor.models.advisory import Advisory, WeatherReading
from agro_advisor.models.rule import RuleTable
from agro_advisor.models.translation import TranslationOutcome
from agro_advisor.rules.store import load_rule_table
from agro_advisor.translation.reconstructor import BatchTranslator, translate_advisory
from agro_advisor.translation.service import TranslationService

logger = logging.getLogger(__name__)


class AdvisoryService:
    """Public entry point for composing and translating advisories.

    Args:
        config: Application configuration.
        rule_table: Pre-loaded table; loaded from ``config.rules_path()`` if omitted.
        translator: Batch translator; ``TranslationService.from_env`` if omitted.
        weather_client: Weather client; built from WEATHER_API_KEY if omitted.
    """

    def __init__(
        self,
        config: AppConfig,
        rule_table: Optional[RuleTable] = None,
        translator: Optional[BatchTranslator] = None,
        weather_client: Optional[WeatherClient] = None,
    ) -> None:
        self.config = config
        self.rule_table = (
            rule_table if rule_table is not None else load_rule_table(config.rules_path())
        )
        self.composer = AdvisoryComposer(self.rule_table)
        self._translator = translator
        self._weather_client = weather_client

    # ── Lazily built collaborators ────────────────────────────────────────────

    @property
    def translator(self) -> BatchTranslator:
        if self._translator is None:
            self._translator = TranslationService.from_env(self.config.translation)
        return self._translator

    @property
    def weather_client(self) -> WeatherClient:
        if self._weather_client is None:
            cfg = self.config.weather
            self._weather_client = WeatherClient(
                api_key=os.environ.get("WEATHER_API_KEY"),
                base_url=cfg.base_url,
                units=cfg.units,
                timeout_s=cfg.timeout_s,
            )
        return self._weather_client

    # ── Operations ────────────────────────────────────────────────────────────

    def validate(self, raw: dict[str, Any]) -> AdvisoryRequest:
        """Validate a raw request against the configured enumerations.

        Raises:
            InvalidAdvisoryRequest: On any invalid field.
        """
        return validate_request(raw, self.config.validation)

    def generate(
        self,
        request: AdvisoryRequest,
        weather: Optional[WeatherReading] = None,
    ) -> Advisory:
        """Compose the advisory for an already validated request."""
        return self.composer.compose(
            request.crop, request.soil_type, request.season, weather
        )

    def compose_advisory(
        self,
        crop: Optional[str],
        soil_type: Optional[str],
        season: Optional[str],
        weather: Optional[WeatherReading] = None,
    ) -> Advisory:
        """Compose without request validation (unknown soils fall to static advice)."""
        return self.composer.compose(crop, soil_type, season, weather)

    def translate_advisory(self, advisory: Advisory, language_code: str) -> TranslationOutcome:
        """Translate ``advisory``; never raises for translator failures."""
        return translate_advisory(
            advisory,
            language_code.lower().strip(),
            self.translator,
            source_language=self.config.translation.source_language,
        )

    def fetch_weather_result(
        self,
        location: Optional[str] = None,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
    ) -> WeatherFetchResult:
        """Full weather lookup result, including error code on failure."""
        if lat is not None or lon is not None:
            return self.weather_client.fetch_by_coordinates(lat, lon)
        return self.weather_client.fetch_by_location(location)

    def fetch_weather(
        self,
        location: Optional[str] = None,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
    ) -> Optional[WeatherReading]:
        """Weather reading for a location or coordinates, or ``None`` on any failure."""
        result = self.fetch_weather_result(location=location, lat=lat, lon=lon)
        if not result.success:
            logger.info("Proceeding without weather advice (%s).", result.code)
            return None
        return result.data

    def options(self) -> dict[str, Any]:
        """Accepted soil types and seasons, common crops and supported languages."""
        validation = self.config.validation
        return {
            "soil_types": list(validation.soil_types),
            "seasons": list(validation.seasons),
            "common_crops": list(validation.common_crops),
            "languages": dict(self.config.translation.supported_languages),
        }
