"""
Advisory taxonomy for the rule-based agronomic engine.

Two families of enums describe every advisory:
  - ``RuleCategory``  — the *what*: which advisory domain a rule belongs to.
  - ``FallbackTag``   — the *why*: which policy produced a category advice when
    no rule id applies.

Weather risk advice is described by ``WarningType`` and ``WarningSeverity``.

``CATEGORY_SOURCE_KEYS`` maps each ``RuleCategory`` to the top-level array name
used in the rule source document. Every category must have an entry.

Usage example::

    from agro_advisor.taxonomy.advisory_taxonomy import RuleCategory, FallbackTag

    category = RuleCategory.FERTILIZER_ADVICE
    tag      = FallbackTag.DEFAULT_FERTILIZER

This module has NO imports from any other ``agro_advisor`` package.
"""

from enum import StrEnum


class RuleCategory(StrEnum):
    """Advisory domain a rule applies to."""

    CROP_SUITABILITY = "crop_suitability"
    """Rules that recommend crops for a soil/season; never discriminate by crop."""

    FERTILIZER_ADVICE = "fertilizer_advice"
    """Nutrient management rules, usually keyed by crop."""

    IRRIGATION_ADVICE = "irrigation_advice"
    """Water scheduling rules keyed by soil, season and optionally crop."""


class FallbackTag(StrEnum):
    """``rule_applied`` values emitted when no rule id applies."""

    DEFAULT_CROP = "default_crop"
    """Static soil → crop guidance; no crop-suitability rule matched."""

    CROP_VALIDATION = "crop_validation"
    """The farmer's crop appears in a matching crop-suitability rule."""

    CROP_CAUTION = "crop_caution"
    """The farmer's crop was not found among the matching suitability rules."""

    DEFAULT_FERTILIZER = "default_fertilizer"
    """Static soil-keyed fertilizer guidance."""

    DEFAULT_IRRIGATION = "default_irrigation"
    """Static soil-keyed irrigation guidance plus a season clause."""

    WEATHER_ANALYSIS = "weather_analysis"
    """Threshold-based weather risk analysis."""


class WarningType(StrEnum):
    """Kind of weather risk raised by the weather-risk resolver."""

    HEAT_STRESS = "heat_stress"
    FUNGAL_RISK = "fungal_risk"
    DISEASE_PRESSURE = "disease_pressure"
    COLD_STRESS = "cold_stress"


class WarningSeverity(StrEnum):
    """Severity attached to a weather warning."""

    HIGH = "high"
    MEDIUM = "medium"


# Rule source document array names, one per category.
CATEGORY_SOURCE_KEYS: dict[RuleCategory, str] = {
    RuleCategory.CROP_SUITABILITY:  "cropSuitability",
    RuleCategory.FERTILIZER_ADVICE: "fertilizerAdvice",
    RuleCategory.IRRIGATION_ADVICE: "irrigationAdvice",
}

# Sentinel used by rule conditions and queries to mean "matches everything".
ANY = "any"

# Crop value that callers send to request recommendation mode.
UNKNOWN_CROP = "unknown"
