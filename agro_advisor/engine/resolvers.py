"""
Category resolvers: rule matching plus per-category fallback policy.

Each ``RuleCategory`` has exactly one ``CategoryResolver`` implementation,
registered in ``RESOLVER_REGISTRY``. The composer dispatches through that
registry instead of branching on category strings.

Fallback tiers (most → least specific)
--------------------------------------
Crop suitability:
    validation mode (crop given)    : crop_validation (8) | crop_caution (4)
    recommendation mode (no crop)   : best rule verbatim → default_crop (5)

Fertilizer:
    1. crop + soil + season match   : best rule verbatim
    2. crop known anywhere in table : crop's FIRST rule, confidence − 2 (floor 1)
    3. static soil table            : default_fertilizer (5)
    (no crop → tier 3 directly)

Irrigation:
    1. match with actual crop       : best rule verbatim
    2. match with crop = "any"      : best rule, confidence − 1 (floor 1)
    3. static soil table            : default_irrigation (5) + season clause

Resolvers hold a reference to the shared, read-only ``RuleTable`` and keep
no other state, so one instance can serve concurrent requests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from agro_advisor.models.advisory import AdvisoryInputs, CategoryAdvice
from agro_advisor.models.rule import Rule, RuleTable
from agro_advisor.rules.matcher import find_rules
from agro_advisor.taxonomy.advisory_taxonomy import ANY, FallbackTag, RuleCategory

CROP_VALIDATED_CONFIDENCE = 8
CROP_CAUTION_CONFIDENCE = 4
STATIC_FALLBACK_CONFIDENCE = 5
FERTILIZER_GENERAL_PENALTY = 2
IRRIGATION_GENERAL_PENALTY = 1

# ── Static soil-keyed tables (keys are lower-cased soil types) ────────────────

SOIL_CROP_ADVICE: dict[str, str] = {
    "sandy":    "Consider drought-resistant crops like millets, groundnut, or watermelon for sandy soil.",
    "clay":     "Rice, wheat, and sugarcane are suitable for water-retentive clay soil.",
    "loamy":    "Loamy soil supports most crops including wheat, maize, and vegetables.",
    "black":    "Cotton, sugarcane, and cereals perform well in fertile black soil.",
    "red":      "Millets, pulses, and oilseeds are adapted to red soil conditions.",
    "alluvial": "Most crops including rice, wheat, and vegetables thrive in alluvial soil.",
}
GENERIC_CROP_ADVICE = "Consult local agricultural experts for crop recommendations."

SOIL_FERTILIZER_ADVICE: dict[str, str] = {
    "sandy":    "Apply fertilizers in small, frequent doses. Sandy soil has low nutrient retention.",
    "clay":     "Apply fertilizers in larger doses less frequently. Clay soil retains nutrients well.",
    "loamy":    "Apply balanced NPK fertilizers according to crop requirements.",
    "black":    "Focus on maintaining soil health. Black soil is naturally fertile.",
    "red":      "Use phosphorus-rich fertilizers and lime to improve soil fertility.",
    "alluvial": "Apply fertilizers based on soil testing results.",
}
GENERIC_FERTILIZER_ADVICE = "Apply balanced fertilizers based on soil testing."

SOIL_IRRIGATION_ADVICE: dict[str, str] = {
    "sandy":    "Irrigate frequently with smaller amounts. Sandy soil drains quickly.",
    "clay":     "Irrigate less frequently but thoroughly. Clay soil retains water well.",
    "loamy":    "Irrigate moderately based on crop needs.",
    "black":    "Monitor soil moisture to prevent waterlogging.",
    "red":      "Maintain consistent moisture levels with regular irrigation.",
    "alluvial": "Irrigate based on crop requirements and soil moisture.",
}
GENERIC_IRRIGATION_ADVICE = "Irrigate based on crop and soil requirements."

SEASON_IRRIGATION_CLAUSE: dict[str, str] = {
    "summer": " Increase frequency during hot weather.",
    "winter": " Reduce frequency in cooler weather.",
    "kharif": " Supplement monsoon rainfall as needed.",
    "rabi":   " Provide regular irrigation during dry season.",
}


class CategoryResolver(ABC):
    """Abstract base for one category's resolution policy.

    Subclasses must:
      1. Set the ``category`` class variable.
      2. Implement ``resolve(inputs) -> CategoryAdvice``.

    Attributes:
        category: The ``RuleCategory`` this resolver owns.
        table: Shared read-only rule table.
    """

    category: ClassVar[RuleCategory]

    def __init__(self, table: RuleTable) -> None:
        self.table = table

    @abstractmethod
    def resolve(self, inputs: AdvisoryInputs) -> CategoryAdvice:
        """Produce exactly one advice for ``inputs``. Never raises for valid inputs."""

    def _find(self, inputs: AdvisoryInputs, crop: str | None) -> list[Rule]:
        return find_rules(self.table, self.category, inputs.soil_type, inputs.season, crop)


class CropResolver(CategoryResolver):
    """Validates a given crop, or recommends one for the soil/season."""

    category = RuleCategory.CROP_SUITABILITY

    def resolve(self, inputs: AdvisoryInputs) -> CategoryAdvice:
        if inputs.crop_known:
            return self._validate_crop(inputs)

        matches = self._find(inputs, None)
        if matches:
            best = matches[0]
            return CategoryAdvice(
                recommendation=best.recommendation,
                confidence=best.confidence,
                explanation=(
                    f"Based on {inputs.soil_type} soil and {inputs.season} season analysis"
                ),
                rule_applied=best.id,
            )

        return CategoryAdvice(
            recommendation=SOIL_CROP_ADVICE.get(inputs.soil_type.lower(), GENERIC_CROP_ADVICE),
            confidence=STATIC_FALLBACK_CONFIDENCE,
            explanation=f"General guidance based on {inputs.soil_type} soil characteristics",
            rule_applied=FallbackTag.DEFAULT_CROP.value,
        )

    def _validate_crop(self, inputs: AdvisoryInputs) -> CategoryAdvice:
        # Substring heuristic: the crop only has to appear in a rule's text.
        crop = inputs.crop or ""
        needle = crop.lower()
        mentioned = any(
            needle in rule.recommendation.lower() for rule in self._find(inputs, None)
        )

        if mentioned:
            return CategoryAdvice(
                recommendation=(
                    f"{crop} is suitable for {inputs.soil_type} soil "
                    f"during {inputs.season} season."
                ),
                confidence=CROP_VALIDATED_CONFIDENCE,
                explanation="Crop validated against soil-season suitability database",
                rule_applied=FallbackTag.CROP_VALIDATION.value,
            )

        return CategoryAdvice(
            recommendation=(
                f"{crop} may not be optimal for {inputs.soil_type} soil during "
                f"{inputs.season} season. Consider local expert consultation."
            ),
            confidence=CROP_CAUTION_CONFIDENCE,
            explanation="Crop not found in recommended list for these conditions",
            rule_applied=FallbackTag.CROP_CAUTION.value,
        )


class FertilizerResolver(CategoryResolver):
    """Crop-specific fertilizer rules with a crop-general and a soil-only fallback."""

    category = RuleCategory.FERTILIZER_ADVICE

    def resolve(self, inputs: AdvisoryInputs) -> CategoryAdvice:
        if not inputs.crop_known:
            return self._general_advice(inputs)

        matches = self._find(inputs, inputs.crop)
        if matches:
            best = matches[0]
            return CategoryAdvice(
                recommendation=best.recommendation,
                confidence=best.confidence,
                explanation=(
                    f"Fertilizer guidance for {inputs.crop} in {inputs.soil_type} soil"
                ),
                rule_applied=best.id,
            )

        # First rule in table order for this crop, not the most confident one.
        crop = (inputs.crop or "").lower()
        general = next(
            (
                rule for rule in self.table.rules_for(self.category)
                if rule.conditions.crop is not None and rule.conditions.crop.lower() == crop
            ),
            None,
        )
        if general is not None:
            return CategoryAdvice(
                recommendation=general.recommendation,
                confidence=max(general.confidence - FERTILIZER_GENERAL_PENALTY, 1),
                explanation=f"General fertilizer advice for {inputs.crop}",
                rule_applied=general.id,
            )

        return self._general_advice(inputs)

    def _general_advice(self, inputs: AdvisoryInputs) -> CategoryAdvice:
        return CategoryAdvice(
            recommendation=SOIL_FERTILIZER_ADVICE.get(
                inputs.soil_type.lower(), GENERIC_FERTILIZER_ADVICE
            ),
            confidence=STATIC_FALLBACK_CONFIDENCE,
            explanation=f"General fertilizer guidance for {inputs.soil_type} soil",
            rule_applied=FallbackTag.DEFAULT_FERTILIZER.value,
        )


class IrrigationResolver(CategoryResolver):
    """Crop-specific irrigation rules, then crop-agnostic rules, then a soil table."""

    category = RuleCategory.IRRIGATION_ADVICE

    def resolve(self, inputs: AdvisoryInputs) -> CategoryAdvice:
        matches = self._find(inputs, inputs.crop)
        if matches:
            best = matches[0]
            return CategoryAdvice(
                recommendation=best.recommendation,
                confidence=best.confidence,
                explanation=(
                    f"Irrigation schedule for {inputs.soil_type} soil "
                    f"during {inputs.season} season"
                ),
                rule_applied=best.id,
            )

        soil_season = self._find(inputs, ANY)
        if soil_season:
            rule = soil_season[0]
            return CategoryAdvice(
                recommendation=rule.recommendation,
                confidence=max(rule.confidence - IRRIGATION_GENERAL_PENALTY, 1),
                explanation=(
                    f"Irrigation guidance for {inputs.soil_type} soil "
                    f"in {inputs.season} season"
                ),
                rule_applied=rule.id,
            )

        base = SOIL_IRRIGATION_ADVICE.get(inputs.soil_type.lower(), GENERIC_IRRIGATION_ADVICE)
        clause = SEASON_IRRIGATION_CLAUSE.get(inputs.season.lower(), "")
        return CategoryAdvice(
            recommendation=base + clause,
            confidence=STATIC_FALLBACK_CONFIDENCE,
            explanation=(
                f"General irrigation guidance for {inputs.soil_type} soil "
                f"in {inputs.season} season"
            ),
            rule_applied=FallbackTag.DEFAULT_IRRIGATION.value,
        )


RESOLVER_REGISTRY: dict[RuleCategory, type[CategoryResolver]] = {
    RuleCategory.CROP_SUITABILITY:  CropResolver,
    RuleCategory.FERTILIZER_ADVICE: FertilizerResolver,
    RuleCategory.IRRIGATION_ADVICE: IrrigationResolver,
}


def build_resolvers(table: RuleTable) -> dict[RuleCategory, CategoryResolver]:
    """Instantiate one resolver per category, all sharing ``table``."""
    missing = set(RuleCategory) - set(RESOLVER_REGISTRY)
    if missing:
        raise RuntimeError(f"No resolver registered for categories: {sorted(missing)}")
    return {category: cls(table) for category, cls in RESOLVER_REGISTRY.items()}
