"""
Rule and rule table models.

``Rule`` is one condition → recommendation record with a confidence weight.
``RuleTable`` groups rules by ``RuleCategory`` and carries diagnostics metadata
from the rule source document.

Both models are frozen and hold tuples, so a ``RuleTable`` loaded at process
start can be shared across threads and requests without locking.

A rule's ``conditions.crop`` of ``None`` means the category does not
discriminate by crop (crop-suitability rules recommend crops rather than
assume one). ``"any"`` in any condition matches every query value.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from agro_advisor.taxonomy.advisory_taxonomy import RuleCategory


class RuleConditions(BaseModel):
    """Soil / season / crop predicate of a rule.

    Attributes:
        soil: Soil type name, or ``"any"``.
        season: Season name, or ``"any"``.
        crop: Crop name, ``"any"``, or ``None`` (category ignores crop).
    """

    model_config = ConfigDict(frozen=True)

    soil: str
    season: str
    crop: Optional[str] = None


class Rule(BaseModel):
    """A condition → recommendation record.

    ``confidence`` is nominally in ``[1, 10]``. Values outside that range are
    accepted as-is; the rule store logs them.

    Attributes:
        id: Identifier, unique within its category.
        category: Advisory domain of this rule.
        conditions: Matching predicate.
        recommendation: Advice text returned verbatim when the rule is chosen.
        confidence: Integer confidence weight.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    category: RuleCategory
    conditions: RuleConditions
    recommendation: str
    confidence: int

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Rule id must be a non-empty string.")
        return v


class RuleTable(BaseModel):
    """Immutable grouping of rules by category.

    Attributes:
        crop_suitability: Crop-suitability rules in source order.
        fertilizer_advice: Fertilizer rules in source order.
        irrigation_advice: Irrigation rules in source order.
        version: Optional version string from the source metadata.
        declared_total: ``metadata.totalRules`` from the source, if present.
        source_path: Where the table was loaded from, if from a file.
        load_error: Failure description when loading degraded to an empty table.
    """

    model_config = ConfigDict(frozen=True)

    crop_suitability: tuple[Rule, ...] = ()
    fertilizer_advice: tuple[Rule, ...] = ()
    irrigation_advice: tuple[Rule, ...] = ()
    version: Optional[str] = None
    declared_total: Optional[int] = None
    source_path: Optional[str] = None
    load_error: Optional[str] = None

    def rules_for(self, category: RuleCategory) -> tuple[Rule, ...]:
        """Return the rules of ``category`` in source order."""
        if category == RuleCategory.CROP_SUITABILITY:
            return self.crop_suitability
        if category == RuleCategory.FERTILIZER_ADVICE:
            return self.fertilizer_advice
        if category == RuleCategory.IRRIGATION_ADVICE:
            return self.irrigation_advice
        raise ValueError(f"Unknown rule category '{category}'.")

    @property
    def total_rules(self) -> int:
        """Number of rules actually loaded across all categories."""
        return (
            len(self.crop_suitability)
            + len(self.fertilizer_advice)
            + len(self.irrigation_advice)
        )

    @property
    def is_degraded(self) -> bool:
        """True when loading failed and the table fell back to empty categories."""
        return self.load_error is not None
