"""
Translation contract models.

``TextTranslation`` / ``BatchTranslation`` describe what a translation
collaborator returns for one batch call: one result per submitted text, in
submission order. ``len(results) == total_texts`` is required on success.

``TranslationOutcome`` is what ``translate_advisory()`` hands back to callers:
the advisory to present plus an explicit ``performed`` marker, replacing the
presence/absence of a ``translationInfo`` key.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from agro_advisor.models.advisory import Advisory


class TextTranslation(BaseModel):
    """Result for a single text fragment.

    Attributes:
        original_text: The submitted fragment.
        translated_text: The translation (the original text when unavailable).
        success: Whether the collaborator considers this fragment translated.
        confidence: Collaborator confidence in [0, 1].
        method: How the fragment was produced, e.g. ``"mock_dictionary"``.
    """

    model_config = ConfigDict(frozen=True)

    original_text: str
    translated_text: str
    success: bool = True
    confidence: float = 0.0
    method: str


class BatchTranslation(BaseModel):
    """Result of one batch translation call."""

    model_config = ConfigDict(frozen=True)

    success: bool
    results: tuple[TextTranslation, ...] = ()
    total_texts: int = 0
    successful_translations: int = 0
    error: Optional[str] = None


class TranslationOutcome(BaseModel):
    """Outcome of translating an advisory.

    Attributes:
        advisory: Translated advisory when ``performed``; otherwise the
            original advisory, untouched.
        performed: True only when a complete translation was reconstructed.
        target_language: Requested language code.
        method: ``"no_translation_needed"``, ``"batch_translation"`` or
            ``"translation_failed"``.
        error: Reason translation was not performed, if it failed.
        confidence: Mean fragment confidence, when performed.
        total_texts: Number of fragments flattened from the advisory.
        successful_translations: Fragments the collaborator marked successful.
    """

    model_config = ConfigDict(frozen=True)

    advisory: Advisory
    performed: bool
    target_language: str
    method: str
    error: Optional[str] = None
    confidence: Optional[float] = None
    total_texts: int = 0
    successful_translations: int = 0
