"""
Translation reconstructor: translate an ``Advisory`` as one batch and rebuild
it with the same structure.

Flatten order (fixed, and consumed in the same order when reassembling):

  1. crop_advice.recommendation,       crop_advice.explanation
  2. fertilizer_advice.recommendation, fertilizer_advice.explanation
  3. irrigation_advice.recommendation, irrigation_advice.explanation
  4. weather_advice (only when present):
       each recommendations[i], then explanation, then each warnings[j].message

Carried over unchanged: every ``confidence``, ``rule_applied``, warning
``type``/``severity``, ``current_weather`` and ``confidence_score``.

All-or-nothing: if the batch reports failure, returns a different number of
results, or raises, the original advisory is surfaced with
``performed=False``. A partially translated advisory is never produced.
"""

from __future__ import annotations

import logging
from typing import Iterator, Protocol

from agro_advisor.models.advisory import Advisory, CategoryAdvice, WeatherAdvice
from agro_advisor.models.translation import BatchTranslation, TranslationOutcome

logger = logging.getLogger(__name__)

METHOD_NOT_NEEDED = "no_translation_needed"
METHOD_BATCH = "batch_translation"
METHOD_FAILED = "translation_failed"


class BatchTranslator(Protocol):
    """Collaborator contract: one result per text, in submission order."""

    def translate_batch(self, texts: list[str], target_language: str) -> BatchTranslation:
        ...


class TranslationContractError(RuntimeError):
    """Raised when a batch result cannot be mapped back onto the advisory."""


def flatten_advisory_texts(advisory: Advisory) -> list[str]:
    """Every translatable string of ``advisory``, in reconstruction order."""
    texts: list[str] = []
    for advice in advisory.category_advice:
        texts.append(advice.recommendation)
        texts.append(advice.explanation)

    weather = advisory.weather_advice
    if weather is not None:
        texts.extend(weather.recommendations)
        texts.append(weather.explanation)
        texts.extend(w.message for w in weather.warnings)
    return texts


def reassemble_advisory(advisory: Advisory, translated: list[str]) -> Advisory:
    """Build a new advisory with ``translated`` texts substituted in flatten order.

    Raises:
        TranslationContractError: If ``translated`` does not hold exactly one
            string per flattened text.
    """
    expected = len(flatten_advisory_texts(advisory))
    if len(translated) != expected:
        raise TranslationContractError(
            f"Expected {expected} translated texts, got {len(translated)}."
        )

    it = iter(translated)

    def _category(advice: CategoryAdvice) -> CategoryAdvice:
        return advice.model_copy(update={
            "recommendation": next(it),
            "explanation": next(it),
        })

    crop = _category(advisory.crop_advice)
    fertilizer = _category(advisory.fertilizer_advice)
    irrigation = _category(advisory.irrigation_advice)
    weather = (
        _weather(advisory.weather_advice, it)
        if advisory.weather_advice is not None
        else None
    )

    return advisory.model_copy(update={
        "crop_advice": crop,
        "fertilizer_advice": fertilizer,
        "irrigation_advice": irrigation,
        "weather_advice": weather,
    })


def _weather(weather: WeatherAdvice, it: Iterator[str]) -> WeatherAdvice:
    recommendations = tuple(next(it) for _ in weather.recommendations)
    explanation = next(it)
    warnings = tuple(
        w.model_copy(update={"message": next(it)}) for w in weather.warnings
    )
    return weather.model_copy(update={
        "recommendations": recommendations,
        "explanation": explanation,
        "warnings": warnings,
    })


def translate_advisory(
    advisory: Advisory,
    language_code: str,
    translator: BatchTranslator,
    *,
    source_language: str = "en",
) -> TranslationOutcome:
    """Translate every text of ``advisory`` with a single batch call.

    Args:
        advisory: Source-language advisory (left untouched).
        language_code: Target language code, e.g. ``"hi"`` (case and
            surrounding whitespace are ignored).
        translator: Batch translation collaborator.
        source_language: Language the advisory is written in.

    Returns:
        ``TranslationOutcome``; never raises for collaborator failures.
    """
    language_code = language_code.lower().strip()
    if language_code == source_language.lower().strip():
        return TranslationOutcome(
            advisory=advisory,
            performed=False,
            target_language=language_code,
            method=METHOD_NOT_NEEDED,
        )

    texts = flatten_advisory_texts(advisory)

    try:
        batch = translator.translate_batch(texts, language_code)
        if not batch.success:
            raise TranslationContractError(batch.error or "Batch translation failed.")
        if len(batch.results) != len(texts):
            raise TranslationContractError(
                f"Translator returned {len(batch.results)} results for {len(texts)} texts."
            )
        translated = reassemble_advisory(
            advisory, [r.translated_text for r in batch.results]
        )
    except Exception as exc:
        logger.warning(
            "Advisory translation to '%s' not performed: %s", language_code, exc,
            extra={"target_language": language_code},
        )
        return TranslationOutcome(
            advisory=advisory,
            performed=False,
            target_language=language_code,
            method=METHOD_FAILED,
            error=str(exc),
            total_texts=len(texts),
        )

    confidences = [r.confidence for r in batch.results]
    mean_confidence = round(sum(confidences) / len(confidences), 2) if confidences else None

    return TranslationOutcome(
        advisory=translated,
        performed=True,
        target_language=language_code,
        method=METHOD_BATCH,
        confidence=mean_confidence,
        total_texts=len(texts),
        successful_translations=batch.successful_translations,
    )
