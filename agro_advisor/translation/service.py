"""
Translation service: the batch contract used by the reconstructor.

Per text, the first backend that succeeds wins:

  1. ``ApiTranslator``        — only when an API key is configured
  2. ``DictionaryTranslator`` — farming-term substitution (hi, pa)
  3. original text            — method ``fallback_original``, confidence 0

An unsupported target language fails the whole batch instead.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from agro_advisor.config import TranslationConfig
from agro_advisor.models.translation import BatchTranslation, TextTranslation
from agro_advisor.translation.api_client import ApiTranslator
from agro_advisor.translation.dictionary import METHOD_NOT_NEEDED, DictionaryTranslator

logger = logging.getLogger(__name__)

METHOD_FALLBACK = "fallback_original"


class TranslationService:
    """Chains the API translator, the dictionary and an identity fallback.

    Attributes:
        config: Translation settings (supported languages, source language).
        api: Optional API translator; ``None`` means dictionary only.
        dictionary: Offline term dictionary.
    """

    def __init__(
        self,
        config: TranslationConfig,
        api: Optional[ApiTranslator] = None,
        dictionary: Optional[DictionaryTranslator] = None,
    ) -> None:
        self.config = config
        self.api = api
        self.dictionary = dictionary or DictionaryTranslator(
            source_language=config.source_language
        )

    @classmethod
    def from_env(cls, config: TranslationConfig) -> "TranslationService":
        """Build the service, enabling the API backend when TRANSLATION_API_KEY is set."""
        api_key = os.environ.get("TRANSLATION_API_KEY")
        api = None
        if api_key:
            api = ApiTranslator(
                api_key=api_key,
                provider=config.provider,
                source_language=config.source_language,
                timeout_s=config.timeout_s,
                concurrency=config.concurrency,
                azure_region=config.azure_region,
            )
        else:
            logger.info("TRANSLATION_API_KEY not set; using dictionary translation only.")
        return cls(config, api=api)

    def supported_languages(self) -> dict[str, str]:
        return dict(self.config.supported_languages)

    def is_supported(self, language_code: str) -> bool:
        return language_code.lower() in self.config.supported_languages

    def translate_batch(self, texts: list[str], target_language: str) -> BatchTranslation:
        """Translate every text; one result per text, in order."""
        lang = target_language.lower().strip()
        if not self.is_supported(lang):
            supported = ", ".join(self.config.supported_languages)
            return BatchTranslation(
                success=False,
                total_texts=len(texts),
                error=f"Unsupported language: {target_language}. Supported languages: {supported}",
            )

        if lang == self.config.source_language:
            results = tuple(
                TextTranslation(
                    original_text=t, translated_text=t, confidence=1.0, method=METHOD_NOT_NEEDED
                )
                for t in texts
            )
        else:
            api_results: list[Optional[TextTranslation]] = [None] * len(texts)
            if self.api is not None and texts:
                api_results = list(self.api.translate_batch(texts, lang).results)
            results = tuple(
                api if api is not None and api.success else self._offline(text, lang)
                for text, api in zip(texts, api_results)
            )

        return BatchTranslation(
            success=True,
            results=results,
            total_texts=len(texts),
            successful_translations=sum(1 for r in results if r.success),
        )

    def _offline(self, text: str, lang: str) -> TextTranslation:
        result = self.dictionary.translate_text(text, lang)
        if result.success:
            return result
        return TextTranslation(
            original_text=text,
            translated_text=text,
            confidence=0.0,
            method=METHOD_FALLBACK,
        )
