"""
Machine translation API client (Google Translate v2 / Azure Translator v3).

Credential setup (.env, gitignored):
  TRANSLATION_API_KEY=your_key
  TRANSLATION_PROVIDER=google        # google | azure (default: google)

Google:
    POST https://translation.googleapis.com/language/translate/v2?key=<key>
      → Body: {"q": text, "target": "hi", "source": "en", "format": "text"}
      → Returns: {"data": {"translations": [{"translatedText": "..."}]}}

Azure:
    POST https://api.cognitive.microsofttranslator.com/translate?api-version=3.0&to=hi
      → Headers: Ocp-Apim-Subscription-Key, Ocp-Apim-Subscription-Region
      → Body: [{"text": text}]
      → Returns: [{"translations": [{"text": "...", "to": "hi"}]}]

Both endpoints are called once per text. ``translate_batch()`` issues the
calls concurrently (bounded by a semaphore) and returns results ordered by
submission index, not completion order. A failed text is reported with
``success=False`` and its original text; the batch itself never raises.
"""

from __future__ import annotations

import asyncio
import logging
from typing import ClassVar, Optional

import httpx

from agro_advisor.models.translation import BatchTranslation, TextTranslation

logger = logging.getLogger(__name__)

API_CONFIDENCE = 0.9


class ApiTranslator:
    """Per-text machine translation with concurrent fan-out.

    Usage::

        import os
        translator = ApiTranslator(api_key=os.environ["TRANSLATION_API_KEY"])
        batch = translator.translate_batch(["Irrigate weekly."], "hi")
    """

    GOOGLE_URL: ClassVar[str] = "https://translation.googleapis.com/language/translate/v2"
    AZURE_URL: ClassVar[str] = "https://api.cognitive.microsofttranslator.com/translate"

    METHODS: ClassVar[dict[str, str]] = {
        "google": "google_translate_api",
        "azure": "azure_translator_api",
    }

    def __init__(
        self,
        api_key: str,
        provider: str = "google",
        source_language: str = "en",
        timeout_s: float = 10.0,
        concurrency: int = 8,
        azure_region: str = "global",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialise the client.

        Args:
            api_key: Provider API key from TRANSLATION_API_KEY.
            provider: ``"google"`` or ``"azure"``.
            source_language: Language of submitted texts.
            timeout_s: Per-request timeout.
            concurrency: Maximum in-flight requests per batch.
            azure_region: Azure resource region header.
            transport: Optional httpx transport (tests inject ``MockTransport``).
        """
        if provider not in self.METHODS:
            raise ValueError(
                f"Unsupported translation provider '{provider}'. "
                f"Expected one of {sorted(self.METHODS)}."
            )
        self.api_key = api_key
        self.provider = provider
        self.source_language = source_language
        self.timeout_s = timeout_s
        self.concurrency = concurrency
        self.azure_region = azure_region
        self._transport = transport

    @property
    def method(self) -> str:
        return self.METHODS[self.provider]

    def translate_batch(self, texts: list[str], target_language: str) -> BatchTranslation:
        """Translate ``texts`` concurrently; results keep submission order."""
        results = asyncio.run(self._translate_all(texts, target_language))
        succeeded = sum(1 for r in results if r.success)
        logger.info(
            "Translation API (%s): %d/%d texts translated to '%s'",
            self.provider, succeeded, len(texts), target_language,
        )
        return BatchTranslation(
            success=True,
            results=tuple(results),
            total_texts=len(texts),
            successful_translations=succeeded,
        )

    async def _translate_all(
        self, texts: list[str], target_language: str
    ) -> list[TextTranslation]:
        semaphore = asyncio.Semaphore(self.concurrency)
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout_s) as client:
            # gather() returns in argument order, so index order is preserved.
            return await asyncio.gather(*(
                self._translate_one(client, semaphore, text, target_language)
                for text in texts
            ))

    async def _translate_one(
        self,
        client: httpx.AsyncClient,
        semaphore: asyncio.Semaphore,
        text: str,
        target_language: str,
    ) -> TextTranslation:
        async with semaphore:
            try:
                if self.provider == "azure":
                    translated = await self._azure(client, text, target_language)
                else:
                    translated = await self._google(client, text, target_language)
            except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as exc:
                logger.warning("Translation API (%s) failed for one text: %s", self.provider, exc)
                return TextTranslation(
                    original_text=text,
                    translated_text=text,
                    success=False,
                    confidence=0.0,
                    method=self.method,
                )

        return TextTranslation(
            original_text=text,
            translated_text=translated,
            confidence=API_CONFIDENCE,
            method=self.method,
        )

    async def _google(self, client: httpx.AsyncClient, text: str, target: str) -> str:
        resp = await client.post(
            self.GOOGLE_URL,
            params={"key": self.api_key},
            json={"q": text, "target": target, "source": self.source_language, "format": "text"},
        )
        resp.raise_for_status()
        return resp.json()["data"]["translations"][0]["translatedText"]

    async def _azure(self, client: httpx.AsyncClient, text: str, target: str) -> str:
        resp = await client.post(
            self.AZURE_URL,
            params={"api-version": "3.0", "to": target},
            headers={
                "Ocp-Apim-Subscription-Key": self.api_key,
                "Ocp-Apim-Subscription-Region": self.azure_region,
            },
            json=[{"text": text}],
        )
        resp.raise_for_status()
        return resp.json()[0]["translations"][0]["text"]
