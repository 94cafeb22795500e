"""
Offline farming-term dictionary translator.

Substitutes known farming terms word by word; everything else is kept as
lower-cased English. It exists so that a translated advisory is available
without any API key, at the cost of mixed-language output.

Algorithm for one text:
  1. Lower-case and split on whitespace.
  2. At each position, try the two-word phrase first (``"heat stress"``),
     then the single word. Punctuation is ignored for lookup.
  3. Unknown words pass through unchanged.

Confidence is ``translated words / total words`` rounded to 2 dp.
"""

from __future__ import annotations

import re

from agro_advisor.models.translation import BatchTranslation, TextTranslation

METHOD_DICTIONARY = "mock_dictionary"
METHOD_NOT_NEEDED = "no_translation_needed"

_NON_WORD = re.compile(r"[^\w]", re.ASCII)

FARMING_TERMS: dict[str, dict[str, str]] = {
    "hi": {
        # General terms
        "crop": "फसल",
        "soil": "मिट्टी",
        "water": "पानी",
        "fertilizer": "उर्वरक",
        "irrigation": "सिंचाई",
        "season": "मौसम",
        "temperature": "तापमान",
        "humidity": "नमी",
        "weather": "मौसम",
        "advice": "सलाह",
        "recommendation": "सिफारिश",
        "confidence": "विश्वास",
        "high": "उच्च",
        "medium": "मध्यम",
        "low": "कम",
        "warning": "चेतावनी",
        "alert": "अलर्ट",
        # Soil types
        "sandy": "रेतीली",
        "clay": "चिकनी मिट्टी",
        "loamy": "दोमट",
        "black": "काली मिट्टी",
        "red": "लाल मिट्टी",
        "alluvial": "जलोढ़",
        # Seasons
        "kharif": "खरीफ",
        "rabi": "रबी",
        "summer": "गर्मी",
        "winter": "सर्दी",
        # Crops
        "rice": "चावल",
        "wheat": "गेहूं",
        "maize": "मक्का",
        "cotton": "कपास",
        "sugarcane": "गन्ना",
        # Weather conditions
        "clear sky": "साफ आसमान",
        "cloudy": "बादल",
        "rain": "बारिश",
        "storm": "तूफान",
        # Risk phrases
        "heat stress": "गर्मी का तनाव",
        "fungal risk": "फंगल जोखिम",
        "disease pressure": "रोग दबाव",
        "cold stress": "ठंड का तनाव",
    },
    "pa": {
        # General terms
        "crop": "ਫਸਲ",
        "soil": "ਮਿੱਟੀ",
        "water": "ਪਾਣੀ",
        "fertilizer": "ਖਾਦ",
        "irrigation": "ਸਿੰਚਾਈ",
        "season": "ਮੌਸਮ",
        "temperature": "ਤਾਪਮਾਨ",
        "humidity": "ਨਮੀ",
        "weather": "ਮੌਸਮ",
        "advice": "ਸਲਾਹ",
        "recommendation": "ਸਿਫਾਰਸ਼",
        "confidence": "ਭਰੋਸਾ",
        "high": "ਉੱਚਾ",
        "medium": "ਮੱਧਮ",
        "low": "ਘੱਟ",
        "warning": "ਚੇਤਾਵਨੀ",
        "alert": "ਅਲਰਟ",
        # Soil types
        "sandy": "ਰੇਤਲੀ",
        "clay": "ਚਿਕਨੀ ਮਿੱਟੀ",
        "loamy": "ਦੋਮਟ",
        "black": "ਕਾਲੀ ਮਿੱਟੀ",
        "red": "ਲਾਲ ਮਿੱਟੀ",
        "alluvial": "ਜਲੋਢ਼",
        # Seasons
        "kharif": "ਖਰੀਫ",
        "rabi": "ਰਬੀ",
        "summer": "ਗਰਮੀ",
        "winter": "ਸਰਦੀ",
        # Crops
        "rice": "ਚਾਵਲ",
        "wheat": "ਕਣਕ",
        "maize": "ਮੱਕੀ",
        "cotton": "ਕਪਾਹ",
        "sugarcane": "ਗੰਨਾ",
        # Weather conditions
        "clear sky": "ਸਾਫ਼ ਅਸਮਾਨ",
        "cloudy": "ਬੱਦਲ",
        "rain": "ਮੀਂਹ",
        "storm": "ਤੂਫਾਨ",
        # Risk phrases
        "heat stress": "ਗਰਮੀ ਦਾ ਤਣਾਅ",
        "fungal risk": "ਫੰਗਲ ਜੋਖਮ",
        "disease pressure": "ਬਿਮਾਰੀ ਦਾ ਦਬਾਅ",
        "cold stress": "ਠੰਡ ਦਾ ਤਣਾਅ",
    },
}


class DictionaryTranslator:
    """Batch translator backed by ``FARMING_TERMS``.

    Args:
        terms: Language code → (English term → translation). Defaults to
            ``FARMING_TERMS``.
        source_language: Language texts are written in; translating into it
            is a no-op.
    """

    def __init__(
        self,
        terms: dict[str, dict[str, str]] | None = None,
        source_language: str = "en",
    ) -> None:
        self.terms = terms if terms is not None else FARMING_TERMS
        self.source_language = source_language

    def supports(self, language_code: str) -> bool:
        return language_code == self.source_language or language_code in self.terms

    def translate_text(self, text: str, target_language: str) -> TextTranslation:
        """Translate one text. ``success`` is False only for an unknown language."""
        if target_language == self.source_language:
            return TextTranslation(
                original_text=text,
                translated_text=text,
                confidence=1.0,
                method=METHOD_NOT_NEEDED,
            )

        table = self.terms.get(target_language)
        if table is None:
            return TextTranslation(
                original_text=text,
                translated_text=text,
                success=False,
                confidence=0.0,
                method=METHOD_DICTIONARY,
            )

        words = text.lower().split()
        out: list[str] = []
        translated_count = 0
        i = 0
        while i < len(words):
            if i + 1 < len(words):
                phrase = f"{_clean(words[i])} {_clean(words[i + 1])}"
                if phrase in table:
                    out.append(table[phrase])
                    translated_count += 2
                    i += 2
                    continue
            word = words[i]
            term = table.get(_clean(word))
            if term is not None:
                out.append(term)
                translated_count += 1
            else:
                out.append(word)
            i += 1

        confidence = round(translated_count / len(words), 2) if words else 0.0
        return TextTranslation(
            original_text=text,
            translated_text=" ".join(out),
            confidence=confidence,
            method=METHOD_DICTIONARY,
        )

    def translate_batch(self, texts: list[str], target_language: str) -> BatchTranslation:
        results = tuple(self.translate_text(t, target_language) for t in texts)
        return BatchTranslation(
            success=self.supports(target_language),
            results=results,
            total_texts=len(texts),
            successful_translations=sum(1 for r in results if r.success),
            error=None if self.supports(target_language)
            else f"Unsupported language: {target_language}",
        )


def _clean(word: str) -> str:
    return _NON_WORD.sub("", word)
