"""Tests for agro_advisor.reporting.formatters."""

from __future__ import annotations

import pytest

from agro_advisor.engine.composer import AdvisoryComposer
from agro_advisor.models.rule import RuleTable
from agro_advisor.reporting.formatters import (
    confidence_label,
    format_advisory,
    format_options,
    format_rule_table_summary,
)
from agro_advisor.translation.reconstructor import translate_advisory


@pytest.mark.parametrize("score,label", [
    (None, "Unknown"),
    (9.5, "Very High"),
    (9, "Very High"),
    (8.7, "High"),
    (5.0, "Medium"),
    (4, "Low"),
    (1, "Very Low"),
])
def test_confidence_label(score, label):
    assert confidence_label(score) == label


class TestFormatAdvisory:
    def test_sections(self, sample_rule_table):
        advisory = AdvisoryComposer(sample_rule_table).compose("Rice", "Clay", "Kharif")
        text = format_advisory(advisory, crop="Rice", soil_type="Clay", season="Kharif")

        assert "=== Farm Advisory ===" in text
        assert "Crop: Rice   Soil: Clay   Season: Kharif" in text
        assert "Overall confidence: 8.7/10 (High)" in text
        assert "[CROP]  confidence 8/10 (High)  rule: crop_validation" in text
        assert "[FERTILIZER]" in text and "[IRRIGATION]" in text
        assert "[WEATHER]" not in text

    def test_recommendation_mode_header(self, sample_rule_table):
        advisory = AdvisoryComposer(sample_rule_table).compose(None, "Clay", "Kharif")
        assert "Crop: (recommend)" in format_advisory(advisory, soil_type="Clay", season="Kharif")

    def test_weather_block(self, sample_rule_table, hot_dry_weather):
        advisory = AdvisoryComposer(sample_rule_table).compose("Rice", "Clay", "Kharif", hot_dry_weather)
        text = format_advisory(advisory)
        assert "[WEATHER]  confidence 8/10 (High)" in text
        assert "Now: 36°C, humidity 50%, clear sky" in text
        assert "! heat_stress (high):" in text

    def test_weather_without_warnings(self, sample_rule_table):
        from agro_advisor.models.advisory import WeatherReading

        reading = WeatherReading(temperature=25, humidity=50)
        advisory = AdvisoryComposer(sample_rule_table).compose("Rice", "Clay", "Kharif", reading)
        text = format_advisory(advisory)
        assert "No weather warnings." in text
        assert "Now: 25°C, humidity 50%, n/a" in text

    def test_translation_footer(self, sample_rule_table, fake_translator, failing_translator):
        advisory = AdvisoryComposer(sample_rule_table).compose("Rice", "Clay", "Kharif")

        done = translate_advisory(advisory, "hi", fake_translator)
        assert "[TRANSLATED] hi (6/6 texts, confidence 0.5)" in format_advisory(
            done.advisory, translation=done
        )

        failed = translate_advisory(advisory, "hi", failing_translator)
        assert "[NOT TRANSLATED] backend down" in format_advisory(advisory, translation=failed)


class TestFormatRuleTableSummary:
    def test_loaded_table(self, sample_rule_table):
        text = format_rule_table_summary(sample_rule_table)
        assert "=== Rule Table ===" in text
        assert "Version:  test" in text
        assert "(in-memory)" in text
        assert "crop_suitability" in text
        assert "[DEGRADED]" not in text
        assert "[WARN]" not in text

    def test_degraded_table(self):
        text = format_rule_table_summary(RuleTable(load_error="Cannot read rule source"))
        assert "[DEGRADED] Cannot read rule source" in text
        assert "static fallback" in text

    def test_declared_total_mismatch(self, sample_rule_table):
        table = sample_rule_table.model_copy(update={"declared_total": 30})
        assert "[WARN] metadata.totalRules=30 but 12 rules loaded" in format_rule_table_summary(table)


def test_format_options():
    text = format_options({
        "soil_types": ["Clay", "Sandy"],
        "seasons": ["Rabi"],
        "common_crops": ["Rice"],
        "languages": {"en": "English", "hi": "Hindi"},
    })
    assert "=== Advisory Options ===" in text
    assert "Soil types:   Clay, Sandy" in text
    assert "Languages:    en (English), hi (Hindi)" in text
