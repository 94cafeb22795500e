"""
Shared pytest fixtures for the agro advisor test suite.

Provides:
  - ``sample_rule_table``: A small in-memory ``RuleTable`` built from
    ``Rule`` objects, shaped to exercise every fallback tier.
  - ``shipped_rules_path`` / ``shipped_rule_table``: The committed rule source.
  - ``app_config_file``: A temporary TOML config pointing at the shipped rules,
    with file logging disabled.
  - Sample weather readings and a fake batch translator.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from agro_advisor.models.advisory import WeatherReading
from agro_advisor.models.rule import Rule, RuleConditions, RuleTable
from agro_advisor.models.translation import BatchTranslation, TextTranslation
from agro_advisor.rules.store import load_rule_table
from agro_advisor.taxonomy.advisory_taxonomy import RuleCategory

PROJECT_ROOT = Path(__file__).parent.parent


def _rule(
    rule_id: str,
    category: RuleCategory,
    soil: str,
    season: str,
    crop: str | None,
    recommendation: str,
    confidence: int,
) -> Rule:
    return Rule(
        id=rule_id,
        category=category,
        conditions=RuleConditions(soil=soil, season=season, crop=crop),
        recommendation=recommendation,
        confidence=confidence,
    )


# ── Rule tables ───────────────────────────────────────────────────────────────

@pytest.fixture
def sample_rule_table() -> RuleTable:
    """Hand-built rule table.

    Notable shapes:
      - cs_clay_kharif and cs_clay_kharif_taro tie at confidence 9
        (source order must be kept).
      - Wheat has two fertilizer rules; the first in table order (8) is
        listed before the more confident one (9).
      - Cotton's only fertilizer rule has confidence 2 (tier-2 floor case).
    """
    crop = RuleCategory.CROP_SUITABILITY
    fert = RuleCategory.FERTILIZER_ADVICE
    irr = RuleCategory.IRRIGATION_ADVICE
    return RuleTable(
        crop_suitability=(
            _rule("cs_clay_kharif", crop, "Clay", "Kharif", None,
                  "Rice and jute suit clay soil in Kharif.", 9),
            _rule("cs_clay_kharif_cane", crop, "Clay", "Kharif", None,
                  "Sugarcane grows in clay soil with drainage.", 7),
            _rule("cs_clay_kharif_taro", crop, "Clay", "Kharif", None,
                  "Taro tolerates waterlogged clay.", 9),
            _rule("cs_any_summer", crop, "any", "Summer", None,
                  "Watermelon suits most soils in summer.", 6),
        ),
        fertilizer_advice=(
            _rule("fa_wheat_loamy_rabi", fert, "Loamy", "Rabi", "Wheat",
                  "Wheat on loamy soil: 100:50:30 NPK.", 8),
            _rule("fa_wheat_alluvial_rabi", fert, "Alluvial", "Rabi", "Wheat",
                  "Wheat on alluvial soil: 120:60:40 NPK.", 9),
            _rule("fa_rice_clay_kharif", fert, "Clay", "Kharif", "Rice",
                  "Rice on clay: split nitrogen in three doses.", 9),
            _rule("fa_any_sandy_any", fert, "Sandy", "any", "any",
                  "Sandy soil: use slow-release fertilizer.", 6),
            _rule("fa_cotton_black_kharif", fert, "Black", "Kharif", "Cotton",
                  "Cotton on black soil: add zinc.", 2),
        ),
        irrigation_advice=(
            _rule("ir_rice_clay_kharif", irr, "Clay", "Kharif", "Rice",
                  "Keep 5 cm standing water for rice.", 9),
            _rule("ir_any_clay_kharif", irr, "Clay", "Kharif", "any",
                  "Irrigate clay only in dry spells.", 6),
            _rule("ir_any_sandy_summer", irr, "Sandy", "Summer", "any",
                  "Drip irrigate sandy soil in summer.", 7),
        ),
        version="test",
    )


@pytest.fixture
def shipped_rules_path() -> Path:
    """The committed rule source document."""
    return PROJECT_ROOT / "config" / "rules" / "advisory_rules.json"


@pytest.fixture
def shipped_rule_table(shipped_rules_path: Path) -> RuleTable:
    """``RuleTable`` loaded from the committed rule source."""
    return load_rule_table(shipped_rules_path)


# ── Config ────────────────────────────────────────────────────────────────────

@pytest.fixture
def app_config_file(tmp_path: Path, shipped_rules_path: Path) -> Path:
    """Temporary TOML config: shipped rules, WARNING level, no log file."""
    path = tmp_path / "config.toml"
    path.write_text(
        "[rules]\n"
        f"rules_file = {str(shipped_rules_path)!r}\n"
        "\n"
        "[logging]\n"
        'level = "WARNING"\n'
        'log_file = ""\n',
        encoding="utf-8",
    )
    return path


# ── Weather ───────────────────────────────────────────────────────────────────

@pytest.fixture
def hot_dry_weather() -> WeatherReading:
    """36 °C / 50 % — heat stress only."""
    return WeatherReading(temperature=36, humidity=50, description="clear sky")


@pytest.fixture
def hot_humid_weather() -> WeatherReading:
    """36 °C / 85 % — heat stress, fungal risk and disease pressure."""
    return WeatherReading(temperature=36, humidity=85, description="overcast clouds")


# ── Translation ───────────────────────────────────────────────────────────────

class FakeTranslator:
    """Upper-cases every text; records each batch call."""

    def __init__(self, drop_last: bool = False, fail: bool = False) -> None:
        self.calls: list[tuple[list[str], str]] = []
        self.drop_last = drop_last
        self.fail = fail

    def translate_batch(self, texts: list[str], target_language: str) -> BatchTranslation:
        self.calls.append((list(texts), target_language))
        if self.fail:
            return BatchTranslation(success=False, error="backend down")
        results = tuple(
            TextTranslation(
                original_text=t,
                translated_text=t.upper(),
                confidence=0.5,
                method="fake",
            )
            for t in texts
        )
        if self.drop_last:
            results = results[:-1]
        return BatchTranslation(
            success=True,
            results=results,
            total_texts=len(texts),
            successful_translations=len(results),
        )


@pytest.fixture
def fake_translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def failing_translator() -> FakeTranslator:
    """Reports overall batch failure."""
    return FakeTranslator(fail=True)


@pytest.fixture
def short_translator() -> FakeTranslator:
    """Returns one result fewer than submitted."""
    return FakeTranslator(drop_last=True)
