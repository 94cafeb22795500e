"""
ASCII terminal formatters for CLI commands.

All formatters accept models or plain dicts and return plain multi-line
strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Confidence labels
-----------------
Scores on the 1–10 scale are shown with a text label::

  >= 9  Very High
  >= 7  High
  >= 5  Medium
  >= 3  Low
  else  Very Low
"""

from __future__ import annotations

import textwrap
from typing import Any, Optional

from agro_advisor.models.advisory import Advisory, CategoryAdvice, WeatherAdvice
from agro_advisor.models.rule import RuleTable
from agro_advisor.models.translation import TranslationOutcome
from agro_advisor.taxonomy.advisory_taxonomy import RuleCategory

_WRAP = 72


# ── Confidence ───────────────────────────────────────────────────────────────


def confidence_label(score: float | None) -> str:
    """Text label for a 1–10 confidence score."""
    if score is None:
        return "Unknown"
    if score >= 9:
        return "Very High"
    if score >= 7:
        return "High"
    if score >= 5:
        return "Medium"
    if score >= 3:
        return "Low"
    return "Very Low"


# ── Advisory ─────────────────────────────────────────────────────────────────


def format_advisory(
    advisory: Advisory,
    crop: Optional[str] = None,
    soil_type: str = "",
    season: str = "",
    translation: Optional[TranslationOutcome] = None,
) -> str:
    """Format a complete advisory as an ASCII report.

    Example::

        === Farm Advisory ===
          Crop: Rice   Soil: Clay   Season: Kharif
          Overall confidence: 8.3/10 (High)

          [CROP]  confidence 8/10 (High)  rule: crop_validation
            Rice is suitable for Clay soil during Kharif season.
            Why: Crop validated against soil-season suitability database

    Args:
        advisory:    Advisory to print (already translated, if applicable).
        crop:        Crop as requested (header only).
        soil_type:   Soil type as requested (header only).
        season:      Season as requested (header only).
        translation: Optional outcome, printed as a footer line.

    Returns:
        Multi-line string.
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Farm Advisory ===")
    lines.append(
        f"  Crop: {crop or '(recommend)'}   Soil: {soil_type or '-'}   Season: {season or '-'}"
    )
    lines.append(
        f"  Overall confidence: {advisory.confidence_score:.1f}/10 "
        f"({confidence_label(advisory.confidence_score)})"
    )

    sections = (
        ("CROP", advisory.crop_advice),
        ("FERTILIZER", advisory.fertilizer_advice),
        ("IRRIGATION", advisory.irrigation_advice),
    )
    for title, advice in sections:
        lines.append("")
        lines.extend(_category_block(title, advice))

    if advisory.weather_advice is not None:
        lines.append("")
        lines.extend(_weather_block(advisory.weather_advice))

    if translation is not None:
        lines.append("")
        if translation.performed:
            lines.append(
                f"  [TRANSLATED] {translation.target_language} "
                f"({translation.successful_translations}/{translation.total_texts} texts, "
                f"confidence {translation.confidence})"
            )
        elif translation.error:
            lines.append(f"  [NOT TRANSLATED] {translation.error}")

    return "\n".join(lines)


def _category_block(title: str, advice: CategoryAdvice) -> list[str]:
    lines = [
        f"  [{title}]  confidence {advice.confidence}/10 "
        f"({confidence_label(advice.confidence)})  rule: {advice.rule_applied}"
    ]
    lines.extend(_wrapped(advice.recommendation, "    "))
    lines.extend(_wrapped(f"Why: {advice.explanation}", "    "))
    return lines


def _weather_block(weather: WeatherAdvice) -> list[str]:
    current = weather.current_weather
    lines = [
        f"  [WEATHER]  confidence {weather.confidence}/10 "
        f"({confidence_label(weather.confidence)})",
        f"    Now: {current.temperature}, humidity {current.humidity}, "
        f"{current.description or 'n/a'}",
    ]
    if weather.warnings:
        for w in weather.warnings:
            lines.extend(_wrapped(f"! {w.type} ({w.severity}): {w.message}", "    "))
    else:
        lines.append("    No weather warnings.")
    for rec in weather.recommendations:
        lines.extend(_wrapped(f"- {rec}", "    "))
    lines.extend(_wrapped(f"Why: {weather.explanation}", "    "))
    return lines


def _wrapped(text: str, indent: str) -> list[str]:
    return textwrap.wrap(
        text, width=_WRAP, initial_indent=indent, subsequent_indent=indent + "  "
    ) or [indent]


# ── Rule table ───────────────────────────────────────────────────────────────


def format_rule_table_summary(table: RuleTable) -> str:
    """Rule table diagnostics: per-category counts, version and load status.

    Returns:
        Multi-line string.
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Rule Table ===")
    lines.append(f"  Source:   {table.source_path or '(in-memory)'}")
    lines.append(f"  Version:  {table.version or 'n/a'}")

    if table.is_degraded:
        lines.append(f"  [DEGRADED] {table.load_error}")
        lines.append("  All advice will come from static fallback tables.")

    lines.append("")
    lines.append(f"  {'Category':<20}  {'Rules':>5}  {'Avg conf':>8}")
    lines.append("  " + "-" * 37)
    for category in RuleCategory:
        rules = table.rules_for(category)
        avg = (
            f"{sum(r.confidence for r in rules) / len(rules):.1f}" if rules else "-"
        )
        lines.append(f"  {category.value:<20}  {len(rules):>5}  {avg:>8}")
    lines.append("  " + "-" * 37)
    lines.append(f"  {'total':<20}  {table.total_rules:>5}")

    if table.declared_total is not None and table.declared_total != table.total_rules:
        lines.append("")
        lines.append(
            f"  [WARN] metadata.totalRules={table.declared_total} "
            f"but {table.total_rules} rules loaded"
        )
    return "\n".join(lines)


# ── Options ──────────────────────────────────────────────────────────────────


def format_options(options: dict[str, Any]) -> str:
    """Accepted request values, as returned by ``AdvisoryService.options()``."""
    languages = options.get("languages") or {}
    lines = [
        "",
        "=== Advisory Options ===",
        f"  Soil types:   {', '.join(options.get('soil_types', []))}",
        f"  Seasons:      {', '.join(options.get('seasons', []))}",
        f"  Common crops: {', '.join(options.get('common_crops', []))}",
        "  Languages:    "
        + ", ".join(f"{code} ({name})" for code, name in languages.items()),
    ]
    return "\n".join(lines)
