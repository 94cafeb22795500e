"""
Rule matcher: selects the rules of one category that apply to a query.

A rule applies when ALL of:
  - ``conditions.soil``   is ``"any"`` or equals ``soil_type`` (case-insensitive)
  - ``conditions.season`` is ``"any"`` or equals ``season`` (case-insensitive)
  - crop: if the rule's crop is ``None`` or the queried crop is ``None`` the
    crop is not discriminated; otherwise the rule's crop is ``"any"`` or
    equals ``crop`` (case-insensitive).

Results are ordered by confidence descending. ``sorted()`` is stable, so
rules with equal confidence keep their source order.
"""

from __future__ import annotations

from typing import Optional

from agro_advisor.models.rule import Rule, RuleTable
from agro_advisor.taxonomy.advisory_taxonomy import ANY, RuleCategory


def find_rules(
    table: RuleTable,
    category: RuleCategory,
    soil_type: str,
    season: str,
    crop: Optional[str],
) -> list[Rule]:
    """Return all rules of ``category`` matching the query, best first.

    Args:
        table: Loaded rule table.
        category: Category to search.
        soil_type: Soil type to match.
        season: Season to match.
        crop: Crop to match, or ``None`` to skip crop discrimination.

    Returns:
        Matching rules sorted by confidence descending (stable).
    """
    matches = [
        rule
        for rule in table.rules_for(category)
        if rule_matches(rule, soil_type, season, crop)
    ]
    return sorted(matches, key=lambda r: r.confidence, reverse=True)


def rule_matches(
    rule: Rule,
    soil_type: str,
    season: str,
    crop: Optional[str],
) -> bool:
    """True if ``rule`` applies to the (soil, season, crop) query."""
    cond = rule.conditions
    if not _field_matches(cond.soil, soil_type):
        return False
    if not _field_matches(cond.season, season):
        return False
    if cond.crop is None or crop is None:
        return True
    return _field_matches(cond.crop, crop)


def _field_matches(condition: str, value: str) -> bool:
    return condition == ANY or condition.lower() == value.lower()
