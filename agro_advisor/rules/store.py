"""
Rule store: JSON rule document → immutable ``RuleTable``.

Responsibilities
----------------
1. Read the rule source document (``config/rules/advisory_rules.json`` by
   default) once at process start.
2. Parse the three category arrays into frozen ``Rule`` records, tagging
   each with its ``RuleCategory``.
3. Degrade to an empty table on any failure instead of raising, recording the
   failure in ``RuleTable.load_error`` and the log.

Source document schema
----------------------
::

    {
      "metadata": {"totalRules": 30, "version": "1.2"},     # optional
      "cropSuitability":  [ {id, conditions, recommendation, confidence}, ... ],
      "fertilizerAdvice": [ ... ],
      "irrigationAdvice": [ ... ]
    }

``conditions`` is ``{"soil": str, "season": str, "crop": str | null}``.
A category array missing from the document loads as empty.

No validation is done beyond the structural parse: confidence values
outside 1–10 are kept and only logged.

Usage
-----
    from agro_advisor.rules.store import load_rule_table

    table = load_rule_table(Path("config/rules/advisory_rules.json"))
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from agro_advisor.models.rule import Rule, RuleTable
from agro_advisor.taxonomy.advisory_taxonomy import CATEGORY_SOURCE_KEYS, RuleCategory

logger = logging.getLogger(__name__)

_FIELD_BY_CATEGORY: dict[RuleCategory, str] = {
    RuleCategory.CROP_SUITABILITY:  "crop_suitability",
    RuleCategory.FERTILIZER_ADVICE: "fertilizer_advice",
    RuleCategory.IRRIGATION_ADVICE: "irrigation_advice",
}


def load_rule_table(path: Path | str) -> RuleTable:
    """Load the rule table from a JSON file. Never raises.

    Args:
        path: Rule source document path.

    Returns:
        Populated ``RuleTable``, or an empty one with ``load_error`` set.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        return _degraded(f"Cannot read rule source {path}: {exc}", path)

    return parse_rule_document(document, source_path=str(path))


def parse_rule_document(
    document: Any,
    source_path: Optional[str] = None,
) -> RuleTable:
    """Build a ``RuleTable`` from an already-decoded rule document. Never raises.

    Args:
        document: Decoded JSON document (expected to be a dict).
        source_path: Optional origin recorded for diagnostics.

    Returns:
        Populated ``RuleTable``, or an empty one with ``load_error`` set.
    """
    if not isinstance(document, dict):
        return _degraded(
            f"Rule source must be a JSON object, got {type(document).__name__}.",
            source_path,
        )

    grouped: dict[str, tuple[Rule, ...]] = {}
    try:
        for category, key in CATEGORY_SOURCE_KEYS.items():
            grouped[_FIELD_BY_CATEGORY[category]] = _parse_category(
                category, document.get(key) or []
            )
    except (ValidationError, TypeError, ValueError) as exc:
        return _degraded(f"Malformed rule source: {exc}", source_path)

    metadata = document.get("metadata") or {}
    if not isinstance(metadata, dict):
        metadata = {}

    table = RuleTable(
        **grouped,
        version=_optional_str(metadata.get("version")),
        declared_total=_optional_int(metadata.get("totalRules")),
        source_path=source_path,
    )

    logger.info(
        "Rule table loaded: %d rules (crop=%d, fertilizer=%d, irrigation=%d)",
        table.total_rules,
        len(table.crop_suitability),
        len(table.fertilizer_advice),
        len(table.irrigation_advice),
        extra={"rule_source": source_path, "rules_loaded": table.total_rules},
    )
    if table.declared_total is not None and table.declared_total != table.total_rules:
        logger.warning(
            "Rule source declares totalRules=%d but %d rules were loaded.",
            table.declared_total, table.total_rules,
        )
    return table


def _parse_category(category: RuleCategory, records: Any) -> tuple[Rule, ...]:
    """Parse one category array into ``Rule`` objects (raises on bad structure)."""
    if not isinstance(records, list):
        raise TypeError(
            f"Category '{CATEGORY_SOURCE_KEYS[category]}' must be an array, "
            f"got {type(records).__name__}."
        )

    rules: list[Rule] = []
    for rec in records:
        if not isinstance(rec, dict):
            raise TypeError(
                f"Rule in '{CATEGORY_SOURCE_KEYS[category]}' must be an object."
            )
        rule = Rule(**{**rec, "category": category})
        if not 1 <= rule.confidence <= 10:
            logger.warning(
                "Rule '%s' has confidence %d outside [1, 10]; kept as-is.",
                rule.id, rule.confidence,
            )
        rules.append(rule)
    return tuple(rules)


def _degraded(message: str, source_path: Path | str | None) -> RuleTable:
    logger.error(
        "Rule store degraded to empty rule table: %s", message,
        extra={"rule_source": str(source_path) if source_path is not None else None},
    )
    return RuleTable(
        source_path=str(source_path) if source_path is not None else None,
        load_error=message,
    )


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _optional_int(value: Any) -> Optional[int]:
    try:
        return None if value is None else int(value)
    except (TypeError, ValueError):
        return None
