"""Tests for agro_advisor.rules.store — JSON loading and degradation."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from agro_advisor.rules.store import load_rule_table, parse_rule_document
from agro_advisor.taxonomy.advisory_taxonomy import RuleCategory


def _rec(rule_id: str, confidence: int = 7, crop=None) -> dict:
    return {
        "id": rule_id,
        "conditions": {"soil": "Clay", "season": "Kharif", "crop": crop},
        "recommendation": f"Advice {rule_id}.",
        "confidence": confidence,
    }


class TestLoadShippedRules:
    def test_loads_all_categories(self, shipped_rule_table):
        assert not shipped_rule_table.is_degraded
        assert len(shipped_rule_table.crop_suitability) == 11
        assert len(shipped_rule_table.fertilizer_advice) == 6
        assert len(shipped_rule_table.irrigation_advice) == 4

    def test_metadata(self, shipped_rule_table, shipped_rules_path):
        assert shipped_rule_table.version == "1.0"
        assert shipped_rule_table.declared_total == shipped_rule_table.total_rules == 21
        assert shipped_rule_table.source_path == str(shipped_rules_path)

    def test_rule_ids_unique_within_category(self, shipped_rule_table):
        for category in RuleCategory:
            ids = [r.id for r in shipped_rule_table.rules_for(category)]
            assert len(ids) == len(set(ids)), f"Duplicate ids in {category}"

    def test_crop_suitability_never_discriminates_by_crop(self, shipped_rule_table):
        assert all(r.conditions.crop is None for r in shipped_rule_table.crop_suitability)

    def test_confidences_in_range(self, shipped_rule_table):
        for category in RuleCategory:
            for rule in shipped_rule_table.rules_for(category):
                assert 1 <= rule.confidence <= 10, rule.id


class TestDegradation:
    def test_missing_file(self, tmp_path: Path, caplog):
        path = tmp_path / "nope.json"
        with caplog.at_level(logging.ERROR, logger="agro_advisor.rules.store"):
            table = load_rule_table(path)
        assert table.is_degraded
        assert table.total_rules == 0
        assert "nope.json" in table.load_error
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{ not json", encoding="utf-8")
        table = load_rule_table(path)
        assert table.is_degraded
        assert table.source_path == str(path)

    def test_document_not_object(self):
        table = parse_rule_document([1, 2, 3])
        assert table.is_degraded
        assert "JSON object" in table.load_error

    def test_category_not_array(self):
        table = parse_rule_document({"cropSuitability": {"id": "x"}})
        assert table.is_degraded

    def test_rule_missing_field_degrades_whole_table(self):
        bad = _rec("b")
        del bad["recommendation"]
        table = parse_rule_document({
            "cropSuitability": [_rec("a")],
            "fertilizerAdvice": [bad],
        })
        assert table.is_degraded
        assert table.crop_suitability == ()

    def test_rule_not_object(self):
        assert parse_rule_document({"irrigationAdvice": ["oops"]}).is_degraded


class TestParsing:
    def test_missing_category_loads_empty(self):
        table = parse_rule_document({"cropSuitability": [_rec("a")]})
        assert not table.is_degraded
        assert len(table.crop_suitability) == 1
        assert table.fertilizer_advice == ()
        assert table.irrigation_advice == ()

    def test_category_assigned_from_array(self):
        table = parse_rule_document({
            "fertilizerAdvice": [_rec("f", crop="Rice")],
            "irrigationAdvice": [_rec("i", crop="any")],
        })
        assert table.fertilizer_advice[0].category is RuleCategory.FERTILIZER_ADVICE
        assert table.irrigation_advice[0].category is RuleCategory.IRRIGATION_ADVICE

    def test_source_order_kept(self):
        table = parse_rule_document({"cropSuitability": [_rec("a", 5), _rec("b", 9), _rec("c", 7)]})
        assert [r.id for r in table.crop_suitability] == ["a", "b", "c"]

    def test_out_of_range_confidence_kept_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="agro_advisor.rules.store"):
            table = parse_rule_document({"cropSuitability": [_rec("hot", 15)]})
        assert table.crop_suitability[0].confidence == 15
        assert any("outside [1, 10]" in r.getMessage() for r in caplog.records)

    def test_declared_total_mismatch_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="agro_advisor.rules.store"):
            table = parse_rule_document({
                "metadata": {"totalRules": 5, "version": 2},
                "cropSuitability": [_rec("a")],
            })
        assert table.declared_total == 5
        assert table.version == "2"
        assert any("totalRules=5" in r.getMessage() for r in caplog.records)

    def test_load_from_file_roundtrip(self, tmp_path: Path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"cropSuitability": [_rec("a")]}), encoding="utf-8")
        table = load_rule_table(path)
        assert table.crop_suitability[0].id == "a"
