"""Tests for Rule / RuleTable models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from agro_advisor.models.rule import Rule, RuleConditions, RuleTable
from agro_advisor.taxonomy.advisory_taxonomy import RuleCategory


def _rule(**overrides) -> Rule:
    data = dict(
        id="r1",
        category=RuleCategory.FERTILIZER_ADVICE,
        conditions=RuleConditions(soil="Clay", season="Kharif", crop="Rice"),
        recommendation="Do something.",
        confidence=7,
    )
    data.update(overrides)
    return Rule(**data)


class TestRule:
    def test_valid_rule(self):
        rule = _rule()
        assert rule.id == "r1"
        assert rule.conditions.crop == "Rice"

    def test_crop_condition_defaults_to_none(self):
        cond = RuleConditions(soil="Clay", season="Kharif")
        assert cond.crop is None

    def test_blank_id_rejected(self):
        with pytest.raises(ValidationError):
            _rule(id="  ")

    def test_out_of_range_confidence_accepted(self):
        assert _rule(confidence=12).confidence == 12

    def test_frozen(self):
        rule = _rule()
        with pytest.raises(ValidationError):
            rule.confidence = 3

    def test_category_from_string(self):
        rule = _rule(category="irrigation_advice")
        assert rule.category is RuleCategory.IRRIGATION_ADVICE


class TestRuleTable:
    def test_empty_table(self):
        table = RuleTable()
        assert table.total_rules == 0
        assert not table.is_degraded
        for category in RuleCategory:
            assert table.rules_for(category) == ()

    def test_degraded_flag(self):
        assert RuleTable(load_error="boom").is_degraded

    def test_rules_for_each_category(self, sample_rule_table):
        assert len(sample_rule_table.rules_for(RuleCategory.CROP_SUITABILITY)) == 4
        assert len(sample_rule_table.rules_for(RuleCategory.FERTILIZER_ADVICE)) == 5
        assert len(sample_rule_table.rules_for(RuleCategory.IRRIGATION_ADVICE)) == 3
        assert sample_rule_table.total_rules == 12
