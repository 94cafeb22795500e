"""Tests for agro_advisor.engine.confidence."""

from __future__ import annotations

import pytest

from agro_advisor.engine.confidence import aggregate_confidence, round_half_up
from agro_advisor.models.advisory import CategoryAdvice


def _adv(confidence: int) -> CategoryAdvice:
    return CategoryAdvice(
        recommendation="r", confidence=confidence, explanation="e", rule_applied="x"
    )


def test_mean_of_three():
    assert aggregate_confidence([_adv(9), _adv(7), _adv(8)]) == 8.0


def test_mean_rounded_to_one_decimal():
    assert aggregate_confidence([_adv(8), _adv(9), _adv(9)]) == 8.7


def test_empty_floors_at_one():
    assert aggregate_confidence([]) == 1.0


def test_missing_and_zero_entries_skipped():
    assert aggregate_confidence([None, _adv(0), _adv(6)]) == 6.0
    assert aggregate_confidence([None, _adv(0)]) == 1.0


@pytest.mark.parametrize("value,expected", [
    (6.25, 6.3),
    (6.24, 6.2),
    (8.0, 8.0),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == pytest.approx(expected)
