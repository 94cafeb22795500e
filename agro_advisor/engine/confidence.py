"""
Overall advisory confidence.

The score is the mean of the three category confidences, rounded half-up to
one decimal. Weather advice is never part of the input. Entries whose
confidence is missing or zero are skipped; when nothing valid remains the
score floors at 1.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

from agro_advisor.models.advisory import CategoryAdvice

CONFIDENCE_FLOOR = 1.0


def aggregate_confidence(advice_list: Iterable[Optional[CategoryAdvice]]) -> float:
    """Mean confidence of ``advice_list`` to one decimal place.

    Example::

        >>> aggregate_confidence([a9, a7, a8])
        8.0
        >>> aggregate_confidence([])
        1.0
    """
    values = [
        advice.confidence
        for advice in advice_list
        if advice is not None and advice.confidence
    ]
    if not values:
        return CONFIDENCE_FLOOR
    return round_half_up(sum(values) / len(values), 1)


def round_half_up(value: float, digits: int = 1) -> float:
    """Round with ties away from zero for positives (6.25 → 6.3), unlike ``round()``."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
