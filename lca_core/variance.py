# MIT License
"""Variance and confidence of a prediction against its reference value."""

from __future__ import annotations

from typing import Optional, Tuple

from .utils import round_half_up

CONFIDENCE_FLOOR = 60.0


def score(predicted: float, actual: float) -> Tuple[Optional[int], float]:
    """Compare a prediction to the reference value.

    The variance is ``|predicted - actual| / actual`` in percent, rounded
    half up to an integer.  Confidence is ``100 - variance`` but never below
    :data:`CONFIDENCE_FLOOR`.

    A zero reference has no relative variance: when both values are zero
    the prediction is exact (variance 0, confidence 100), otherwise the
    variance is None and the confidence sits at the floor.

    Returns
    -------
    tuple
        ``(variance_pct, confidence)``.
    """
    if actual == 0:
        if predicted == 0:
            return 0, 100.0
        return None, CONFIDENCE_FLOOR
    variance_pct = round_half_up(abs(predicted - actual) / actual * 100.0)
    confidence = max(CONFIDENCE_FLOOR, 100.0 - variance_pct)
    return variance_pct, float(min(100.0, confidence))
