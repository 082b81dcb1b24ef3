"""
Forgetting curve and its inverse.

This is a pure computation module with no I/O.
"""

import math
from typing import Any

from studytrack.domain.constants import MIN_INTERVAL_DAYS
from studytrack.domain.fsrs.models import FSRSConfig

from .normalizer import normalize_config
from .weights import CurveParams, curve_params


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round halves away from zero for positive values (0.5 -> 1, 2.345 -> 2.35)."""
    scale = 10**decimals
    return math.floor(value * scale + 0.5) / scale


def safe_exp(x: float) -> float:
    """`math.exp` that returns inf instead of raising on overflow."""
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def safe_pow(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf


def config_curve(config: FSRSConfig) -> CurveParams:
    return curve_params(config.version, config.weights)


def retrievability(stability: float, elapsed_days: float, curve: CurveParams) -> float:
    """
    Probability of recall after `elapsed_days` for a memory of `stability`.

    R(t) = (1 + factor * t / S) ^ decay. Returns 0 for an unreviewed item.
    """
    if stability <= 0:
        return 0.0
    elapsed_days = max(elapsed_days, 0.0)
    return math.pow(1 + curve.factor * elapsed_days / stability, curve.decay)


def retrievability_at(stability: float, elapsed_days: float, config: Any = None) -> float:
    """Estimated current retention without performing a review."""
    cfg = normalize_config(config)
    return retrievability(stability, elapsed_days, config_curve(cfg))


def raw_interval(stability: float, requested_retention: float, curve: CurveParams) -> float:
    """Days until R(t) falls to `requested_retention` (unrounded)."""
    return (stability / curve.factor) * (safe_pow(requested_retention, 1 / curve.decay) - 1)


def interval_days(stability: float, config: Any = None) -> int:
    """
    Whole days until recall probability drops to the requested retention.

    At least one day and at most `max_interval_days`. An unreviewed item
    (stability <= 0) gets one day.
    """
    cfg = normalize_config(config)
    if stability <= 0:
        return MIN_INTERVAL_DAYS

    interval = raw_interval(stability, cfg.requested_retention, config_curve(cfg))
    if not math.isfinite(interval):
        return cfg.max_interval_days
    days = max(MIN_INTERVAL_DAYS, int(round_half_up(interval)))
    return min(days, cfg.max_interval_days)
