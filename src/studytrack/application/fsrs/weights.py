"""
Weight tables and forgetting-curve parameters.

The default vectors are the published FSRS reference fits. They are opaque
data: the formulas index into them by position.
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from studytrack.domain.constants import (
    CURVE_ANCHOR_RETENTION,
    FSRS5_DECAY,
    FSRS5_FACTOR,
    FSRS6_DEFAULT_WEIGHTS,
)
from studytrack.domain.fsrs.models import FSRSVersion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurveParams:
    """Constants of the power-law forgetting curve R(t) = (1 + factor*t/S)^decay."""

    decay: float
    factor: float


def expected_arity(version: FSRSVersion) -> int:
    return version.arity


def default_weights(version: FSRSVersion) -> tuple[float, ...]:
    return version.default_weights


def curve_params(version: FSRSVersion, weights: Sequence[float]) -> CurveParams:
    """
    Derive (decay, factor) for `version`.

    FSRS-5 uses fixed constants. FSRS-6 trains the decay as the last weight
    and picks the factor so that R(S) == 0.9. When the trained decay gives
    no usable curve (non-positive, or a factor that overflows or vanishes)
    the default w20 is used instead.
    """
    if not version.has_trainable_decay:
        return CurveParams(decay=FSRS5_DECAY, factor=FSRS5_FACTOR)

    w20 = weights[20]
    factor = _anchored_factor(w20)
    if factor is None:
        logger.debug(f"FSRS-6 decay weight {w20!r} gives no usable curve; using default")
        w20 = FSRS6_DEFAULT_WEIGHTS[20]
        factor = _anchored_factor(w20)
    return CurveParams(decay=-w20, factor=factor)


def _anchored_factor(w20: float) -> float | None:
    if not w20 > 0:
        return None
    try:
        factor = math.pow(CURVE_ANCHOR_RETENTION, -1 / w20) - 1
    except OverflowError:
        return None
    if not (factor > 0 and math.isfinite(factor)):
        return None
    return factor
