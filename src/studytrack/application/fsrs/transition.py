"""
FSRS state transition.

Given the current memory state, a rating and the days since the last review,
computes the next difficulty and stability. Stability is updated along one
of three paths:

1. Same-day re-review (t == 0): a short-term multiplier, so cramming does
   not inflate long-term stability like a multi-day recall would.
2. Forgot (t > 0, Again): a decay-driven post-lapse stability.
3. Recalled (t > 0, Hard/Good/Easy): growth scaled by difficulty, current
   stability and how much had been forgotten.

This is a pure computation module with no I/O.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from studytrack.domain.constants import (
    MAX_DIFFICULTY,
    MAX_STABILITY,
    MIN_DIFFICULTY,
    MIN_STABILITY,
    STATE_DECIMALS,
)
from studytrack.domain.fsrs.models import FSRSConfig, FSRSState, Rating

from .memory_model import config_curve, retrievability, round_half_up, safe_exp, safe_pow


@dataclass(frozen=True)
class TransitionResult:
    difficulty: float
    stability: float
    retrievability: float | None  # None on the first review


def _clamp_difficulty(value: float) -> float:
    return min(max(value, MIN_DIFFICULTY), MAX_DIFFICULTY)


def _bound_stability(value: float, previous: float) -> float:
    """Keep stability finite and in range; an undefined update keeps `previous`."""
    if math.isnan(value):
        value = previous
    return min(max(value, MIN_STABILITY), MAX_STABILITY)


def initial_difficulty(rating: Rating, w: Sequence[float]) -> float:
    """D0(G) = w4 - exp(w5 * (G - 1)) + 1, unclamped."""
    return w[4] - safe_exp(w[5] * (rating - 1)) + 1


def initial_stability(rating: Rating, w: Sequence[float]) -> float:
    return w[rating - 1]


def next_difficulty(difficulty: float, rating: Rating, w: Sequence[float]) -> float:
    """Linear damping towards 10, then mean reversion towards D0(Easy)."""
    delta = -w[6] * (rating - 3)
    damped = difficulty + delta * (10 - difficulty) / 9
    reverted = w[7] * initial_difficulty(Rating.EASY, w) + (1 - w[7]) * damped
    if math.isnan(reverted):
        reverted = damped
    return _clamp_difficulty(reverted)


def same_day_stability(stability: float, rating: Rating, config: FSRSConfig) -> float:
    w = config.weights
    increment = safe_exp(w[17] * (rating - 3 + w[18]))
    if config.version.has_trainable_decay:
        increment *= safe_pow(stability, -w[19])
    if rating >= Rating.GOOD:
        # Good and Easy never shrink stability on a same-day review.
        increment = max(increment, 1.0)
    return stability * increment


def forget_stability(
    difficulty: float, stability: float, recall: float, w: Sequence[float]
) -> float:
    return (
        w[11]
        * safe_pow(difficulty, -w[12])
        * (safe_pow(stability + 1, w[13]) - 1)
        * safe_exp(w[14] * (1 - recall))
    )


def recall_stability(
    difficulty: float,
    stability: float,
    recall: float,
    rating: Rating,
    w: Sequence[float],
) -> float:
    growth = (
        safe_exp(w[8])
        * (11 - difficulty)
        * safe_pow(stability, -w[9])
        * (safe_exp(w[10] * (1 - recall)) - 1)
    )
    if rating == Rating.HARD:
        growth *= w[15]
    elif rating == Rating.EASY:
        growth *= w[16]
    return stability * (1 + growth)


def transition(
    state: FSRSState,
    rating: Rating,
    config: FSRSConfig,
    elapsed_days: int,
) -> TransitionResult:
    """
    Compute the post-review difficulty and stability.

    `config` must already be normalized. Difficulty is rounded to two
    decimals, as is stability after a repeat review. Stability is floored at
    0.1 so a reviewed item is never mistaken for a new one, and saturates at
    MAX_STABILITY when custom weights make an update overflow.
    """
    w = config.weights

    if state.is_new:
        # The initial stability is the weight itself, kept unrounded.
        difficulty = _clamp_difficulty(initial_difficulty(rating, w))
        return TransitionResult(
            difficulty=round_half_up(difficulty, STATE_DECIMALS),
            stability=max(initial_stability(rating, w), MIN_STABILITY),
            retrievability=None,
        )

    recall = retrievability(state.stability, elapsed_days, config_curve(config))
    new_difficulty = next_difficulty(state.difficulty, rating, w)

    if elapsed_days == 0:
        new_stability = same_day_stability(state.stability, rating, config)
    elif rating == Rating.AGAIN:
        new_stability = forget_stability(new_difficulty, state.stability, recall, w)
    else:
        new_stability = recall_stability(new_difficulty, state.stability, recall, rating, w)

    new_stability = _bound_stability(new_stability, state.stability)
    new_stability = round_half_up(new_stability, STATE_DECIMALS)
    if elapsed_days == 0 and rating >= Rating.GOOD:
        # Rounding must not undo the same-day floor on an unrounded stability.
        new_stability = max(new_stability, state.stability)

    return TransitionResult(
        difficulty=round_half_up(new_difficulty, STATE_DECIMALS),
        stability=new_stability,
        retrievability=recall,
    )
