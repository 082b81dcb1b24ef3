"""
Review scheduler: application layer orchestrator.

Coordinates elapsed-day computation, the state transition, the interval
solver, rating ordering and optional fuzzing into a single `review` call,
and runs the same pipeline for all four ratings to build previews.
"""

import logging
from collections.abc import Mapping
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Any

from studytrack.domain.dates import days_between, parse_iso_date, resolve_today
from studytrack.domain.fsrs.models import (
    FSRSConfig,
    FSRSState,
    Rating,
    ReviewOptions,
    ReviewOutcome,
)

from .fuzz import IntervalFuzzer
from .memory_model import interval_days
from .normalizer import normalize_config
from .transition import TransitionResult, transition

logger = logging.getLogger(__name__)

# keys of the legacy options object
_OPTION_ALIASES = {
    "custom_elapsed_days": "customElapsedDays",
    "apply_fuzzing": "applyFuzzing",
    "today": "today",
}


def coerce_options(
    options: ReviewOptions | Mapping[str, Any] | int | None = None,
    apply_fuzzing: bool | None = None,
    custom_elapsed_days: int | None = None,
    today: date | datetime | str | None = None,
) -> ReviewOptions:
    """
    Collapse every supported call shape into a `ReviewOptions`.

    `options` may be a ReviewOptions, a legacy options mapping, or (legacy
    positional form) the elapsed-days override itself. Explicit keyword
    values win over whatever `options` carried.
    """
    if options is None:
        resolved = ReviewOptions()
    elif isinstance(options, ReviewOptions):
        resolved = options
    elif isinstance(options, Mapping):
        values = {}
        for name, alias in _OPTION_ALIASES.items():
            if name in options:
                values[name] = options[name]
            elif alias in options:
                values[name] = options[alias]
        resolved = ReviewOptions(**values)
    elif isinstance(options, int) and not isinstance(options, bool):
        resolved = ReviewOptions(custom_elapsed_days=options)
    else:
        raise TypeError(f"Unsupported review options: {options!r}")

    if apply_fuzzing is not None:
        resolved = replace(resolved, apply_fuzzing=apply_fuzzing)
    if custom_elapsed_days is not None:
        resolved = replace(resolved, custom_elapsed_days=custom_elapsed_days)
    if today is not None:
        resolved = replace(resolved, today=today)
    if isinstance(resolved.today, str):
        resolved = replace(resolved, today=parse_iso_date(resolved.today))
    return resolved


def elapsed_days_for(state: FSRSState, today: date, custom_elapsed_days: int | None = None) -> int:
    """Whole days since the last review (never negative)."""
    if custom_elapsed_days is not None:
        return max(0, int(custom_elapsed_days))
    last_review = parse_iso_date(state.last_review)
    if last_review is None:
        return 0
    return max(0, days_between(last_review, today))


def order_intervals(intervals: Mapping[Rating, int], config: FSRSConfig) -> dict[Rating, int]:
    """
    Make scheduled intervals strictly increase from Again to Easy.

    Again is floored at `again_min_interval_days`; each following rating is
    at least one day longer than the previous. Everything is capped at
    `max_interval_days`, so ordering can collapse at the cap.
    """
    cap = config.max_interval_days
    ordered: dict[Rating, int] = {}
    floor = config.again_min_interval_days
    for rating in Rating:
        ordered[rating] = min(max(intervals[rating], floor), cap)
        floor = ordered[rating] + 1
    return ordered


class ReviewScheduler:
    """
    Facade over the FSRS engine.

    Stateless apart from the fuzzer's random source; safe to share across
    items. Callers must serialize reviews of the same item.
    """

    def __init__(self, fuzzer: IntervalFuzzer | None = None):
        self._fuzzer = fuzzer or IntervalFuzzer()

    def review(
        self,
        state: FSRSState,
        rating: Rating | int | str,
        config: Any = None,
        options: ReviewOptions | Mapping[str, Any] | int | None = None,
        apply_fuzzing: bool | None = None,
        *,
        custom_elapsed_days: int | None = None,
        today: date | datetime | str | None = None,
    ) -> ReviewOutcome:
        """
        Apply `rating` to `state` and schedule the next review.

        Args:
            state: Current memory state (not modified).
            rating: 1-4, a Rating, or a rating name.
            config: Raw or normalized config; normalized here.
            options: ReviewOptions, a legacy options mapping, or the legacy
                positional elapsed-days override.
            apply_fuzzing: Legacy positional fuzz flag / keyword override.
            custom_elapsed_days: Keyword override for elapsed days.
            today: Keyword override for the review day.

        Returns:
            ReviewOutcome with the new state, the canonical interval and
            the scheduled (ordered, possibly fuzzed) interval.
        """
        cfg = normalize_config(config)
        grade = Rating.parse(rating)
        opts = coerce_options(options, apply_fuzzing, custom_elapsed_days, today)
        fuzz = cfg.apply_fuzzing if opts.apply_fuzzing is None else opts.apply_fuzzing

        day = resolve_today(opts.today)
        elapsed = elapsed_days_for(state, day, opts.custom_elapsed_days)
        plan = self._plan(state, cfg, elapsed)
        ordered = order_intervals({r: ivl for r, (_, ivl) in plan.items()}, cfg)

        result, canonical = plan[grade]
        scheduled = ordered[grade]
        if fuzz:
            scheduled = self._fuzz(grade, ordered, cfg)

        outcome = self._outcome(grade, result, canonical, scheduled, elapsed, day)
        logger.debug(
            f"Reviewed as {grade.label}: elapsed={elapsed}d "
            f"S {state.stability} -> {result.stability}, "
            f"D {state.difficulty} -> {result.difficulty}, "
            f"interval={canonical}d scheduled={scheduled}d"
        )
        return outcome

    def preview_all_ratings(
        self,
        state: FSRSState,
        config: Any = None,
        options: ReviewOptions | Mapping[str, Any] | int | None = None,
        *,
        apply_fuzzing: bool | None = None,
        today: date | datetime | str | None = None,
    ) -> list[ReviewOutcome]:
        """
        Outcomes for Again, Hard, Good and Easy without touching `state`.

        Previews are unfuzzed unless `apply_fuzzing=True` is passed, so an
        unfuzzed `review` matches its preview entry exactly.
        """
        opts = coerce_options(options, today=today)
        if apply_fuzzing is not None:
            opts = replace(opts, apply_fuzzing=apply_fuzzing)
        elif opts.apply_fuzzing is None:
            opts = replace(opts, apply_fuzzing=False)
        return [self.review(state, rating, config, opts) for rating in Rating]

    def _plan(
        self, state: FSRSState, config: FSRSConfig, elapsed: int
    ) -> dict[Rating, tuple[TransitionResult, int]]:
        plan = {}
        for rating in Rating:
            result = transition(state, rating, config, elapsed)
            plan[rating] = (result, interval_days(result.stability, config))
        return plan

    def _fuzz(self, rating: Rating, ordered: Mapping[Rating, int], config: FSRSConfig) -> int:
        """Fuzz the chosen rating's interval without crossing its neighbours."""
        fuzzed = self._fuzzer.fuzz(ordered[rating], config.max_interval_days)
        low = (
            ordered[Rating(rating - 1)] + 1
            if rating > Rating.AGAIN
            else config.again_min_interval_days
        )
        high = ordered[Rating(rating + 1)] - 1 if rating < Rating.EASY else config.max_interval_days
        if low <= high:
            fuzzed = min(max(fuzzed, low), high)
        return fuzzed

    @staticmethod
    def _outcome(
        rating: Rating,
        result: TransitionResult,
        canonical: int,
        scheduled: int,
        elapsed: int,
        today: date,
    ) -> ReviewOutcome:
        new_state = FSRSState(
            difficulty=result.difficulty,
            stability=result.stability,
            last_review=today,
            next_review=today + timedelta(days=scheduled),
        )
        return ReviewOutcome(
            rating=rating,
            new_state=new_state,
            interval_days=canonical,
            scheduled_days=scheduled,
            retrievability=result.retrievability,
            elapsed_days=elapsed,
        )


_default_scheduler = ReviewScheduler()


def review(
    state: FSRSState,
    rating: Rating | int | str,
    config: Any = None,
    options: ReviewOptions | Mapping[str, Any] | int | None = None,
    apply_fuzzing: bool | None = None,
    *,
    custom_elapsed_days: int | None = None,
    today: date | datetime | str | None = None,
) -> ReviewOutcome:
    """Module-level shortcut for `ReviewScheduler.review`."""
    return _default_scheduler.review(
        state,
        rating,
        config,
        options,
        apply_fuzzing,
        custom_elapsed_days=custom_elapsed_days,
        today=today,
    )


def preview_all_ratings(
    state: FSRSState,
    config: Any = None,
    options: ReviewOptions | Mapping[str, Any] | int | None = None,
    *,
    apply_fuzzing: bool | None = None,
    today: date | datetime | str | None = None,
) -> list[ReviewOutcome]:
    """Module-level shortcut for `ReviewScheduler.preview_all_ratings`."""
    return _default_scheduler.preview_all_ratings(
        state, config, options, apply_fuzzing=apply_fuzzing, today=today
    )
