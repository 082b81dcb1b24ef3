"""
Review log service.

Applies a rating to a study item and appends the matching `ReviewEntry` to
its history. Items are immutable: every call returns a new item and leaves
the one passed in untouched.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date, datetime
from typing import Any

from ulid import ULID

from studytrack.application.fsrs.normalizer import normalize_config
from studytrack.application.fsrs.scheduler import ReviewScheduler
from studytrack.application.fsrs.status import days_until_review, suggest_rating_from_performance
from studytrack.domain.fsrs.models import (
    FSRSConfig,
    Rating,
    ReviewEntry,
    ReviewOptions,
    ReviewOutcome,
    StudyItem,
)

logger = logging.getLogger(__name__)


def generate_review_id() -> str:
    """Generate a unique, time-sortable review entry ID using ULID."""
    return f"rev_{ULID()}"


def build_review_entry(
    item: StudyItem,
    outcome: ReviewOutcome,
    config: FSRSConfig,
) -> ReviewEntry:
    """Snapshot one review, including the config that produced it."""
    performance_score = (
        item.questions_correct / item.questions_total if item.questions_total > 0 else None
    )
    return ReviewEntry(
        id=generate_review_id(),
        review_number=len(item.history) + 1,
        date=outcome.new_state.last_review,
        rating=outcome.rating,
        rating_label=outcome.rating.label,
        difficulty_before=item.state.difficulty,
        difficulty_after=outcome.new_state.difficulty,
        stability_before=item.state.stability,
        stability_after=outcome.new_state.stability,
        interval_days=outcome.interval_days,
        scheduled_days=outcome.scheduled_days,
        retrievability=outcome.retrievability,
        algorithm_version=config.version,
        requested_retention=config.requested_retention,
        used_custom_weights=config.uses_custom_weights,
        performance_score=performance_score,
        questions_total=item.questions_total,
        questions_correct=item.questions_correct,
    )


class ReviewLog:
    """
    Records reviews against study items.

    Callers must not record two reviews of the same item concurrently: the
    review number is derived from the current history length.
    """

    def __init__(self, scheduler: ReviewScheduler | None = None):
        self._scheduler = scheduler or ReviewScheduler()

    def record(
        self,
        item: StudyItem,
        rating: Rating | int | str,
        config: Any = None,
        options: ReviewOptions | Mapping[str, Any] | int | None = None,
    ) -> tuple[StudyItem, ReviewEntry]:
        """
        Review `item` and return the updated item with its new history entry.
        """
        cfg = normalize_config(config)
        outcome = self._scheduler.review(item.state, rating, cfg, options)
        entry = build_review_entry(item, outcome, cfg)
        updated = replace(item, state=outcome.new_state, history=item.history + (entry,))

        logger.info(
            f"Review #{entry.review_number} of '{item.name}': {entry.rating_label}, "
            f"next review {outcome.new_state.next_review} ({outcome.scheduled_days}d)"
        )
        return updated, entry

    def suggested_rating(self, item: StudyItem) -> Rating | None:
        return suggest_rating_from_performance(item.questions_total, item.questions_correct)

    def due_items(
        self, items: Iterable[StudyItem], today: date | datetime | None = None
    ) -> list[StudyItem]:
        """Items scheduled for today or earlier, most overdue first."""
        due = []
        for item in items:
            days = days_until_review(item.state.next_review, today)
            if days is not None and days <= 0:
                due.append((days, item))
        due.sort(key=lambda pair: pair[0])
        return [item for _, item in due]
