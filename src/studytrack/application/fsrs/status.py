"""Review status, difficulty and rating-suggestion helpers for list and badge rendering."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal

from studytrack.domain.constants import (
    DIFFICULTY_EASY_MAX,
    DIFFICULTY_HARD_MAX,
    DIFFICULTY_MEDIUM_MAX,
    DIFFICULTY_VERY_EASY_MAX,
    STATUS_NEAR_DAYS,
    STATUS_SOON_DAYS,
    SUGGEST_EASY_ACCURACY,
    SUGGEST_GOOD_ACCURACY,
    SUGGEST_HARD_ACCURACY,
)
from studytrack.domain.dates import days_between, parse_iso_date, resolve_today
from studytrack.domain.fsrs.models import Rating

Urgency = Literal["none", "overdue", "today", "tomorrow", "soon", "normal"]


@dataclass(frozen=True)
class ReviewStatus:
    text: str
    urgency: Urgency
    tone: str  # display color hint


@dataclass(frozen=True)
class DifficultyLabel:
    text: str
    tone: str


def days_until_review(
    next_review: date | str | None, today: date | datetime | None = None
) -> int | None:
    """Signed days from today to `next_review`; negative means overdue."""
    review_day = parse_iso_date(next_review)
    if review_day is None:
        return None
    return days_between(resolve_today(today), review_day)


def is_review_due(next_review: date | str | None, today: date | datetime | None = None) -> bool:
    days = days_until_review(next_review, today)
    return days is not None and days <= 0


def review_status(
    next_review: date | str | None, today: date | datetime | None = None
) -> ReviewStatus:
    days = days_until_review(next_review, today)
    if days is None:
        return ReviewStatus("No review", "none", "gray")
    if days < 0:
        return ReviewStatus(f"Overdue ({abs(days)}d)", "overdue", "red")
    if days == 0:
        return ReviewStatus("Today!", "today", "orange")
    if days == 1:
        return ReviewStatus("Tomorrow", "tomorrow", "amber")
    if days <= STATUS_SOON_DAYS:
        return ReviewStatus(f"In {days} days", "soon", "yellow")
    if days <= STATUS_NEAR_DAYS:
        return ReviewStatus(f"In {days} days", "normal", "blue")
    return ReviewStatus(f"In {days} days", "normal", "gray")


def difficulty_label(difficulty: float) -> DifficultyLabel:
    if difficulty <= DIFFICULTY_VERY_EASY_MAX:
        return DifficultyLabel("Very easy", "green")
    if difficulty <= DIFFICULTY_EASY_MAX:
        return DifficultyLabel("Easy", "green")
    if difficulty <= DIFFICULTY_MEDIUM_MAX:
        return DifficultyLabel("Medium", "yellow")
    if difficulty <= DIFFICULTY_HARD_MAX:
        return DifficultyLabel("Hard", "orange")
    return DifficultyLabel("Very hard", "red")


def suggest_rating_from_performance(questions_total: int, questions_correct: int) -> Rating | None:
    """
    Suggest a rating from question accuracy.

    Returns None when no questions were answered.
    """
    if questions_total == 0:
        return None
    accuracy = questions_correct / questions_total
    if accuracy >= SUGGEST_EASY_ACCURACY:
        return Rating.EASY
    if accuracy >= SUGGEST_GOOD_ACCURACY:
        return Rating.GOOD
    if accuracy >= SUGGEST_HARD_ACCURACY:
        return Rating.HARD
    return Rating.AGAIN
