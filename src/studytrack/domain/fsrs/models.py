"""
Domain models for FSRS scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum, IntEnum
from typing import Any

from studytrack.domain.constants import (
    DEFAULT_AGAIN_MIN_INTERVAL_DAYS,
    DEFAULT_MAX_INTERVAL_DAYS,
    DEFAULT_REQUESTED_RETENTION,
    FSRS5_DEFAULT_WEIGHTS,
    FSRS6_DEFAULT_WEIGHTS,
)
from studytrack.domain.dates import format_iso_date, parse_iso_date
from studytrack.domain.errors import InvalidRatingError


class Rating(IntEnum):
    """
    Self-assessed recall quality.

    The integer values are part of the FSRS formulas (``grade - 3``,
    ``grade - 1``) and must not change.
    """

    AGAIN = 1
    HARD = 2
    GOOD = 3
    EASY = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: Any) -> "Rating":
        """
        Interpret `value` as a rating.

        Accepts a Rating, an int 1-4, a numeric string, or a case-insensitive
        name ("again", "hard", "good", "easy").

        Raises:
            InvalidRatingError: For anything else.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidRatingError(value)
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise InvalidRatingError(value) from None
        if isinstance(value, str):
            key = value.strip()
            if key.isdigit():
                return cls.parse(int(key))
            try:
                return cls[key.upper()]
            except KeyError:
                raise InvalidRatingError(value) from None
        raise InvalidRatingError(value)


class FSRSVersion(str, Enum):
    """
    Algorithm variant.

    Each member knows its weight arity, its default weights and whether the
    forgetting curve is derived from the weights (FSRS-6) or fixed (FSRS-5).
    """

    V5 = "fsrs5"
    V6 = "fsrs6"

    @property
    def label(self) -> str:
        return "FSRS-6" if self is FSRSVersion.V6 else "FSRS-5"

    @property
    def default_weights(self) -> tuple[float, ...]:
        return FSRS6_DEFAULT_WEIGHTS if self is FSRSVersion.V6 else FSRS5_DEFAULT_WEIGHTS

    @property
    def arity(self) -> int:
        return len(self.default_weights)

    @property
    def has_trainable_decay(self) -> bool:
        return self is FSRSVersion.V6

    @classmethod
    def parse(cls, value: Any) -> "FSRSVersion":
        """Lenient lookup: anything that does not name FSRS-6 means FSRS-5."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "").replace("_", "")
            if key in ("fsrs6", "v6", "6"):
                return cls.V6
        elif isinstance(value, int) and not isinstance(value, bool) and value == 6:
            return cls.V6
        return cls.V5


@dataclass(frozen=True)
class FSRSConfig:
    """
    Process-wide scheduler configuration.

    Replaced as a whole, never edited in place. Build instances through
    `normalize_config`, which guarantees the documented ranges.

    Attributes:
        version: Algorithm variant.
        requested_retention: Target recall probability in [0.01, 0.999].
        custom_weights: Trained weights of the version's arity, or None.
        again_min_interval_days: Floor for the interval scheduled after Again.
        max_interval_days: Cap for every scheduled interval.
        apply_fuzzing: Whether `review` jitters scheduled intervals by default.
    """

    version: FSRSVersion = FSRSVersion.V5
    requested_retention: float = DEFAULT_REQUESTED_RETENTION
    custom_weights: tuple[float, ...] | None = None
    again_min_interval_days: int = DEFAULT_AGAIN_MIN_INTERVAL_DAYS
    max_interval_days: int = DEFAULT_MAX_INTERVAL_DAYS
    apply_fuzzing: bool = False

    @property
    def weights(self) -> tuple[float, ...]:
        if self.custom_weights is not None:
            return self.custom_weights
        return self.version.default_weights

    @property
    def uses_custom_weights(self) -> bool:
        return self.custom_weights is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version.value,
            "requested_retention": self.requested_retention,
            "custom_weights": list(self.custom_weights) if self.custom_weights else None,
            "again_min_interval_days": self.again_min_interval_days,
            "max_interval_days": self.max_interval_days,
            "apply_fuzzing": self.apply_fuzzing,
        }


@dataclass(frozen=True)
class FSRSState:
    """
    Memory state of one learning item.

    Attributes:
        difficulty: 1-10 once reviewed (0 for a new item).
        stability: Days until recall probability drops to 90%; 0 means never reviewed.
        last_review: Day of the most recent review.
        next_review: Day the item is scheduled for.
    """

    difficulty: float = 0.0
    stability: float = 0.0
    last_review: date | None = None
    next_review: date | None = None

    @classmethod
    def new(cls) -> "FSRSState":
        return cls()

    @property
    def is_new(self) -> bool:
        return self.stability <= 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "difficulty": self.difficulty,
            "stability": self.stability,
            "last_review": format_iso_date(self.last_review),
            "next_review": format_iso_date(self.next_review),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FSRSState":
        return cls(
            difficulty=float(data.get("difficulty") or 0.0),
            stability=float(data.get("stability") or 0.0),
            last_review=parse_iso_date(data.get("last_review")),
            next_review=parse_iso_date(data.get("next_review")),
        )


@dataclass(frozen=True)
class ReviewOptions:
    """
    Per-call overrides for `review` and `preview_all_ratings`.

    Attributes:
        custom_elapsed_days: Use this instead of days since `last_review`.
        apply_fuzzing: Override the config's fuzzing flag (None keeps it).
        today: Review day; defaults to the local current date.
    """

    custom_elapsed_days: int | None = None
    apply_fuzzing: bool | None = None
    today: date | datetime | None = None


@dataclass(frozen=True)
class ReviewOutcome:
    """
    Result of scheduling one rating.

    `interval_days` is the canonical interval for the new stability;
    `scheduled_days` is what `next_review` was computed from (after rating
    ordering and optional fuzzing).
    """

    rating: Rating
    new_state: FSRSState
    interval_days: int
    scheduled_days: int
    retrievability: float | None
    elapsed_days: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "rating": int(self.rating),
            "rating_label": self.rating.label,
            "new_state": self.new_state.to_dict(),
            "interval_days": self.interval_days,
            "scheduled_days": self.scheduled_days,
            "retrievability": self.retrievability,
            "elapsed_days": self.elapsed_days,
        }


@dataclass(frozen=True)
class ReviewEntry:
    """
    A single entry of an item's append-only review history.

    Records the configuration used so the history stays reproducible after
    the process-wide config changes.
    """

    id: str
    review_number: int
    date: date
    rating: Rating
    rating_label: str
    difficulty_before: float
    difficulty_after: float
    stability_before: float
    stability_after: float
    interval_days: int
    scheduled_days: int
    retrievability: float | None
    algorithm_version: FSRSVersion
    requested_retention: float
    used_custom_weights: bool
    performance_score: float | None = None
    questions_total: int = 0
    questions_correct: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "review_number": self.review_number,
            "date": self.date.isoformat(),
            "rating": int(self.rating),
            "rating_label": self.rating_label,
            "difficulty_before": self.difficulty_before,
            "difficulty_after": self.difficulty_after,
            "stability_before": self.stability_before,
            "stability_after": self.stability_after,
            "interval_days": self.interval_days,
            "scheduled_days": self.scheduled_days,
            "retrievability": self.retrievability,
            "performance_score": self.performance_score,
            "questions_total": self.questions_total,
            "questions_correct": self.questions_correct,
            "algorithm_version": self.algorithm_version.value,
            "requested_retention": self.requested_retention,
            "used_custom_weights": self.used_custom_weights,
        }


@dataclass(frozen=True)
class StudyItem:
    """
    A learning item as held by the surrounding application.

    Only the fields the scheduler and review log need are modelled here.
    """

    name: str
    state: FSRSState = field(default_factory=FSRSState.new)
    history: tuple[ReviewEntry, ...] = ()
    questions_total: int = 0
    questions_correct: int = 0
