# Application FSRS Package
from .fuzz import IntervalFuzzer
from .memory_model import interval_days, retrievability_at
from .normalizer import normalize_config
from .scheduler import ReviewScheduler, preview_all_ratings, review
from .status import (
    DifficultyLabel,
    ReviewStatus,
    days_until_review,
    difficulty_label,
    is_review_due,
    review_status,
    suggest_rating_from_performance,
)
from .weights import CurveParams, curve_params, default_weights, expected_arity

__all__ = [
    "CurveParams",
    "DifficultyLabel",
    "IntervalFuzzer",
    "ReviewScheduler",
    "ReviewStatus",
    "curve_params",
    "days_until_review",
    "default_weights",
    "difficulty_label",
    "expected_arity",
    "interval_days",
    "is_review_due",
    "normalize_config",
    "preview_all_ratings",
    "retrievability_at",
    "review",
    "review_status",
    "suggest_rating_from_performance",
]
