# Domain FSRS Package
from .models import (
    FSRSConfig,
    FSRSState,
    FSRSVersion,
    Rating,
    ReviewEntry,
    ReviewOptions,
    ReviewOutcome,
    StudyItem,
)

__all__ = [
    "FSRSConfig",
    "FSRSState",
    "FSRSVersion",
    "Rating",
    "ReviewEntry",
    "ReviewOptions",
    "ReviewOutcome",
    "StudyItem",
]
