"""Exceptions raised by the studytrack domain.

Malformed configuration never raises; it is normalized instead. These errors
cover caller mistakes that cannot be degraded to a sensible value.
"""


class StudytrackError(Exception):
    """Base class for all studytrack errors."""


class InvalidRatingError(StudytrackError, ValueError):
    """Raised when a value cannot be interpreted as a 1-4 review rating."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unsupported rating: {value!r} (expected 1-4 or again/hard/good/easy)")


class InvalidDateError(StudytrackError, ValueError):
    """Raised when a value is not a calendar date in YYYY-MM-DD form."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid date: {value!r} (expected YYYY-MM-DD)")
