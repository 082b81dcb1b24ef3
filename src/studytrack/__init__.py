"""studytrack: FSRS spaced-repetition scheduling for study topics."""

from studytrack.consts import VERSION

__version__ = VERSION
