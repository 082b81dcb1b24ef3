"""Shared helpers for CLI commands."""

from typing import Any

import typer

from studytrack.application.config import AppConfig, resolve_config
from studytrack.domain.dates import parse_iso_date
from studytrack.domain.errors import StudytrackError
from studytrack.domain.fsrs.models import FSRSState


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    """Resolve settings, letting any non-None CLI option win."""
    return resolve_config(overrides)


def _state_from_options(
    difficulty: float,
    stability: float,
    last_review: str | None,
    next_review: str | None = None,
) -> FSRSState:
    return FSRSState(
        difficulty=difficulty,
        stability=stability,
        last_review=parse_iso_date(last_review),
        next_review=parse_iso_date(next_review),
    )


def _fail(err: StudytrackError) -> typer.Exit:
    typer.secho(f"Error: {err}", fg="red", err=True)
    return typer.Exit(1)
