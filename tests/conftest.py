from datetime import date

import pytest

from studytrack.application.fsrs import normalize_config
from studytrack.domain.fsrs.models import FSRSState


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config files
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "STUDYTRACK_FSRS_VERSION",
        "STUDYTRACK_REQUESTED_RETENTION",
        "STUDYTRACK_CUSTOM_WEIGHTS",
        "STUDYTRACK_AGAIN_MIN_INTERVAL_DAYS",
        "STUDYTRACK_MAX_INTERVAL_DAYS",
        "STUDYTRACK_APPLY_FUZZING",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def v5_config():
    return normalize_config(None)


@pytest.fixture
def v6_config():
    return normalize_config({"version": "fsrs6"})


@pytest.fixture
def new_state():
    return FSRSState.new()


@pytest.fixture
def reviewed_state():
    """A hard, weakly remembered item last seen on 2026-02-14."""
    return FSRSState(
        difficulty=7.0,
        stability=0.4,
        last_review=date(2026, 2, 14),
        next_review=date(2026, 2, 15),
    )
