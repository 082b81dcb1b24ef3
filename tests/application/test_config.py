"""Tests for layered settings resolution (defaults, TOML, env, CLI overrides)."""

from studytrack.application.config import AppConfig, resolve_config
from studytrack.domain.constants import FSRS5_DEFAULT_WEIGHTS
from studytrack.domain.fsrs.models import FSRSConfig, FSRSVersion


def _write_toml(home, body, name=".studytrack.toml"):
    path = home / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body)
    return path


def test_defaults(mock_home):
    config = resolve_config()
    assert config.fsrs_version == "fsrs5"
    assert config.requested_retention is None
    assert config.apply_fuzzing is False
    assert config.fsrs_config() == FSRSConfig()


def test_env_vars(mock_home, monkeypatch):
    monkeypatch.setenv("STUDYTRACK_FSRS_VERSION", "fsrs6")
    monkeypatch.setenv("STUDYTRACK_REQUESTED_RETENTION", "0.85")
    monkeypatch.setenv("STUDYTRACK_APPLY_FUZZING", "true")

    fsrs = resolve_config().fsrs_config()
    assert fsrs.version is FSRSVersion.V6
    assert fsrs.requested_retention == 0.85
    assert fsrs.apply_fuzzing is True


def test_toml_file(mock_home):
    _write_toml(
        mock_home,
        'fsrs_version = "fsrs6"\nrequested_retention = 0.8\nmax_interval_days = 365\n',
    )
    fsrs = resolve_config().fsrs_config()
    assert fsrs.version is FSRSVersion.V6
    assert fsrs.requested_retention == 0.8
    assert fsrs.max_interval_days == 365


def test_xdg_config_file_wins_over_dotfile(mock_home):
    _write_toml(mock_home, "requested_retention = 0.8\n", ".config/studytrack/config.toml")
    _write_toml(mock_home, "requested_retention = 0.7\n")
    assert resolve_config().requested_retention == 0.8


def test_env_overrides_toml(mock_home, monkeypatch):
    _write_toml(mock_home, "requested_retention = 0.8\n")
    monkeypatch.setenv("STUDYTRACK_REQUESTED_RETENTION", "0.95")
    assert resolve_config().requested_retention == 0.95


def test_cli_overrides_win(mock_home, monkeypatch):
    _write_toml(mock_home, 'fsrs_version = "fsrs6"\n')
    monkeypatch.setenv("STUDYTRACK_REQUESTED_RETENTION", "0.95")

    config = resolve_config({"requested_retention": 0.75, "fsrs_version": None})
    assert config.requested_retention == 0.75
    # None means "not given on the command line"
    assert config.fsrs_version == "fsrs6"


def test_custom_weights_from_env(mock_home, monkeypatch):
    monkeypatch.setenv(
        "STUDYTRACK_CUSTOM_WEIGHTS", ",".join(str(w) for w in FSRS5_DEFAULT_WEIGHTS)
    )
    fsrs = resolve_config().fsrs_config()
    assert fsrs.custom_weights == FSRS5_DEFAULT_WEIGHTS
    assert fsrs.uses_custom_weights


def test_custom_weights_json_string(mock_home):
    config = AppConfig(custom_weights="[0.4, 1.2]")
    assert config.custom_weights == [0.4, 1.2]
    # wrong arity for FSRS-5
    assert config.fsrs_config().custom_weights is None


def test_malformed_values_fall_back(mock_home, monkeypatch, caplog):
    monkeypatch.setenv("STUDYTRACK_REQUESTED_RETENTION", "lots")
    monkeypatch.setenv("STUDYTRACK_MAX_INTERVAL_DAYS", "forever")
    monkeypatch.setenv("STUDYTRACK_CUSTOM_WEIGHTS", "[0.4, oops")

    config = resolve_config()
    assert config.requested_retention is None
    assert config.max_interval_days is None
    assert config.custom_weights is None
    assert config.fsrs_config() == FSRSConfig()
    assert "Ignoring invalid requested_retention" in caplog.text


def test_out_of_range_values_are_clamped(mock_home):
    fsrs = AppConfig(requested_retention=3, max_interval_days=10**9).fsrs_config()
    assert fsrs.requested_retention == 0.999
    assert fsrs.max_interval_days == 36500


def test_unknown_keys_ignored(mock_home):
    _write_toml(mock_home, 'theme = "dark"\nrequested_retention = 0.8\n')
    assert resolve_config().requested_retention == 0.8


def test_only_scheduler_settings_are_exposed(mock_home):
    _write_toml(mock_home, 'log_dir = "/tmp/logs"\nverbose = 3\n')
    dumped = resolve_config().model_dump()
    assert "log_dir" not in dumped
    assert "verbose" not in dumped
