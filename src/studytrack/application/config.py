import json
import logging
from pathlib import Path
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from studytrack.application.fsrs.normalizer import normalize_config
from studytrack.domain.fsrs.models import FSRSConfig

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"1", "true", "yes", "on"}


class AppConfig(BaseSettings):
    """
    Application settings for studytrack.
    Supports loading from:
    1. Config file (~/.config/studytrack/config.toml or ~/.studytrack.toml)
    2. Environment variables (STUDYTRACK_*)
    3. Manual overrides (CLI)

    Malformed scheduler fields become None here and `normalize_config`
    resolves them to defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="STUDYTRACK_",
        extra="ignore",
    )

    # Scheduler
    fsrs_version: str = "fsrs5"
    requested_retention: float | None = None
    custom_weights: Annotated[list[float] | None, NoDecode] = None
    again_min_interval_days: int | None = None
    max_interval_days: int | None = None
    apply_fuzzing: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Earlier sources win: CLI overrides, then env, then the first config file found.
        toml_file = next((f for f in _config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        else:
            return (
                init_settings,
                env_settings,
            )

    @field_validator("fsrs_version", mode="before")
    @classmethod
    def coerce_version(cls, v: Any) -> str:
        if v is None:
            return "fsrs5"
        return str(v)

    @field_validator("requested_retention", mode="before")
    @classmethod
    def coerce_retention(cls, v: Any) -> float | None:
        return _loose_number(v, float, "requested_retention")

    @field_validator("again_min_interval_days", "max_interval_days", mode="before")
    @classmethod
    def coerce_days(cls, v: Any) -> int | None:
        return _loose_number(v, int, "interval bound")

    @field_validator("custom_weights", mode="before")
    @classmethod
    def parse_custom_weights(cls, v: Any) -> list[float] | None:
        """Accept a list, a JSON array string, or comma-separated numbers."""
        if v is None or v == "":
            return None
        if isinstance(v, str):
            text = v.strip()
            try:
                v = json.loads(text) if text.startswith("[") else text.split(",")
            except json.JSONDecodeError:
                logger.warning(f"Ignoring unparseable custom_weights: {text!r}")
                return None
        if not isinstance(v, (list, tuple)):
            logger.warning(f"Ignoring custom_weights of type {type(v).__name__}")
            return None
        weights = []
        for item in v:
            number = _loose_number(item, float, "custom weight")
            if number is None:
                return None
            weights.append(number)
        return weights

    @field_validator("apply_fuzzing", mode="before")
    @classmethod
    def coerce_fuzzing(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.strip().lower() in _TRUE_STRINGS
        return False

    def fsrs_config(self) -> FSRSConfig:
        """The normalized scheduler config described by these settings."""
        return normalize_config(
            {
                "version": self.fsrs_version,
                "requested_retention": self.requested_retention,
                "custom_weights": self.custom_weights,
                "again_min_interval_days": self.again_min_interval_days,
                "max_interval_days": self.max_interval_days,
                "apply_fuzzing": self.apply_fuzzing,
            }
        )


def _config_files() -> list[Path]:
    # Resolved at call time so a patched HOME is honoured.
    return [
        Path.home() / ".config/studytrack/config.toml",
        Path.home() / ".studytrack.toml",
    ]


def _loose_number(value: Any, kind: type, name: str) -> Any:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid {name}: {value!r}")
        return None
    if number != number or number in (float("inf"), float("-inf")):
        logger.warning(f"Ignoring non-finite {name}: {value!r}")
        return None
    return kind(number)


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/studytrack/config.toml (if exists)
    3. Environment variables (STUDYTRACK_*)
    4. cli_overrides (passed from Typer)
    """
    # Typer passes None for options the user did not set.
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
