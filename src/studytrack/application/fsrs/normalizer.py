"""
Configuration normalizer.

Turns whatever was persisted or typed by the user into a valid `FSRSConfig`.
It never raises: every malformed field falls back to the nearest valid value
so a corrupted config can never block scheduling.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from typing import Any

from studytrack.domain.constants import (
    DEFAULT_AGAIN_MIN_INTERVAL_DAYS,
    DEFAULT_MAX_INTERVAL_DAYS,
    DEFAULT_REQUESTED_RETENTION,
    MAX_REQUESTED_RETENTION,
    MIN_INTERVAL_DAYS,
    MIN_REQUESTED_RETENTION,
)
from studytrack.domain.fsrs.models import FSRSConfig, FSRSVersion

logger = logging.getLogger(__name__)

# snake_case field -> legacy camelCase key used by older saved settings
_FIELD_ALIASES = {
    "version": "version",
    "requested_retention": "requestedRetention",
    "custom_weights": "customWeights",
    "again_min_interval_days": "againMinIntervalDays",
    "max_interval_days": "maxIntervalDays",
    "apply_fuzzing": "applyFuzzing",
}

_MISSING = object()


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def _read_field(raw: Any, name: str) -> Any:
    alias = _FIELD_ALIASES[name]
    if isinstance(raw, Mapping):
        if name in raw:
            return raw[name]
        return raw.get(alias, _MISSING)
    value = getattr(raw, name, _MISSING)
    if value is _MISSING:
        value = getattr(raw, alias, _MISSING)
    return value


def _as_real(value: Any) -> float | None:
    """Return `value` as a finite float, or None when it is not one."""
    if value is _MISSING or value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return value


def normalize_retention(value: Any) -> float:
    retention = _as_real(value)
    if retention is None:
        if value is not _MISSING and value is not None:
            logger.debug(f"Ignoring invalid requested retention {value!r}")
        return DEFAULT_REQUESTED_RETENTION
    return _clamp(retention, MIN_REQUESTED_RETENTION, MAX_REQUESTED_RETENTION)


def normalize_custom_weights(value: Any, version: FSRSVersion) -> tuple[float, ...] | None:
    """
    Accept `value` only if it is a numeric sequence of the version's arity
    with every entry finite.
    """
    if value is _MISSING or value is None:
        return None
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        logger.debug(f"Ignoring custom weights of type {type(value).__name__}")
        return None
    if len(value) != version.arity:
        logger.debug(
            f"Ignoring custom weights: {version.label} expects {version.arity} values, "
            f"got {len(value)}"
        )
        return None
    weights = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, (int, float)) or not math.isfinite(item):
            logger.debug(f"Ignoring custom weights: non-finite entry {item!r}")
            return None
        weights.append(float(item))
    return tuple(weights)


def _normalize_days(value: Any, default: int, low: int, high: int) -> int:
    days = _as_real(value)
    if days is None:
        return default
    return int(_clamp(math.floor(days), low, high))


def normalize_config(raw: Any = None) -> FSRSConfig:
    """
    Build a valid `FSRSConfig` from `raw`.

    Args:
        raw: None, an FSRSConfig, a mapping (snake_case or legacy camelCase
            keys) or any object exposing those attributes. Missing fields
            take their defaults.

    Returns:
        A config whose retention, weights and interval bounds are in range.
    """
    if raw is None:
        return FSRSConfig()

    version = FSRSVersion.parse(_read_field(raw, "version"))
    requested_retention = normalize_retention(_read_field(raw, "requested_retention"))
    custom_weights = normalize_custom_weights(_read_field(raw, "custom_weights"), version)

    max_interval_days = _normalize_days(
        _read_field(raw, "max_interval_days"),
        DEFAULT_MAX_INTERVAL_DAYS,
        MIN_INTERVAL_DAYS,
        DEFAULT_MAX_INTERVAL_DAYS,
    )
    again_min_interval_days = _normalize_days(
        _read_field(raw, "again_min_interval_days"),
        DEFAULT_AGAIN_MIN_INTERVAL_DAYS,
        MIN_INTERVAL_DAYS,
        max_interval_days,
    )

    apply_fuzzing = _read_field(raw, "apply_fuzzing")
    if not isinstance(apply_fuzzing, bool):
        apply_fuzzing = False

    return FSRSConfig(
        version=version,
        requested_retention=requested_retention,
        custom_weights=custom_weights,
        again_min_interval_days=again_min_interval_days,
        max_interval_days=max_interval_days,
        apply_fuzzing=apply_fuzzing,
    )
