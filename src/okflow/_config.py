"""Library configuration: OkflowConfig, environment detection and init()."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from okflow._logging import configure_logging

__all__ = [
    'OkflowConfig',
    'get_config',
    'init',
    'reset_config',
]

_TRUTHY = frozenset({'1', 'true', 'yes', 'on'})
_FALSY = frozenset({'0', 'false', 'no', 'off'})
_LEVELS = frozenset({'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'})


@dataclass(frozen=True)
class OkflowConfig:
    """Configuration for okflow diagnostics.

    None of these settings change composition semantics; they only affect
    what is logged and how faults describe the offending code.

    Attributes:
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = warnings only.
        json_logs: Emit JSON log lines instead of console output.
        capture_source: Recover lambda source text for fault messages.
    """

    log_level: str | None = None
    json_logs: bool = False
    capture_source: bool = True


_config: OkflowConfig | None = None


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean environment variable, warning on unknown values."""
    raw = os.environ.get(name, '').strip().lower()
    if not raw:
        return default
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    logging.warning("Unknown %s value '%s', defaulting to %s", name, raw, default)
    return default


def _detect_log_level() -> str | None:
    """Read OKFLOW_LOG_LEVEL, ignoring values that are not logging levels."""
    raw = os.environ.get('OKFLOW_LOG_LEVEL', '').strip().upper()
    if not raw:
        return None
    if raw not in _LEVELS:
        logging.warning("Unknown OKFLOW_LOG_LEVEL value '%s', ignoring", raw)
        return None
    return raw


def _detect_config() -> OkflowConfig:
    """Build a configuration from the environment.

    Variables:
    - OKFLOW_LOG_LEVEL: DEBUG/INFO/WARNING/ERROR/CRITICAL
    - OKFLOW_JSON_LOGS: boolean flag
    - OKFLOW_CAPTURE_SOURCE: boolean flag (default on)
    """
    return OkflowConfig(
        log_level=_detect_log_level(),
        json_logs=_env_flag('OKFLOW_JSON_LOGS', False),
        capture_source=_env_flag('OKFLOW_CAPTURE_SOURCE', True),
    )


def init(
    log_level: str | None = None,
    *,
    json_logs: bool | None = None,
    capture_source: bool | None = None,
) -> OkflowConfig:
    """Initialize okflow diagnostics.

    Arguments left as None fall back to the environment.

    Args:
        log_level: Logging level ("DEBUG", "INFO", etc.). None = warnings only.
        json_logs: Emit JSON log lines.
        capture_source: Recover lambda source text for fault messages.

    Returns:
        The OkflowConfig that was set.

    Example:
        ```python
        import okflow

        okflow.init(log_level='DEBUG', json_logs=False)
        ```
    """
    global _config  # noqa: PLW0603

    detected = _detect_config()
    _config = OkflowConfig(
        log_level=log_level.upper() if log_level is not None else detected.log_level,
        json_logs=detected.json_logs if json_logs is None else json_logs,
        capture_source=detected.capture_source if capture_source is None else capture_source,
    )

    if _config.log_level is not None:
        configure_logging(_config.log_level, json_output=_config.json_logs)

    return _config


def get_config() -> OkflowConfig:
    """Get the current configuration.

    Falls back to environment detection when ``init()`` has not been called,
    so the library works without any setup.
    """
    if _config is None:
        return _detect_config()
    return _config


def reset_config() -> None:
    """Forget the configuration set by ``init()``."""
    global _config  # noqa: PLW0603
    _config = None
