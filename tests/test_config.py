"""Tests for configuration and environment detection."""

import os
from unittest.mock import patch

import pytest

from okflow import OkflowConfig, get_config, init
from okflow._config import _detect_config, reset_config
from okflow._logging import is_configured


class TestDetectConfig:
    """Tests for environment detection."""

    def test_defaults(self):
        """With no variables set the defaults apply."""
        with patch.dict(os.environ, {}, clear=True):
            assert _detect_config() == OkflowConfig()

    def test_log_level(self):
        """OKFLOW_LOG_LEVEL is read case-insensitively."""
        with patch.dict(os.environ, {'OKFLOW_LOG_LEVEL': 'debug'}, clear=True):
            assert _detect_config().log_level == 'DEBUG'

    def test_unknown_log_level_ignored(self):
        """Values that are not logging levels are ignored."""
        with patch.dict(os.environ, {'OKFLOW_LOG_LEVEL': 'chatty'}, clear=True):
            assert _detect_config().log_level is None

    def test_flags(self):
        """Boolean flags accept the usual spellings."""
        env = {'OKFLOW_JSON_LOGS': 'yes', 'OKFLOW_CAPTURE_SOURCE': 'off'}
        with patch.dict(os.environ, env, clear=True):
            config = _detect_config()
        assert config.json_logs is True
        assert config.capture_source is False

    def test_unknown_flag_uses_default(self):
        """An unrecognised flag value falls back to the default."""
        with patch.dict(os.environ, {'OKFLOW_CAPTURE_SOURCE': 'maybe'}, clear=True):
            assert _detect_config().capture_source is True


class TestInit:
    """Tests for init() and get_config()."""

    def test_get_config_without_init(self):
        """get_config falls back to the environment."""
        with patch.dict(os.environ, {'OKFLOW_JSON_LOGS': '1'}, clear=True):
            assert get_config().json_logs is True

    def test_init_overrides_environment(self):
        """Explicit arguments win over the environment."""
        with patch.dict(os.environ, {'OKFLOW_CAPTURE_SOURCE': '1'}, clear=True):
            config = init(capture_source=False)
        assert config.capture_source is False
        assert get_config() is config

    def test_init_uppercases_level_and_configures_logging(self):
        """A log level turns on structured logging."""
        config = init(log_level='info', json_logs=False)
        assert config.log_level == 'INFO'
        assert is_configured()

    def test_init_without_level_leaves_logging_alone(self):
        """No level means no logging setup."""
        with patch.dict(os.environ, {}, clear=True):
            init()
        assert not is_configured()

    def test_reset(self):
        """reset_config forgets the init() configuration."""
        init(capture_source=False)
        reset_config()
        with patch.dict(os.environ, {}, clear=True):
            assert get_config().capture_source is True

    def test_config_is_frozen(self):
        """OkflowConfig instances are immutable."""
        config = OkflowConfig()
        with pytest.raises(AttributeError):
            config.json_logs = True  # type: ignore[misc]
