"""Pytest configuration and shared fixtures for okflow tests."""

import pytest

from okflow._config import reset_config
from okflow._logging import reset_logging


@pytest.fixture(autouse=True)
def clean_diagnostics():
    """Every test starts and ends with default configuration and logging."""
    reset_config()
    reset_logging()
    yield
    reset_config()
    reset_logging()


@pytest.fixture
def sample_ok():
    """Sample Ok value for testing."""
    from okflow import Ok

    return Ok(42)


@pytest.fixture
def sample_err():
    """Sample Err value for testing."""
    from okflow import Err

    return Err('zero_division')
