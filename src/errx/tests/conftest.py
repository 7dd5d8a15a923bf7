"""Shared fixtures: every test starts from default settings and logging."""

import pytest

from errx.config import clear_settings_cache
from errx.observability import reset_logging


@pytest.fixture(autouse=True)
def clean_state() -> object:
    """Reset cached settings and log configuration around each test."""
    clear_settings_cache()
    reset_logging()
    yield
    clear_settings_cache()
    reset_logging()
