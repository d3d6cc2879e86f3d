"""Conftest for all pytest configuration - shared fixtures and global state resets."""

import pytest

from eventlite import EventManager
from eventlite.plugins.manager import _initialize_plugin_system
from eventlite.settings import EventliteSettings
from eventlite.settings import set_global_settings


@pytest.fixture(autouse=True)
def reset_global_state():
    """Restore default settings and a fresh global plugin manager around every test."""
    yield
    set_global_settings(EventliteSettings())
    _initialize_plugin_system()


@pytest.fixture
def manager() -> EventManager:
    return EventManager()
