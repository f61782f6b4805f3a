"""Shared fixtures for ghmir tests."""

from __future__ import annotations

import pytest

from logging_utils import Logger
from security import SecurityValidator


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Registered secrets and verbosity are class-level; isolate each test."""
    SecurityValidator.clear_secrets()
    Logger.set_verbose(False)
    yield
    SecurityValidator.clear_secrets()
    Logger.set_verbose(False)
