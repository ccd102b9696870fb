"""
Pytest configuration for fusion-model.

Provides fixtures for:
- Resetting the cached settings around every test
- A parsed user document
- Restoring root logging after tests that reconfigure it
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Generator

import pytest
from sample_models import USER_DOCUMENT

from fusion_model.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """
    Drop the cached Settings so environment overrides apply per test.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def user_document() -> Dict[str, Any]:
    """
    A fresh copy of the sample user document.
    """
    return copy.deepcopy(USER_DOCUMENT)


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """
    Snapshot root logger handlers/level and restore them after the test.
    """
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
