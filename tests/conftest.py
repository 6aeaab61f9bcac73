"""Shared fixtures for HabitQuest tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime
import logging
from typing import Any

import pytest

from habitquest.utils import dt_utils

from tests.helpers import FIXED_NOW, make_state


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Return a clock callable pinned to FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def state() -> dict[str, Any]:
    """Return an empty state snapshot."""
    return make_state()


@pytest.fixture(autouse=True)
def reset_default_timezone() -> Iterator[None]:
    """Restore dt_utils' default timezone after each test."""
    original = dt_utils.get_default_timezone()
    yield
    dt_utils.set_default_timezone(original)


@pytest.fixture
def habitquest_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Capture HabitQuest log records at DEBUG level."""
    caplog.set_level(logging.DEBUG, logger="habitquest")
    return caplog
