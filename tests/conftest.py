"""Shared fixtures: in-memory storage, config cache reset and submission builders."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import date
from typing import Any

import pytest

from helpers import MemoryStorage, reading
from medis.config import get_config
from medis.domain.models import RecordSubmission


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Ensure get_config cache is cleared before and after each test."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def make_submission() -> Callable[..., RecordSubmission]:
    """Build a valid submission; keyword overrides apply to identity fields or vitals."""

    def _make(**overrides: Any) -> RecordSubmission:
        vitals = {
            k: overrides.pop(k)
            for k in ("systolic", "diastolic", "pulse", "spo2", "temperature")
            if k in overrides
        }
        fields: dict[str, Any] = {
            "name": "Budi Santoso",
            "badge_number": "BN-1001",
            "age": 34,
            "position": "Operator",
            "supervisor": "Rina",
            "department": "Production",
            "check_date": date(2024, 1, 3),
            "reading": reading(**vitals),
            "note": "",
        }
        fields.update(overrides)
        return RecordSubmission(**fields)

    return _make
