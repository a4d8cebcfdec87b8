"""
Pytest configuration and fixtures for thinkaroo tests.
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from thinkaroo.config import Settings, clear_settings_cache
from thinkaroo.prompts import clear_prompt_cache
from thinkaroo.storage import DiskObjectStore, MemoryObjectStore
from thinkaroo.types import ReadingContents


class FakeClock:
    """Settable clock for driving the cache across hour boundaries."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def clock() -> FakeClock:
    """Clock fixed at 2025-10-11 14:30 UTC."""
    return FakeClock(datetime(2025, 10, 11, 14, 30, tzinfo=timezone.utc))


@pytest.fixture
def memory_store() -> MemoryObjectStore:
    return MemoryObjectStore()


@pytest.fixture
def disk_store(temp_dir: Path) -> DiskObjectStore:
    return DiskObjectStore(temp_dir / "storage")


@pytest.fixture
def sample_reading() -> ReadingContents:
    return ReadingContents(title="T", story="S", questions=["Q1"])


@pytest.fixture
def mock_env_vars(temp_dir: Path) -> Generator[dict[str, str], None, None]:
    """Provide mock environment variables for testing."""
    env_vars = {
        "STORAGE_BACKEND": "memory",
        "KEYVALUE_BACKEND": "memory",
        "S3_BUCKET": "test-bucket",
        "DYNAMODB_TABLE": "test-table",
        "DISK_STORAGE_DIR": str(temp_dir / "storage"),
        "CACHE_CAPACITY": "4",
        "OPENAI_API_KEY": "sk-test-fake-openai-key-1234567890",
        "LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars


@pytest.fixture
def mock_settings(mock_env_vars: dict[str, str]) -> Generator[Settings, None, None]:
    """Provide a Settings instance with mock configuration."""
    from thinkaroo.config import get_settings

    clear_settings_cache()
    yield get_settings()
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_caches() -> Generator[None, None, None]:
    """Automatically reset settings and prompt caches around each test."""
    clear_settings_cache()
    clear_prompt_cache()
    yield
    clear_settings_cache()
    clear_prompt_cache()
