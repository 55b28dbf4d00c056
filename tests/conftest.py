"""
Shared test configuration.
It asserts expected behavior and guards against regressions in the corresponding component.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))


@pytest.fixture(autouse=True)
def base_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure environment variables point at a local test store during tests."""

    defaults = {
        "ENV": "test",
        "LOG_LEVEL": "INFO",
        "DB_HOST": "localhost",
        "DB_PORT": "5432",
        "DB_USER": "postgres",
        "DB_PASSWORD": "password123",
        "DB_NAME": "proyecto_db",
        "API_HOST": "0.0.0.0",
        "API_PORT": "3000",
        "API_DB_CONNECT_ATTEMPTS": "1",
        "API_DB_CONNECT_DELAY_SECONDS": "0",
    }

    for key, value in defaults.items():
        if os.getenv(key) is None:
            monkeypatch.setenv(key, value)
