# supplier-reputation/tests/conftest.py
#
# Test bootstrap for pytest: ensure repository root is on sys.path so tests can import
# the `supplier_reputation` package without requiring PYTHONPATH to be set by the caller.
#
# Fixture Organization:
# - This file: Core fixtures (repo_root, settings, clock, log capture)
# - tests/mocks/: Fake signal sources with call counters
# - tests/utils/config_mocks.py: Settings and EngineConfig factories
#
from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import pytest
from loguru import logger


def _find_repo_root(start: Path | None = None) -> Path:
    """
    Walk upwards from `start` (defaults to this file's parent) until a likely
    repository root is found (pyproject.toml or .git). Falls back to one level
    up from this file.
    """
    current = start or Path(__file__).resolve().parent
    while True:
        for marker in ("pyproject.toml", ".git"):
            if (current / marker).exists():
                return current
        if current.parent == current:
            break
        current = current.parent
    return Path(__file__).resolve().parents[1]


_repo_root = _find_repo_root()
_repo_root_str = str(_repo_root)

if _repo_root_str not in sys.path:
    sys.path.insert(0, _repo_root_str)

# Configure test logging using loguru for consistency with application code
logger.remove()
logger.configure(extra={"stage": "-", "run_id": "-"})
logger.add(
    sys.stderr,
    level="INFO",
    format="{time:YYYY-MM-DD HH:mm:ss} {level} {name}: {message}",
)

from supplier_reputation.utils.logging_config import reset_warn_once_registry  # noqa: E402
from tests.utils.fixtures import FIXED_NOW  # noqa: E402


# Pytest Configuration
# ===================


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "fast: Fast unit tests that should complete in < 1 second",
    )
    config.addinivalue_line(
        "markers",
        "slow: Slow tests that may take > 1 second to complete",
    )
    config.addinivalue_line(
        "markers",
        "integration: Integration tests that touch a real DuckDB database",
    )
    config.addinivalue_line(
        "markers",
        "unit: Pure unit tests with no I/O",
    )


@pytest.fixture(scope="session")
def repo_root() -> Path:
    return _repo_root


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock(fixed_now):
    return lambda: fixed_now


@pytest.fixture(autouse=True)
def _fresh_warn_once_registry():
    """Every test starts with no once-per-process warnings recorded."""
    reset_warn_once_registry()
    yield
    reset_warn_once_registry()


@pytest.fixture
def loguru_messages():
    """Capture loguru records emitted during the test.

    Yields a list of dicts with `level`, `message` and `extra`.
    """
    records: list[dict] = []

    def sink(message):
        record = message.record
        records.append(
            {
                "level": record["level"].name,
                "message": record["message"],
                "extra": dict(record["extra"]),
            }
        )

    handler_id = logger.add(sink, level="DEBUG")
    yield records
    logger.remove(handler_id)
