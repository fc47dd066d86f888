"""Pytest configuration and shared fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.helpers import make_provider


@pytest.fixture(scope="session")
def project_root():
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def configs_dir(project_root):
    """Get configs directory."""
    return project_root / "configs"


@pytest.fixture
def on_error() -> MagicMock:
    """Error callback spy."""
    return MagicMock()


@pytest.fixture
def provider() -> MagicMock:
    """Browser double handing out a fresh page on every new_page() call."""
    return make_provider()


@pytest.fixture
def no_sleep(monkeypatch) -> AsyncMock:
    """Replace the retry sleep with a recording no-op."""
    fake = AsyncMock()
    monkeypatch.setattr("graceful_page.core.policies.sleep_ms", fake)
    return fake
