"""
Pytest configuration and shared fixtures for the jsonhandler test suite.
"""

import logging
import sys
from pathlib import Path

import pytest
from prometheus_client import CollectorRegistry

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from jsonhandler.config import Settings  # noqa: E402
from jsonhandler.metrics import HandlerMetrics  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    """Default policy, independent of the process environment."""
    return Settings()


@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> HandlerMetrics:
    return HandlerMetrics(registry)


@pytest.fixture
def handler_options(settings: Settings, metrics: HandlerMetrics) -> dict:
    """Keyword options isolating a handler from env and global metrics."""
    return {"settings": settings, "metrics": metrics}


@pytest.fixture
def error_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    caplog.set_level(logging.ERROR, logger="jsonhandler")
    return caplog
