"""
pileshots Test Configuration and Fixtures
========================================

Shared pytest configuration for the screenshot pipeline test suite:
- fast, isolated ScreenshotConfig pointing at a temporary directory
- scripted fake browser and sleep recorder
- directory-based test markers
"""

import pytest

from pileshots.config.config import ScreenshotConfig
from tests.fakes import FakeBrowser, SleepRecorder


@pytest.fixture(scope="function")
def output_dir(tmp_path):
    """Temporary screenshot output directory (not created up front)"""
    return tmp_path / "public" / "assets"


@pytest.fixture(scope="function")
def screenshot_config(output_dir):
    """Default settings writing into the temporary output directory"""
    return ScreenshotConfig(output_dir=output_dir)


@pytest.fixture(scope="function")
def fake_browser():
    return FakeBrowser()


@pytest.fixture(scope="function")
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture(scope="function")
def clean_env(monkeypatch):
    """Remove deployment signals that would change browser args"""
    for name in ("VERCEL", "NETLIFY", "CI"):
        monkeypatch.delenv(name, raising=False)


# Pytest configuration
def pytest_configure(config):
    """
    Pytest configuration hook.
    Sets up test markers.
    """
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
