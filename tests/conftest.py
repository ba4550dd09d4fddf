"""
Pytest configuration and shared fixtures.
"""
import pytest

from config.settings import Settings, TimeoutConfig
from tests.fakes import BASE_URL, FakeBrowserFactory


@pytest.fixture
def test_settings():
    """Settings pointing at the fake platform with short waits."""
    settings = Settings()
    settings.platform.base_url = BASE_URL
    settings.timeouts = TimeoutConfig(
        login_response=100,
        landing_navigation=200,
        landing_grace=50,
        settings_navigation=100,
        save_response=100,
        settle=50,
        settle_floor=20,
    )
    return settings


@pytest.fixture
def browser_factory():
    """Provide a browser factory for the happy path."""
    return FakeBrowserFactory()
