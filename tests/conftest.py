"""Pytest fixtures and configuration for the UserAssist decoder tests."""

import pytest

from userassist.config import Settings, get_settings


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Drop cached settings so env overrides in a test do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with defaults, independent of the environment."""
    return Settings(_env_file=None)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, mocked)")
    config.addinivalue_line("markers", "integration: Tests against real hive files")
    config.addinivalue_line("markers", "slow: Slow running tests")
