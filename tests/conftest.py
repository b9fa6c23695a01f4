"""Test configuration."""

from typing import List

from pytest import Config

from geofallback.core.logging import configure_logging

pytest_plugins: List[str] = [
    "tests.fixtures.geocoding",
]


def pytest_configure(config: Config) -> None:
    """Configure pytest.

    Args:
        config: Pytest configuration object
    """
    # Configure logging for test environment
    configure_logging(testing=True, level="DEBUG", json_logs=False)
