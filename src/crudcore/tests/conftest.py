"""
Core pytest configuration for the entire test suite.

Nothing here talks to a real MongoDB: collections, repositories and services are
`unittest.mock` doubles, and HTTP tests drive the app through Starlette's
TestClient.

Domain-specific fixtures live in:
- tests/test_fixtures/repository_fixtures.py
- tests/test_fixtures/service_fixtures.py
- tests/test_fixtures/api_fixtures.py

They are imported at the bottom of this module so every test can use them
without importing.
"""

import logging

# -------------------------------
# Early logging tuning
# -------------------------------
# Silence chatty third-party loggers before they are imported by the fixtures.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "pymongo",
    "asyncio",
    "httpx",
    "urllib3",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest  # noqa: E402

from crudcore.config.settings import Settings  # noqa: E402
from crudcore.core.logging.builder import setup_logging  # noqa: E402


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Settings for the test session: console logging only, text format."""
    return Settings(
        ENV="testing",
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="text",
        LOG_TO_STDOUT=True,
        MONGO_URI="mongodb://localhost:27017",
        MONGO_DB="crudcore_test",
    )


@pytest.fixture(scope="session", autouse=True)
def configure_logging(test_settings: Settings):
    """
    Install the application's dictConfig once for the whole session so formatters
    and filters used by the app are active in tests too.
    """
    setup_logging(test_settings)
    yield


# Shared fixtures
from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    make_item,
    mock_collection,
    repository,
    sample_item,
    sample_items,
)
from .test_fixtures.service_fixtures import (  # noqa: E402,F401
    mock_logger,
    mock_repository,
    service,
)
from .test_fixtures.api_fixtures import (  # noqa: E402,F401
    asgi_client,
    build_test_app,
    controller,
    mock_service,
    starlette_client,
)
