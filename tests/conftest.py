"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - fake_api: In-memory Assistants API behind httpx.MockTransport
    - config: Assistant config with a test key and no poll delay
    - disabled_config: Assistant config without an API key
    - session: Started AppSession wired to fake_api
    - disabled_session: Started AppSession with AI features off
    - async_client: HTTPX client for API testing against ``session``
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from fraudchat.agent.config import AssistantConfig
from fraudchat.api.app import create_app
from fraudchat.session import AppSession
from tests.fake_openai import BASE_URL, FakeAssistantsAPI


@pytest.fixture
def fake_api() -> FakeAssistantsAPI:
    return FakeAssistantsAPI()


@pytest.fixture
def config() -> AssistantConfig:
    """Config that talks to the fake API without waiting between polls."""
    return AssistantConfig(
        api_key="sk-test-key",
        base_url=BASE_URL,
        model_name="gpt-4o",
        temperature=0.2,
        poll_max_attempts=30,
        poll_interval=0.0,
    )


@pytest.fixture
def disabled_config() -> AssistantConfig:
    return AssistantConfig(api_key="", base_url=BASE_URL)


@pytest.fixture
async def session(
    config: AssistantConfig, fake_api: FakeAssistantsAPI
) -> AsyncGenerator[AppSession]:
    """Started session whose assistant is backed by the fake API.

    Yields:
        AppSession seeded with the two demo claims.
    """
    app_session = AppSession(config=config, transport=fake_api.transport)
    await app_session.start()
    yield app_session
    await app_session.close()


@pytest.fixture
async def disabled_session(
    disabled_config: AssistantConfig,
) -> AsyncGenerator[AppSession]:
    app_session = AppSession(config=disabled_config)
    await app_session.start()
    yield app_session
    await app_session.close()


@pytest.fixture
async def async_client(session: AppSession) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=create_app(session))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def disabled_client(disabled_session: AppSession) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=create_app(disabled_session))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
