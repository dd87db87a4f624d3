"""Test fixtures for the recap pipeline and API.

Provides:
- In-memory doubles for the conversation and speech services
- A RecapPipeline wired to those doubles with millisecond poll bounds
- FastAPI test app with the pipeline preinstalled on app.state
- Async HTTP client for API testing
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.recap.main import create_app
from src.recap.pipeline.recap import RecapPipeline
from tests.fakes import FakeAssistantsClient, FakeSpeechClient, make_pipeline


@pytest.fixture
def fake_assistants() -> FakeAssistantsClient:
    return FakeAssistantsClient()


@pytest.fixture
def fake_speech() -> FakeSpeechClient:
    return FakeSpeechClient()


@pytest.fixture
def pipeline(fake_assistants, fake_speech) -> RecapPipeline:
    return make_pipeline(fake_assistants, fake_speech)


@pytest.fixture
def app(pipeline):
    """FastAPI app with the in-memory pipeline installed."""
    application = create_app()
    application.state.recap_pipeline = pipeline
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing the API."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
