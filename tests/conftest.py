#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pytest fixtures for WikiMath tests.
The default engine is client-side, so no node.js or MathJax service is needed.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from wikimath.core.config import Settings
from wikimath.main import create_app
from wikimath.services.context import RenderContext
from wikimath.services.messages import MessageCatalog
from wikimath.services.namespaces import Page
from wikimath.services.pipeline import MathPipeline, get_pipeline
from wikimath.services.titles import TitleResolver


# -----------------------------------------------------------------------------

BASE_URL = "https://wiki.example.org"


# -----------------------------------------------------------------------------

@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, environment="testing", base_url=BASE_URL)


@pytest.fixture
def messages() -> MessageCatalog:
    return MessageCatalog("en")


@pytest.fixture
def resolver(settings) -> TitleResolver:
    return TitleResolver(settings.base_url, settings.article_path)


@pytest.fixture
def ctx() -> RenderContext:
    return RenderContext()


@pytest.fixture
def page() -> Page:
    return Page(title="Test page")


@pytest.fixture
def pipeline(settings, messages, resolver) -> MathPipeline:
    return MathPipeline(settings, messages, resolver)


@pytest_asyncio.fixture(scope="function")
async def client(pipeline):
    """HTTP test client wired to the test pipeline."""
    app = create_app()
    app.dependency_overrides[get_pipeline] = lambda: pipeline

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# -----------------------------------------------------------------------------
