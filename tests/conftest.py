"""Shared fixtures: fake Gemini clients, in-memory feed stores, and an API client."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from intelligent_recall import context as context_module
from intelligent_recall.main import app
from intelligent_recall.routers.common import get_client_factory, get_feed_store
from intelligent_recall.services.feed import FeedStore


class FakeGeminiClient:
    """Stands in for GeminiClient; records prompts and returns a canned answer."""

    def __init__(self, response: Optional[str] = None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    async def generate(self, prompt: str, *, response_schema=None) -> str:
        self.calls.append({"prompt": prompt, "response_schema": response_schema})
        if self.error is not None:
            raise self.error
        return self.response

    async def aclose(self) -> None:
        self.closed = True


class CountingFactory:
    def __init__(self, client: FakeGeminiClient):
        self.client = client
        self.created = 0

    def __call__(self) -> FakeGeminiClient:
        self.created += 1
        return self.client


class StaticFeedStore(FeedStore):
    def __init__(self, rows: List[Dict[str, Any]]):
        self.rows = rows
        self.limits: List[int] = []

    def fetch_new(self, limit: int) -> List[Dict[str, Any]]:
        self.limits.append(limit)
        return list(self.rows)[:limit]


class FailingFeedStore(FeedStore):
    def fetch_new(self, limit: int) -> List[Dict[str, Any]]:
        raise ConnectionError("row store unreachable")


@pytest.fixture(autouse=True)
def _fresh_sessions():
    context_module._contexts.clear()
    yield
    context_module._contexts.clear()


@pytest.fixture
def fake_gemini():
    def _make(response: Optional[str] = None, error: Optional[Exception] = None) -> CountingFactory:
        return CountingFactory(FakeGeminiClient(response=response, error=error))

    return _make


@pytest.fixture
def api():
    """TestClient plus helpers to swap the feed store and Gemini factory."""

    class _Api:
        def __init__(self) -> None:
            self.client = TestClient(app)
            self.use_feed(FailingFeedStore())

        def use_feed(self, store: FeedStore) -> None:
            app.dependency_overrides[get_feed_store] = lambda: store

        def use_gemini(self, factory) -> None:
            app.dependency_overrides[get_client_factory] = lambda: factory

    yield _Api()
    app.dependency_overrides.clear()
