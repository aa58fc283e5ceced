"""Shared test fixtures for news_feed.

Provides test configuration, raw store documents and two fake query clients:
an in-memory store that evaluates the feed and detail queries, and a
controllable client whose responses are resolved by the test to simulate
requests racing each other.
"""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from news_feed.config import ServerConfig
from news_feed.exceptions import StoreUnavailable
from news_feed.models.schemas import Document
from news_feed.services.assets import AssetURLResolver
from news_feed.services.references import ReferenceResolver


@pytest.fixture
def anyio_backend():
    return "asyncio"


def raw_document(
    doc_id: str,
    title: str = "",
    category: Optional[List[str]] = None,
    text: Optional[str] = "Body text",
    author: Any = "default",
    poster: Any = "default",
    publishtime: Optional[str] = "2024-01-15T10:30:00.000Z",
) -> Dict[str, Any]:
    """Build a raw news document shaped like a query API result."""
    content = []
    if text is not None:
        content = [{
            "_type": "block",
            "style": "normal",
            "children": [{"_type": "span", "text": text, "marks": []}],
        }]

    return {
        "_id": doc_id,
        "title": title or f"Title {doc_id}",
        "content": content,
        "publishtime": publishtime,
        "category": category if category is not None else [],
        "poster": {
            "_type": "image",
            "asset": {"_ref": "image-Tb9Ew8CXIwaY6R1kjMvI0uRR-2000x3000-jpg", "_type": "reference"},
        } if poster == "default" else poster,
        "author": {"name": "Jane Reporter", "email": "jane@example.com"} if author == "default" else author,
    }


class MemoryStoreClient:
    """Query client fake backed by a list of raw documents.

    Evaluates the two queries the views issue: category membership and id
    lookup. Results keep the list order, like the store's natural order.
    """

    def __init__(self, documents: List[Dict[str, Any]], unavailable: bool = False):
        self.documents = documents
        self.unavailable = unavailable
        self.references = ReferenceResolver()
        self.calls: List[Dict[str, Any]] = []

    async def fetch(self, expression, params=None, bypass_cache=False):
        params = params or {}
        self.calls.append({"expression": expression, "params": params, "bypass_cache": bypass_cache})

        if self.unavailable:
            raise StoreUnavailable("Content store unreachable: connection refused")

        matches = []
        for raw in self.documents:
            if "category" in params and params["category"] not in (raw.get("category") or []):
                continue
            if "id" in params and raw.get("_id") != params["id"]:
                continue
            matches.append(Document.from_store(raw, author=self.references.author(raw)))
        return matches


class PendingCall:
    def __init__(self, expression, params, bypass_cache):
        self.expression = expression
        self.params = params
        self.bypass_cache = bypass_cache
        self.future = asyncio.get_running_loop().create_future()


class ControlledClient:
    """Query client fake whose calls stay pending until the test resolves them."""

    def __init__(self):
        self.calls: List[PendingCall] = []

    async def fetch(self, expression, params=None, bypass_cache=False):
        call = PendingCall(expression, params or {}, bypass_cache)
        self.calls.append(call)
        return await call.future

    async def wait_for_calls(self, count: int) -> None:
        while len(self.calls) < count:
            await asyncio.sleep(0)


@pytest.fixture
def config():
    """Server configuration with test values."""
    return ServerConfig(
        project_id="abc123",
        dataset="production",
        placeholder_image_url="https://example.com/placeholder.png",
    )


@pytest.fixture
def assets(config):
    return AssetURLResolver.from_config(config)


@pytest.fixture
def news_documents():
    """Three documents tagged headline, sports, and both."""
    return [
        raw_document("news-1", title="Election results", category=["headline"]),
        raw_document("news-2", title="Cup final", category=["sports"]),
        raw_document("news-3", title="Star striker retires", category=["headline", "sports"]),
    ]


@pytest.fixture
def memory_client(news_documents):
    return MemoryStoreClient(news_documents)
