"""Document query client.

This module executes read-only GROQ queries against the content store's HTTP
query API and decodes the results into Document objects.
"""

import json
from typing import Any, Dict, List, Optional

import httpx

from news_feed.config import ServerConfig
from news_feed.exceptions import QueryError, StoreUnavailable
from news_feed.logging_config import get_logger
from news_feed.models.schemas import Document
from news_feed.services.references import ReferenceResolver
from news_feed.storage.cache import QueryCache, make_cache_key

# Longer GET URLs are rejected by the query API; those queries are POSTed
MAX_GET_URL_LENGTH = 11264

USER_AGENT = "NewsFeed/1.0 (Content Query Client)"


class DocumentQueryClient:
    """Client for one project/dataset of the content store.

    Instances are constructed explicitly and passed to each feed or view,
    so tests can substitute any object with a compatible ``fetch``.
    """

    def __init__(
        self,
        project_id: str,
        dataset: str,
        api_version: str = "2024-01-01",
        use_cdn: bool = True,
        token: str = "",
        timeout: float = 30.0,
        cache: Optional[QueryCache] = None,
        references: Optional[ReferenceResolver] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.project_id = project_id
        self.dataset = dataset
        self.api_version = api_version.lstrip("v")
        self.use_cdn = use_cdn
        self.token = token
        self.timeout = timeout
        self.cache = cache if cache is not None else QueryCache()
        self.references = references or ReferenceResolver()
        self._transport = transport

    @classmethod
    def from_config(cls, config: ServerConfig, **kwargs) -> "DocumentQueryClient":
        return cls(
            project_id=config.project_id,
            dataset=config.dataset,
            api_version=config.api_version,
            use_cdn=config.use_cdn,
            token=config.token,
            timeout=config.request_timeout,
            cache=QueryCache(ttl=config.cache_ttl),
            **kwargs,
        )

    def query_url(self, bypass_cache: bool = False) -> str:
        """Endpoint URL; the CDN host is only used for cacheable reads."""
        host = "apicdn.sanity.io" if self.use_cdn and not bypass_cache else "api.sanity.io"
        return f"https://{self.project_id}.{host}/v{self.api_version}/data/query/{self.dataset}"

    def _headers(self) -> Dict[str, str]:
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def query(
        self,
        expression: str,
        params: Optional[Dict[str, Any]] = None,
        bypass_cache: bool = False,
    ) -> Any:
        """Execute a query and return the raw ``result`` payload.

        Args:
            expression: GROQ expression
            params: Query parameters, referenced as $name in the expression
            bypass_cache: Skip the CDN host

        Returns:
            The undecoded result value

        Raises:
            StoreUnavailable: If the store cannot be reached or fails
            QueryError: If the store rejects the query
        """
        logger = get_logger(__name__)
        params = params or {}
        url = self.query_url(bypass_cache)

        query_params = {"query": expression, "returnQuery": "false"}
        for name, value in params.items():
            query_params[f"${name}"] = json.dumps(value)

        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers=self._headers(),
            transport=self._transport,
        ) as client:
            try:
                if len(str(httpx.URL(url, params=query_params))) <= MAX_GET_URL_LENGTH:
                    response = await client.get(url, params=query_params)
                else:
                    logger.debug("Query too long for GET, sending as POST")
                    response = await client.post(url, json={"query": expression, "params": params})
            except httpx.HTTPError as e:
                logger.warning(f"Content store unreachable: {e}")
                raise StoreUnavailable(f"Content store unreachable: {e}") from e

        status = response.status_code
        if status == 429 or status >= 500:
            raise StoreUnavailable(f"Content store returned HTTP {status}")
        if status >= 400:
            raise QueryError(f"Query rejected (HTTP {status}): {_error_description(response)}")

        try:
            body = response.json()
        except ValueError as e:
            raise StoreUnavailable(f"Content store returned a non-JSON body: {e}") from e

        if not isinstance(body, dict) or "result" not in body:
            raise QueryError("Query response has no 'result'")

        return body["result"]

    async def fetch(
        self,
        expression: str,
        params: Optional[Dict[str, Any]] = None,
        bypass_cache: bool = False,
    ) -> List[Document]:
        """Execute a query and decode the result into documents.

        The returned order is the store's order; nothing is sorted here.

        Args:
            expression: GROQ expression selecting documents
            params: Query parameters
            bypass_cache: Never return a previously cached result

        Returns:
            List of Document objects

        Raises:
            StoreUnavailable: If the store cannot be reached or fails
            QueryError: If the query is rejected or the result is malformed
        """
        logger = get_logger(__name__)
        key = make_cache_key(expression, params)

        if not bypass_cache:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug(f"Cache hit for query: {expression}")
                return cached

        result = await self.query(expression, params, bypass_cache=bypass_cache)

        if result is None:
            result = []
        elif isinstance(result, dict):
            result = [result]
        if not isinstance(result, list):
            raise QueryError(f"Expected a list of documents, got {type(result).__name__}")

        documents = [self._decode(raw) for raw in result]
        self.cache.set(key, documents)

        logger.info(f"Fetched {len(documents)} documents")
        return documents

    def _decode(self, raw: Any) -> Document:
        author = self.references.author(raw) if isinstance(raw, dict) else None
        return Document.from_store(raw, author=author)


def _error_description(response: Any) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or "unknown error"

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error.get("description") or error.get("message") or json.dumps(error)
    if isinstance(error, str):
        return error
    return "unknown error"
