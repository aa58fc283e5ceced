"""
Service Protocol Definitions

typing.Protocol interfaces for the collaborators injected into feeds and
views, so tests can pass in-memory fakes instead of a real store client.
"""

from typing import Any, Dict, List, Optional, Protocol

from news_feed.models.schemas import Document


class QueryClient(Protocol):
    """Anything that can run a document query."""

    async def fetch(
        self,
        expression: str,
        params: Optional[Dict[str, Any]] = None,
        bypass_cache: bool = False,
    ) -> List[Document]:
        """Execute a query and return decoded documents in store order.

        Args:
            expression: Query expression
            params: Query parameters
            bypass_cache: Never return a previously cached result

        Returns:
            List of Document objects.
        """
        ...
