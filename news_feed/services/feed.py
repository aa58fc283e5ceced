"""Categorized feed view.

A feed shows every document tagged with one category. Each activation issues
exactly one cache-bypassing query; only the most recently issued query may
change the feed's state.
"""

from typing import List, Optional

from news_feed.models.schemas import RenderRecord
from news_feed.services.assets import AssetURLResolver
from news_feed.services.protocols import QueryClient
from news_feed.services.queries import category_feed_query
from news_feed.services.references import ReferenceResolver
from news_feed.services.render import build_render_record
from news_feed.services.state import FeedState, Loaded, View


class CategorizedFeed(View):
    """Feed of documents carrying a category tag."""

    def __init__(
        self,
        client: QueryClient,
        assets: AssetURLResolver,
        category: str,
        document_type: str = "news",
        references: Optional[ReferenceResolver] = None,
    ):
        super().__init__()
        self.client = client
        self.assets = assets
        self.category = category
        self.document_type = document_type
        self.references = references or ReferenceResolver()

    async def activate(self, category: Optional[str] = None) -> FeedState:
        """Fetch the feed, optionally switching to another category first.

        Failures end in a Failed state; only cancellation propagates.

        Args:
            category: New category tag, or None to keep the current one

        Returns:
            The feed state after this fetch completed (which may belong to a
            newer fetch if this one was superseded)
        """
        if category is not None:
            self.category = category

        expression, params = category_feed_query(self.document_type, self.category, self.references)
        await self._run(lambda: self.client.fetch(expression, params, bypass_cache=True))
        return self.state

    async def retry(self) -> FeedState:
        """Fetch the current category again."""
        return await self.activate()

    @property
    def records(self) -> Optional[List[RenderRecord]]:
        """Render records in store order, or None unless the feed is loaded."""
        if not isinstance(self.state, Loaded):
            return None
        return [build_render_record(doc, self.assets) for doc in self.state.documents]
