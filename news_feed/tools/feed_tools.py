"""News feed MCP tools.

This module provides MCP tools that expose feed and article views to a
presentation layer. Each call mounts a fresh view, activates it once and
returns its state together with render-ready records.

NOTE: Never use Optional parameters in MCP tools - they break MCP clients.
Use empty string "" for optional strings and 0 for optional integers.
"""

from typing import Any, Callable, Dict, List

from mcp.server.fastmcp import Context

from news_feed.config import ServerConfig
from news_feed.logging_config import get_logger
from news_feed.services.assets import AssetURLResolver
from news_feed.services.detail import DetailView
from news_feed.services.feed import CategorizedFeed
from news_feed.services.protocols import QueryClient
from news_feed.services.state import Failed, FeedState


def _failure(state: FeedState) -> Dict[str, Any]:
    error = state.error if isinstance(state, Failed) else None
    return {
        "success": False,
        "state": state.tag,
        "error": str(error) if error else "Request was superseded",
        "error_type": type(error).__name__ if error else "Superseded",
        "retryable": state.retryable if isinstance(state, Failed) else True,
    }


def build_feed_tools(
    client: QueryClient,
    assets: AssetURLResolver,
    config: ServerConfig,
) -> List[Callable[..., Any]]:
    """Create the tool functions bound to one client and asset resolver.

    Args:
        client: Query client shared by every view the tools mount
        assets: Asset URL resolver
        config: Server configuration (sections, document type)

    Returns:
        List of async tool functions, ready for registration
    """

    async def list_sections(ctx: Context = None) -> Dict[str, Any]:
        """List the news sections available as feeds.

        Args:
            ctx: MCP Context object (injected automatically)

        Returns:
            Dictionary with:
            - success: bool
            - count: number of sections
            - sections: list of objects with slug, title, category
        """
        logger = get_logger(__name__)
        logger.info("list_sections called")

        return {
            "success": True,
            "count": len(config.sections),
            "sections": [
                {"slug": s.slug, "title": s.title, "category": s.category}
                for s in config.sections
            ],
        }

    async def get_feed(category: str, ctx: Context = None) -> Dict[str, Any]:
        """Get the news documents tagged with a category.

        A document matches when the tag appears anywhere in its category list,
        so documents with several tags show up in each of their feeds. Results
        are always read fresh from the content store and returned in store
        order.

        Args:
            category: Category tag (e.g. "headline", "sports") or a section slug
            ctx: MCP Context object (injected automatically)

        Returns:
            Dictionary with:
            - success: bool
            - state: "loaded" or "failed"
            - category: the category tag that was queried
            - count: number of records
            - records: list of objects with id, title, first_body_text,
              poster_url, publish_date, author_name, categories
            - error, error_type, retryable: set if success is False
        """
        logger = get_logger(__name__)
        logger.info(f"get_feed called: category={category}")

        section = next((s for s in config.sections if s.slug == category), None)
        tag = section.category if section else category

        feed = CategorizedFeed(client, assets, tag, document_type=config.document_type)
        state = await feed.activate()

        records = feed.records
        if records is None:
            return dict(_failure(state), category=tag)

        return {
            "success": True,
            "state": state.tag,
            "category": tag,
            "count": len(records),
            "records": [r.to_dict() for r in records],
        }

    async def get_article(article_id: str, ctx: Context = None) -> Dict[str, Any]:
        """Get the full form of one news document.

        Args:
            article_id: Document id (the "id" field of a feed record)
            ctx: MCP Context object (injected automatically)

        Returns:
            Dictionary with:
            - success: bool
            - state: "loaded" or "failed"
            - article: object with the feed record fields plus author_email
              and body (list of paragraph texts)
            - error, error_type, retryable: set if success is False
        """
        logger = get_logger(__name__)
        logger.info(f"get_article called: article_id={article_id}")

        view = DetailView(client, assets, document_type=config.document_type)
        await view.load(article_id)

        record = view.record
        if record is None:
            return _failure(view.state)

        return {
            "success": True,
            "state": view.state.tag,
            "article": record.to_dict(),
        }

    # List of feed tools for registration
    return [
        list_sections,
        get_feed,
        get_article,
    ]
