"""MCP tools for news_feed."""

from .feed_tools import build_feed_tools

__all__ = ["build_feed_tools"]
