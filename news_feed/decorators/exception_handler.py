"""Exception handling decorator for MCP tools.

Tools report failures as data. Anything a tool lets escape is logged and
turned into a failure dict so it never reaches the transport as a crash.
"""

import functools
from typing import Any, Awaitable, Callable, Dict

from news_feed.logging_config import get_logger


def exception_handler(func: Callable[..., Awaitable[Dict[str, Any]]]) -> Callable[..., Awaitable[Dict[str, Any]]]:
    """Wrap an async tool so escaped exceptions become failure dicts."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs) -> Dict[str, Any]:
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            logger = get_logger(__name__)
            logger.error(f"Tool {func.__name__} raised {type(e).__name__}: {e}", exc_info=True)
            return {
                "success": False,
                "error": str(e),
                "error_type": type(e).__name__,
                "retryable": bool(getattr(e, "retryable", False)),
            }

    return wrapper
