"""Logging decorator for MCP tools."""

import functools
import time
from typing import Any, Awaitable, Callable, Dict, Optional

from news_feed.logging_config import get_logger


def tool_logger(
    func: Callable[..., Awaitable[Dict[str, Any]]],
    config: Optional[Dict[str, Any]] = None,
) -> Callable[..., Awaitable[Dict[str, Any]]]:
    """Log each call of a tool with its arguments, outcome and duration."""
    server_name = (config or {}).get("name", "news_feed")

    @functools.wraps(func)
    async def wrapper(*args, **kwargs) -> Dict[str, Any]:
        logger = get_logger(__name__)
        arguments = {k: v for k, v in kwargs.items() if k != "ctx"}
        logger.info(f"[{server_name}] {func.__name__} called with {arguments}")

        start = time.perf_counter()
        result = await func(*args, **kwargs)
        elapsed_ms = (time.perf_counter() - start) * 1000

        success = result.get("success") if isinstance(result, dict) else None
        logger.info(f"[{server_name}] {func.__name__} finished in {elapsed_ms:.1f}ms (success={success})")
        return result

    return wrapper
