"""Decorators applied to MCP tools at registration."""

from .exception_handler import exception_handler
from .tool_logger import tool_logger

__all__ = ["exception_handler", "tool_logger"]
