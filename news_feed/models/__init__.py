"""Data models for news_feed."""

from .schemas import Author, Block, DetailRecord, Document, RenderRecord, Span

__all__ = [
    "Author",
    "Block",
    "DetailRecord",
    "Document",
    "RenderRecord",
    "Span",
]
