"""Data models for news_feed.

This module defines the decoded document shape and the render-ready records
handed to the presentation layer. Documents are decoded once, at the store
boundary; shape mismatches raise QueryError there instead of failing later
during rendering.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from news_feed.exceptions import QueryError


@dataclass
class Span:
    """An inline run of text inside a rich-text block."""

    text: str
    marks: List[str] = field(default_factory=list)


@dataclass
class Block:
    """A rich-text block. Non-text blocks (images, embeds) carry no spans."""

    type: str = "block"
    style: str = "normal"
    spans: List[Span] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)


@dataclass
class Author:
    """An expanded author reference."""

    name: str = ""
    email: str = ""


@dataclass
class Document:
    """A news document as returned by the store, references already expanded."""

    id: str
    title: str = ""
    content: List[Block] = field(default_factory=list)
    publish_time: Optional[datetime] = None
    category: List[str] = field(default_factory=list)
    poster: Any = None
    author: Optional[Author] = None

    def has_category(self, tag: str) -> bool:
        """Check whether the tag appears anywhere in the category list."""
        return tag in self.category

    @classmethod
    def from_store(cls, raw: Any, author: Optional[Author] = None) -> "Document":
        """Decode one raw store result.

        Args:
            raw: A result object from the query API
            author: The already resolved author reference, if any

        Returns:
            Decoded Document

        Raises:
            QueryError: If the object does not have the document shape
        """
        if not isinstance(raw, dict):
            raise QueryError(f"Expected a document object, got {type(raw).__name__}")

        doc_id = raw.get("_id")
        if not isinstance(doc_id, str) or not doc_id:
            raise QueryError("Document is missing a string '_id'")

        title = raw.get("title")
        if title is not None and not isinstance(title, str):
            raise QueryError(f"Document {doc_id}: 'title' must be a string")

        return cls(
            id=doc_id,
            title=title or "",
            content=_decode_content(doc_id, raw.get("content")),
            publish_time=parse_timestamp(raw.get("publishtime")),
            category=_decode_category(doc_id, raw.get("category")),
            poster=raw.get("poster"),
            author=author,
        )


def _decode_content(doc_id: str, raw: Any) -> List[Block]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise QueryError(f"Document {doc_id}: 'content' must be a list of blocks")

    blocks = []
    for item in raw:
        if not isinstance(item, dict):
            raise QueryError(f"Document {doc_id}: content blocks must be objects")

        children = item.get("children") or []
        if not isinstance(children, list):
            raise QueryError(f"Document {doc_id}: block 'children' must be a list")

        spans = []
        for child in children:
            if not isinstance(child, dict):
                continue
            text = child.get("text")
            if not isinstance(text, str):
                continue
            spans.append(Span(text=text, marks=list(child.get("marks") or [])))

        blocks.append(Block(
            type=item.get("_type", "block"),
            style=item.get("style") or "normal",
            spans=spans,
        ))

    return blocks


def _decode_category(doc_id: str, raw: Any) -> List[str]:
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(isinstance(tag, str) for tag in raw):
        raise QueryError(f"Document {doc_id}: 'category' must be a list of strings")
    return list(raw)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as stored by the content store.

    Args:
        value: Timestamp string, e.g. "2024-01-15T10:30:00.000Z"

    Returns:
        datetime if parsed successfully, None otherwise
    """
    if not value or not isinstance(value, str):
        return None

    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        pass

    # Older interpreters reject fractional seconds that are not 3 or 6 digits
    try:
        return datetime.strptime(value.replace("Z", "+0000"), "%Y-%m-%dT%H:%M:%S.%f%z")
    except ValueError:
        return None


@dataclass
class RenderRecord:
    """Render-ready summary of a document for list views."""

    id: str
    title: str
    first_body_text: str
    poster_url: str
    publish_date: str
    author_name: str
    categories: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "first_body_text": self.first_body_text,
            "poster_url": self.poster_url,
            "publish_date": self.publish_date,
            "author_name": self.author_name,
            "categories": list(self.categories),
        }


@dataclass
class DetailRecord(RenderRecord):
    """Render-ready expanded form of a single document."""

    author_email: str = ""
    body: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["author_email"] = self.author_email
        data["body"] = list(self.body)
        return data
