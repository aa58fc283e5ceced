"""Render record derivation.

Each field is derived on its own so a bad field degrades to an empty value
or placeholder without failing the rest of the record.
"""

from datetime import datetime
from typing import List, Optional

from news_feed.exceptions import EmptyContent
from news_feed.models.schemas import DetailRecord, Document, RenderRecord
from news_feed.services.assets import AssetURLResolver

DATE_FORMAT = "%a %b %d %Y"


def first_body_text(document: Document) -> str:
    """Text of the first span of the first block, or "" if there is none."""
    try:
        return _first_span_text(document)
    except EmptyContent:
        return ""


def _first_span_text(document: Document) -> str:
    if not document.content:
        raise EmptyContent(f"Document {document.id} has no content blocks")

    spans = document.content[0].spans
    if not spans:
        raise EmptyContent(f"Document {document.id}: first block has no text")

    return spans[0].text


def body_paragraphs(document: Document) -> List[str]:
    """Plain text of every block that carries text, in order."""
    return [block.text for block in document.content if block.spans]


def format_publish_date(publish_time: Optional[datetime]) -> str:
    """Format a publish timestamp as e.g. "Mon Jan 15 2024"."""
    if publish_time is None:
        return ""
    return publish_time.strftime(DATE_FORMAT)


def build_render_record(document: Document, assets: AssetURLResolver) -> RenderRecord:
    """Derive the list-view record for a document."""
    author = document.author
    return RenderRecord(
        id=document.id,
        title=document.title,
        first_body_text=first_body_text(document),
        poster_url=assets.resolve_or_placeholder(document.poster),
        publish_date=format_publish_date(document.publish_time),
        author_name=author.name if author else "",
        categories=list(document.category),
    )


def build_detail_record(document: Document, assets: AssetURLResolver) -> DetailRecord:
    """Derive the expanded record for a single document."""
    author = document.author
    return DetailRecord(
        id=document.id,
        title=document.title,
        first_body_text=first_body_text(document),
        poster_url=assets.resolve_or_placeholder(document.poster),
        publish_date=format_publish_date(document.publish_time),
        author_name=author.name if author else "",
        categories=list(document.category),
        author_email=author.email if author else "",
        body=body_paragraphs(document),
    )
