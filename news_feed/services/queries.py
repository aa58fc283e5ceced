"""GROQ query expressions used by the feed and detail views."""

from typing import Any, Dict, Tuple

from news_feed.services.references import ReferenceResolver

DOCUMENT_FIELDS = ("_id", "title", "content", "publishtime", "poster", "category")


def document_projection(references: ReferenceResolver) -> str:
    """Projection selecting the document fields plus expanded references."""
    return "{" + ", ".join(DOCUMENT_FIELDS) + ", " + references.projection() + "}"


def category_feed_query(
    document_type: str,
    category: str,
    references: ReferenceResolver,
) -> Tuple[str, Dict[str, Any]]:
    """Query for every document of a type tagged with a category.

    Membership is "tag appears anywhere in the category array", so documents
    carrying several tags match each of them.

    Returns:
        Tuple of (expression, params)
    """
    expression = (
        "*[_type == $type && $category in category]"
        + document_projection(references)
    )
    return expression, {"type": document_type, "category": category}


def document_by_id_query(
    document_type: str,
    document_id: str,
    references: ReferenceResolver,
) -> Tuple[str, Dict[str, Any]]:
    """Query for a single document by id.

    Returns:
        Tuple of (expression, params)
    """
    expression = (
        "*[_type == $type && _id == $id]"
        + document_projection(references)
    )
    return expression, {"type": document_type, "id": document_id}
