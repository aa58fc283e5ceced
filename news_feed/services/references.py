"""Reference field expansion.

Reference fields are never handed to callers as bare identifiers: the query
asks the store to dereference them inline, and the expanded value is turned
into a record here. A reference to a deleted document comes back as null and
resolves to None rather than failing the query.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from news_feed.exceptions import MissingReference
from news_feed.logging_config import get_logger
from news_feed.models.schemas import Author


@dataclass(frozen=True)
class ReferenceField:
    """A document field that holds a reference to another document.

    Attributes:
        name: Key the expanded value is projected under
        path: Path of the reference inside the stored document
        fields: Fields of the target document to project
    """

    name: str
    path: str
    fields: Tuple[str, ...]

    def projection(self) -> str:
        return f'"{self.name}": {self.path}->{{{", ".join(self.fields)}}}'


AUTHOR_REFERENCE = ReferenceField(name="author", path="author.name", fields=("name", "email"))


class ReferenceResolver:
    """Builds dereferencing projections and decodes the expanded values."""

    def __init__(self, fields: Sequence[ReferenceField] = (AUTHOR_REFERENCE,)):
        self.fields = tuple(fields)

    def projection(self) -> str:
        """Projection fragment that expands every declared reference inline."""
        return ", ".join(f.projection() for f in self.fields)

    def expanded(self, raw: Dict[str, Any], field_name: str) -> Optional[Dict[str, Any]]:
        """Return the expanded target of a reference field, or None if missing.

        Args:
            raw: Raw document from the store
            field_name: Projected name of the reference field

        Returns:
            Dict of the target's projected fields, or None
        """
        try:
            return self._expanded(raw, field_name)
        except MissingReference as e:
            logger = get_logger(__name__)
            logger.debug(f"Document {raw.get('_id')}: {e}")
            return None

    def _expanded(self, raw: Dict[str, Any], field_name: str) -> Dict[str, Any]:
        value = raw.get(field_name)

        if value is None:
            raise MissingReference(f"reference '{field_name}' is empty or dangling")
        if not isinstance(value, dict):
            raise MissingReference(f"reference '{field_name}' has unexpected value {value!r}")
        if "_ref" in value:
            raise MissingReference(f"reference '{field_name}' was not expanded by the query")

        field = next((f for f in self.fields if f.name == field_name), None)
        wanted = field.fields if field else tuple(value)
        if not any(value.get(key) for key in wanted):
            raise MissingReference(f"reference '{field_name}' resolved to an empty document")

        return value

    def author(self, raw: Dict[str, Any]) -> Optional[Author]:
        """Decode the expanded author of a raw document."""
        value = self.expanded(raw, AUTHOR_REFERENCE.name)
        if value is None:
            return None

        name = value.get("name")
        email = value.get("email")
        return Author(
            name=name if isinstance(name, str) else "",
            email=email if isinstance(email, str) else "",
        )
