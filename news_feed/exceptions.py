"""Exception classes for news_feed.

Store and query failures fail a whole view. Field failures are raised by the
per-field helpers and always caught by the render layer, which degrades the
single field instead of failing the document.
"""


class NewsFeedError(Exception):
    """Base exception for all news_feed errors."""

    retryable = False


class ConfigurationError(NewsFeedError):
    """Raised when configuration validation fails or required settings are missing."""
    pass


# =============================================================================
# Store Errors
# =============================================================================

class StoreError(NewsFeedError):
    """Base exception for failures that fail an entire fetch."""
    pass


class StoreUnavailable(StoreError):
    """Raised when the content store cannot be reached or answers with a server error."""

    retryable = True


class QueryError(StoreError):
    """Raised when the store rejects a query or returns a result of the wrong shape."""
    pass


class DocumentNotFound(StoreError):
    """Raised when a single-document query returns no document."""
    pass


# =============================================================================
# Field Errors
# =============================================================================

class FieldError(NewsFeedError):
    """Base exception for problems confined to a single document field."""
    pass


class InvalidAssetReference(FieldError):
    """Raised when an image field does not hold a well-formed asset reference."""
    pass


class MissingReference(FieldError):
    """Raised when a reference field points at a document that no longer exists."""
    pass


class EmptyContent(FieldError):
    """Raised when a document has no body text to excerpt."""
    pass
