"""Services for news_feed."""

from .assets import AssetURLResolver
from .detail import DetailView
from .feed import CategorizedFeed
from .query_client import DocumentQueryClient
from .references import ReferenceField, ReferenceResolver
from .state import Failed, FeedState, Loaded, Loading

__all__ = [
    "AssetURLResolver",
    "CategorizedFeed",
    "DetailView",
    "DocumentQueryClient",
    "Failed",
    "FeedState",
    "Loaded",
    "Loading",
    "ReferenceField",
    "ReferenceResolver",
]
