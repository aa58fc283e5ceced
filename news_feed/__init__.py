"""news_feed - categorized document feeds over a headless content store."""

__version__ = "0.1.0"
