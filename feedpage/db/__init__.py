"""Access to the feed reader cache database."""

from .connection import get_connection, validate_connection
from .feeds import FeedStore, article_from_row

__all__ = ["FeedStore", "article_from_row", "get_connection", "validate_connection"]
