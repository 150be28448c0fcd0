"""Data models for feedpage."""

from .article import Article
from .base import Matchable
from .feed import Feed, feed_id
from .subscription import QueryFeedDeclaration, UrlFeedDeclaration

__all__ = [
    "Article",
    "Feed",
    "Matchable",
    "QueryFeedDeclaration",
    "UrlFeedDeclaration",
    "feed_id",
]
