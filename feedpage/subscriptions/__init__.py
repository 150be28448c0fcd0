"""Subscription (urls file) handling."""

from .reader import UrlReader

__all__ = ["UrlReader"]
