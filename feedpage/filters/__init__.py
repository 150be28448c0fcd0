"""Filter expressions used by query feeds."""

from .parser import FilterExpression, parse_filter, tokenize

__all__ = ["FilterExpression", "parse_filter", "tokenize"]
