"""Reader for the feed reader's urls (subscription) file."""

import logging
import shlex
from pathlib import Path
from typing import List

from ..errors import InvalidQueryError, PathDoesNotExistError
from ..filters import parse_filter
from ..models import QueryFeedDeclaration, UrlFeedDeclaration

logger = logging.getLogger(__name__)

QUERY_PREFIX = "query:"
SPECIAL_PREFIXES = (QUERY_PREFIX, "filter:", "exec:")


def _tokenize_line(line: str) -> List[str]:
    """
    Split a urls file line into shell-style tokens.

    Raises:
        InvalidQueryError: If a query declaration has unbalanced quotes
    """
    try:
        return shlex.split(line, comments=False, posix=True)
    except ValueError:
        if line.strip().lstrip('"').startswith(QUERY_PREFIX):
            raise InvalidQueryError(line)
        # Unbalanced quotes; fall back to plain whitespace split.
        return line.split()


class UrlReader:
    """Parse url and query feed declarations from urls file contents."""

    def __init__(self, contents: str) -> None:
        self.lines = self._read(contents)

    @classmethod
    def from_path(cls, path: Path) -> "UrlReader":
        """Load reader from urls file on disk."""
        if not path.exists():
            raise PathDoesNotExistError(path)
        return cls(path.read_text(encoding="utf-8"))

    @staticmethod
    def _read(contents: str) -> List[str]:
        """Keep non-empty lines that are not comments."""
        lines = []
        for line in contents.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            lines.append(stripped)
        return lines

    @staticmethod
    def _url_feed(tokens: List[str], order_index: int) -> UrlFeedDeclaration:
        tags = []
        hidden = False
        title_override = None
        for token in tokens[1:]:
            if token.startswith("~"):
                title_override = token[1:]
            elif token == "!":
                hidden = True
            else:
                tags.append(token)
        return UrlFeedDeclaration(
            url=tokens[0],
            tags=tags,
            hidden=hidden,
            title_override=title_override,
            order_index=order_index,
        )

    def get_url_feeds(self) -> List[UrlFeedDeclaration]:
        """All url feeds declared in the urls file, in file order."""
        result = []
        for order_index, line in enumerate(self.lines):
            tokens = _tokenize_line(line)
            if not tokens or tokens[0].startswith(SPECIAL_PREFIXES):
                continue
            feed = self._url_feed(tokens, order_index)
            logger.debug(f"Url feed: {feed}")
            result.append(feed)
        return result

    def get_query_feeds(self) -> List[QueryFeedDeclaration]:
        """
        All query feeds declared in the urls file, in file order.

        Raises:
            InvalidQueryError: If a declaration lacks the title or filter part
            FilterParseError: If a filter expression cannot be parsed
        """
        result = []
        for order_index, line in enumerate(self.lines):
            tokens = _tokenize_line(line)
            if not tokens or not tokens[0].startswith(QUERY_PREFIX):
                continue
            parts = tokens[0].split(":", 2)
            if len(parts) < 3 or not parts[2].strip():
                raise InvalidQueryError(line)
            _, title, query = parts
            expression = parse_filter(query)
            logger.debug(f"Query feed {title!r}: {expression}")
            result.append(QueryFeedDeclaration(
                title=title,
                query=query,
                order_index=order_index,
                filter_predicate=expression,
            ))
        return result
