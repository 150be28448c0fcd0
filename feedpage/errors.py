"""Error types raised while building the feed page."""

from pathlib import Path


class FeedpageError(Exception):
    """Base error for all feedpage failures."""


class SetupError(FeedpageError):
    """Required paths or configuration are missing or invalid."""


class PathDoesNotExistError(SetupError):
    """File or directory required for the build does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"File or directory does not exist: {path}")


class NotInitializedError(SetupError):
    """Configuration directory has not been created yet."""

    def __init__(self) -> None:
        super().__init__("Looks like feedpage has not been initialized, run 'feedpage init' first.")


class ConfigurationError(SetupError):
    """Invalid option values provided by the user."""


class SubscriptionParseError(FeedpageError):
    """The subscription (urls) file could not be processed."""


class InvalidQueryError(SubscriptionParseError):
    """Query feed declaration does not have the title and filter parts."""

    def __init__(self, line: str) -> None:
        self.line = line
        super().__init__(f"Invalid query found: {line}")


class FilterParseError(SubscriptionParseError):
    """Filter expression was rejected by the parser."""

    def __init__(self, expression: str, reason: str) -> None:
        self.expression = expression
        self.reason = reason
        super().__init__(f"Invalid filter expression {expression!r}: {reason}")


class ContentExtractionError(FeedpageError):
    """Article content could not be fetched or extracted."""


class UnsortedFeedError(RuntimeError):
    """Feed attribute requiring sorted items was read before sorting."""
