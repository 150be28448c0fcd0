"""Declarations read from the urls (subscription) file."""

from typing import Any, Callable, List, Optional

from pydantic import BaseModel, Field


class UrlFeedDeclaration(BaseModel):
    """Single url based feed line."""

    class Config:
        """Pydantic config."""

        frozen = True

    url: str = Field(..., description="Feed url")
    tags: List[str] = Field(default_factory=list, description="Tags assigned to the feed")
    hidden: bool = Field(False, description="Whether the feed is hidden")
    title_override: Optional[str] = Field(None, description="Display title override")
    order_index: int = Field(0, description="Position in the urls file")


class QueryFeedDeclaration(BaseModel):
    """Query feed line: a title and a filter over all articles."""

    class Config:
        """Pydantic config."""

        frozen = True
        arbitrary_types_allowed = True

    title: str = Field(..., description="Query feed title")
    query: str = Field("", description="Raw filter expression")
    order_index: int = Field(0, description="Position in the urls file")
    filter_predicate: Callable[[Any], bool] = Field(..., description="Returns True for matching articles")

    def matches(self, article: Any) -> bool:
        return self.filter_predicate(article)
