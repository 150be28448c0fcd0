"""Article model for entries read from the feed reader cache."""

import weakref
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Dict, Optional

import pendulum
from pendulum import DateTime
from pydantic import Field, PrivateAttr

from .base import Matchable, optional_value

if TYPE_CHECKING:
    from .feed import Feed


class Article(Matchable):
    """Single feed entry.

    The owning feed is held through a weak reference: it is only used for
    attribute fallback and for RSS source metadata, never to keep the feed
    alive. Copies made with ``model_copy`` keep pointing at the same owner.
    """

    title: str = Field("", description="Article title")
    url: str = Field("", description="Article link, possibly rewritten during enrichment")
    published_at: int = Field(0, serialization_alias="date", description="Publication time, epoch seconds")
    author: str = Field("", description="Article author")
    guid: int = Field(..., description="Numeric identifier, unique within the cache")
    unread: bool = Field(True, description="Whether the article is unread")
    content: str = Field("", description="Raw or extracted article content")
    content_length: int = Field(0, serialization_alias="contentLength", description="Length of extracted text")
    flags: Optional[str] = Field(None, description="Feed reader flags")
    enclosure_url: Optional[str] = Field(None, serialization_alias="enclosureUrl")
    enclosure_mime: Optional[str] = Field(None, serialization_alias="enclosureMime")
    comments_url: Optional[str] = Field(None, serialization_alias="commentsUrl")
    feed_url: str = Field(..., description="URL of the owning feed", exclude=True)
    extracted_text: Optional[str] = Field(None, description="Readable text from extraction", exclude=True)

    _owner: Optional[weakref.ReferenceType] = PrivateAttr(None)

    ATTRIBUTES: ClassVar[Dict[str, Callable[[Any], str]]] = {
        "title": lambda a: a.title,
        "link": lambda a: a.url,
        "author": lambda a: a.author,
        "unread": lambda a: "yes" if a.unread else "no",
        "date": lambda a: str(a.published_at),
        "age": lambda a: str(a.age()),
        "content": lambda a: a.content,
        "guid": lambda a: str(a.guid),
        "enclosure_url": lambda a: optional_value(a.enclosure_url),
        "enclosure_type": lambda a: optional_value(a.enclosure_mime),
        "flags": lambda a: optional_value(a.flags),
        # Index is assigned by the feed reader UI and is not available here.
        "articleindex": lambda a: "",
    }

    @property
    def owner(self) -> Optional["Feed"]:
        """Feed this article belongs to, if still alive."""
        if self._owner is None:
            return None
        return self._owner()

    def set_owner(self, feed: "Feed") -> None:
        self._owner = weakref.ref(feed)

    def age(self, now: Optional[DateTime] = None) -> int:
        """Whole days since publication; never negative."""
        if now is None:
            now = pendulum.now()
        published = pendulum.from_timestamp(self.published_at)
        return max(0, (now - published).in_days())

    def resolve_missing(self, name: str) -> Optional[str]:
        owner = self.owner
        if owner is None:
            return None
        return owner.attribute_value(name)

    def to_json(self) -> Dict[str, Any]:
        """Serialize to the article JSON artifact layout."""
        return self.model_dump(by_alias=True)

    def __str__(self) -> str:
        return f"Article(guid={self.guid}, title={self.title!r}, url={self.url!r})"
