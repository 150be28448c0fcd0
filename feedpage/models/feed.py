"""Feed model, backed either by a subscribed URL or by a saved query."""

import hashlib
from typing import Any, Callable, ClassVar, Dict, List, Optional

from pydantic import Field, PrivateAttr

from ..errors import UnsortedFeedError
from ..truncation import select_live_items
from .article import Article
from .base import Matchable


def feed_id(key: str) -> str:
    """Stable identifier for a feed URL or query title."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()[:20]


def _latest_article_age(feed: "Feed") -> str:
    if feed.is_empty():
        return ""
    if not feed.is_sorted():
        raise UnsortedFeedError(f"latest_article_age read from unsorted feed {feed.url or feed.title!r}")
    return str(feed.items[0].age())


class Feed(Matchable):
    """Feed with its articles.

    Direct feeds are created from cache metadata and updated with data from
    the urls file; query feeds are synthesized from a filter and carry copies
    of the articles of other feeds.
    """

    id: str = Field(..., description="Stable identifier derived from url or query title")
    title: str = Field("", description="Title reported by the feed source")
    display_title: str = Field("", description="User override of the title, else title")
    url: str = Field("", description="Feed (rss) url; empty for query feeds")
    feed_link: str = Field("", description="Website link of the feed")
    is_query: bool = Field(False, description="Whether the feed is synthesized from a filter")
    hidden: bool = Field(False, description="Hidden feeds are excluded from all outputs")
    tags: List[str] = Field(default_factory=list)
    order_index: int = Field(0, description="Position in the urls file")
    items: List[Article] = Field(default_factory=list)

    _sorted: bool = PrivateAttr(False)

    ATTRIBUTES: ClassVar[Dict[str, Callable[[Any], str]]] = {
        "feedtitle": lambda f: f.title,
        "rssurl": lambda f: f.url,
        "feedlink": lambda f: f.feed_link,
        "total_count": lambda f: str(len(f.items)),
        "tags": lambda f: " ".join(f.tags),
        "unread_count": lambda f: str(sum(1 for i in f.items if i.unread)),
        "latest_article_age": _latest_article_age,
        "description": lambda f: "",
        "feeddate": lambda f: "",
        # Index is assigned by the feed reader UI and is not available here.
        "feedindex": lambda f: "",
    }

    @classmethod
    def init(cls, url: str, title: str, feed_link: str) -> "Feed":
        """Create empty feed from cache metadata."""
        return cls(id=feed_id(url), title=title, display_title=title, url=url, feed_link=feed_link)

    @classmethod
    def init_query_feed(cls, title: str, order_index: int = 0) -> "Feed":
        """Create empty query feed; its articles come from other feeds."""
        return cls(
            id=feed_id(f"query:{title}"),
            title=title,
            display_title=title,
            is_query=True,
            order_index=order_index,
        )

    def update_with_url_data(
        self,
        tags: List[str],
        hidden: bool,
        title_override: Optional[str],
        order_index: int,
    ) -> None:
        """Merge metadata declared in the urls file."""
        self.tags = list(tags)
        self.hidden = hidden
        self.order_index = order_index
        if title_override:
            self.display_title = title_override

    def add_item(self, item: Article) -> None:
        self.items.append(item)
        self._sorted = False

    def sort_items(self) -> None:
        """Sort articles from newest to oldest."""
        self.items.sort(key=lambda i: i.published_at, reverse=True)
        self._sorted = True

    def is_sorted(self) -> bool:
        return self._sorted

    def is_empty(self) -> bool:
        return len(self.items) == 0

    def truncated_items(self, max_items: int, cutoff_days: int) -> List[Article]:
        """Live window of the feed, sharing article objects with ``items``."""
        return select_live_items(self.items, max_items, cutoff_days)

    def truncated(self, max_items: int, cutoff_days: int) -> "Feed":
        """Shallow copy of the feed holding only the live window."""
        return self.model_copy(update={"items": self.truncated_items(max_items, cutoff_days)})

    def to_json(self) -> Dict[str, Any]:
        """Serialize to the feed JSON artifact layout."""
        return {
            "id": self.id,
            "title": self.title,
            "displayTitle": self.display_title,
            "url": self.url,
            "feedLink": self.feed_link,
            "isQuery": self.is_query,
            "isEmpty": self.is_empty(),
            "isHidden": self.hidden,
            "itemCount": len(self.items),
            "items": [i.to_json() for i in self.items],
            "tags": list(self.tags),
        }

    def __str__(self) -> str:
        return (
            f"Feed(url={self.url!r}, title={self.title!r}, display_title={self.display_title!r}, "
            f"num_items={len(self.items)}, tags={self.tags}, hidden={self.hidden}, is_query={self.is_query})"
        )
