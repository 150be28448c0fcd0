"""Shared fixtures for feedpage tests."""

import sqlite3
from pathlib import Path

import pendulum
import pytest

from feedpage.config import OptionsModel
from feedpage.models import Article, Feed

FEED_URL = "https://example.com/feed.xml"

CACHE_SCHEMA = """
CREATE TABLE rss_feed (
    rssurl VARCHAR(1024) PRIMARY KEY NOT NULL,
    url VARCHAR(1024) NOT NULL,
    title VARCHAR(1024) NOT NULL,
    lastmodified INTEGER(11) NOT NULL DEFAULT 0,
    is_rtl INTEGER(1) NOT NULL DEFAULT 0,
    etag VARCHAR(128) NOT NULL DEFAULT ""
);
CREATE TABLE rss_item (
    id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
    guid VARCHAR(64) NOT NULL,
    title VARCHAR(1024) NOT NULL,
    author VARCHAR(1024) NOT NULL,
    url VARCHAR(1024) NOT NULL,
    feedurl VARCHAR(1024) NOT NULL,
    pubDate INTEGER NOT NULL,
    content VARCHAR(65535) NOT NULL,
    unread INTEGER(1) NOT NULL,
    enclosure_url VARCHAR(1024),
    enclosure_type VARCHAR(1024),
    enqueued INTEGER(1) NOT NULL DEFAULT 0,
    flags VARCHAR(52),
    deleted INTEGER(1) NOT NULL DEFAULT 0,
    base VARCHAR(128) NOT NULL DEFAULT "",
    content_mime_type VARCHAR(255) NOT NULL DEFAULT "",
    enclosure_description VARCHAR(1024) NOT NULL DEFAULT "",
    enclosure_description_mime_type VARCHAR(128) NOT NULL DEFAULT ""
);
"""


@pytest.fixture
def options():
    """Options with a real site url."""
    return OptionsModel(title="Test Page", site_url="https://feeds.example.org/page")


@pytest.fixture
def make_article():
    """Factory for articles; published now unless told otherwise."""

    def _make(guid: int, feed_url: str = FEED_URL, published_at: int = None, **kwargs) -> Article:
        if published_at is None:
            published_at = pendulum.now().int_timestamp
        kwargs.setdefault("title", f"Article {guid}")
        kwargs.setdefault("url", f"https://example.com/articles/{guid}")
        return Article(guid=guid, feed_url=feed_url, published_at=published_at, **kwargs)

    return _make


@pytest.fixture
def make_feed():
    """Factory for sorted feeds owning the given articles."""

    def _make(
        url: str = FEED_URL,
        title: str = "Example",
        tags=None,
        hidden: bool = False,
        order_index: int = 0,
        articles=(),
    ) -> Feed:
        feed = Feed.init(url, title, "https://example.com")
        feed.update_with_url_data(tags or [], hidden, None, order_index)
        for article in articles:
            article.set_owner(feed)
            feed.add_item(article)
        feed.sort_items()
        return feed

    return _make


@pytest.fixture
def cache_db(tmp_path: Path) -> Path:
    """Feed reader cache with two feeds and a handful of items."""
    db_path = tmp_path / "cache.db"
    now = pendulum.now().int_timestamp
    old = pendulum.now().subtract(days=40).int_timestamp

    conn = sqlite3.connect(str(db_path))
    conn.executescript(CACHE_SCHEMA)
    conn.executemany(
        "INSERT INTO rss_feed (rssurl, url, title) VALUES (?, ?, ?)",
        [
            ("https://a.example/feed.xml", "https://a.example", "Feed A"),
            ("https://b.example/rss", "https://b.example", "Feed B"),
        ],
    )
    conn.executemany(
        "INSERT INTO rss_item (id, guid, title, author, url, feedurl, pubDate, content, unread, "
        "enclosure_url, enclosure_description_mime_type, flags, deleted) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        [
            (1, "a1", "Python news", "ann", "https://a.example/1", "https://a.example/feed.xml",
             now - 3600, "<p>python</p>", 1, "https://a.example/1.mp3", "audio/mpeg", "s", 0),
            (2, "a2", "Old item", "ann", "https://a.example/2", "https://a.example/feed.xml",
             old, "<p>old</p>", 1, None, "", None, 0),
            (3, "b1", "Read item", "bob", "https://b.example/1", "https://b.example/rss",
             now - 7200, "<p>read</p>", 0, None, "", None, 0),
            (4, "b2", "Deleted item", "bob", "https://b.example/2", "https://b.example/rss",
             now - 600, "<p>gone</p>", 1, None, "", None, 1),
        ],
    )
    conn.commit()
    conn.close()
    return db_path
