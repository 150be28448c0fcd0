"""Read feeds and articles from the feed reader cache."""

import logging
import sqlite3
from pathlib import Path
from typing import List

from ..models import Article, Feed
from .connection import get_connection

logger = logging.getLogger(__name__)

ARTICLES_SQL = """
SELECT
    feed.rssurl AS feed_url,
    feed.title AS feed_title,
    items.title AS item_title,
    items.url AS item_url,
    items.author AS item_author,
    items.pubDate AS pub_date,
    items.unread AS unread,
    items.content AS content,
    items.id AS guid,
    items.enclosure_url AS enc_url,
    items.enclosure_description_mime_type AS enc_mime_type,
    items.flags AS flags
FROM rss_item AS items
JOIN rss_feed AS feed ON feed.rssurl = items.feedurl
WHERE datetime(items.pubDate, 'unixepoch') >= datetime('now', :days)
AND items.deleted = 0
"""


def article_from_row(row: sqlite3.Row) -> Article:
    """Build article from a row selected by ``ARTICLES_SQL``."""
    return Article(
        feed_url=row["feed_url"],
        title=row["item_title"] or "",
        url=row["item_url"] or "",
        author=row["item_author"] or "",
        published_at=row["pub_date"] or 0,
        unread=bool(row["unread"]),
        content=row["content"] or "",
        guid=row["guid"],
        enclosure_url=row["enc_url"],
        enclosure_mime=row["enc_mime_type"],
        flags=row["flags"],
    )


class FeedStore:
    """Query facade over the cache database."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def get_articles(self, days_back: int) -> List[Article]:
        """Retrieve non-deleted articles published within ``days_back`` days."""
        days = f"-{days_back} days"
        logger.info(f"Retrieving articles, day threshold {days}")
        with get_connection(self.db_path) as conn:
            rows = conn.execute(ARTICLES_SQL, {"days": days}).fetchall()
        articles = [article_from_row(row) for row in rows]
        logger.info(f"Retrieved {len(articles)} articles")
        return articles

    def get_feeds(self, urls: List[str]) -> List[Feed]:
        """Retrieve feed metadata for exactly the given urls."""
        if not urls:
            return []
        placeholders = ",".join("?" for _ in urls)
        sql = f"SELECT rssurl, title, url FROM rss_feed WHERE rssurl IN ({placeholders})"
        with get_connection(self.db_path) as conn:
            rows = conn.execute(sql, list(urls)).fetchall()
        feeds = [Feed.init(row["rssurl"], row["title"] or "", row["url"] or "") for row in rows]
        logger.debug(f"Retrieved feeds: {[str(f) for f in feeds]}")
        return feeds
