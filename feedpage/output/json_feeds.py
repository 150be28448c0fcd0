"""Per-feed JSON artifacts and the compact feed list."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from ..models import Feed

logger = logging.getLogger(__name__)

FEEDS_DIRNAME = "feeds"
FEED_LIST_NAME = "feeds"
ARCHIVE_SUFFIX = "_archive"


def dump_json(data: Any, debug: bool = False) -> str:
    """Serialize data, pretty printed in debug mode."""
    if debug:
        return json.dumps(data, indent=2, ensure_ascii=False)
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def feed_list_entry(feed: Feed) -> Dict[str, Any]:
    """Compact navigation entry for a feed."""
    return {
        "id": feed.id,
        "title": feed.title,
        "displayTitle": feed.display_title,
        "url": feed.url,
        "feedLink": feed.feed_link,
        "hidden": feed.hidden,
        "isQuery": feed.is_query,
        "tags": list(feed.tags),
        "itemCount": len(feed.items),
    }


def eligible_feeds(feeds: List[Feed]) -> List[Feed]:
    """Non-empty, non-hidden feeds in urls file order."""
    return [f for f in sorted(feeds, key=lambda f: f.order_index) if not f.is_empty() and not f.hidden]


def save_json_feed(
    feeds_dir: Path,
    feed: Feed,
    max_items: int,
    cutoff_days: int,
    debug: bool = False,
) -> None:
    """Write the live window and the full archive of a feed."""
    if feed.is_empty() or feed.hidden:
        logger.info(f"Skipping saving feed: {feed}")
        return
    truncated = feed.truncated(max_items, cutoff_days)
    live_path = feeds_dir / f"{feed.id}.json"
    archive_path = feeds_dir / f"{feed.id}{ARCHIVE_SUFFIX}.json"
    logger.info(f"Saving feed at path {live_path}")
    live_path.write_text(dump_json(truncated.to_json(), debug), encoding="utf-8")
    archive_path.write_text(dump_json(feed.to_json(), debug), encoding="utf-8")


def save_json_feeds(
    feeds_dir: Path,
    feeds: List[Feed],
    max_items: int,
    cutoff_days: int,
    debug: bool = False,
) -> List[Dict[str, Any]]:
    """
    Write JSON artifacts for every eligible feed and the feed list.

    Returns:
        Entries of the feed list
    """
    feed_list = []
    for feed in eligible_feeds(feeds):
        save_json_feed(feeds_dir, feed, max_items, cutoff_days, debug)
        feed_list.append(feed_list_entry(feed))
    list_path = feeds_dir / f"{FEED_LIST_NAME}.json"
    list_path.write_text(dump_json(feed_list, debug), encoding="utf-8")
    return feed_list
