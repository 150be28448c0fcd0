"""Live window selection for feed articles.

A feed's articles are kept in full as an archive; the live window is the
subset emitted as the primary per-feed artifact and the only subset that
goes through content enrichment.
"""

from typing import TYPE_CHECKING, List, Optional

from pendulum import DateTime

if TYPE_CHECKING:
    from .models.article import Article

MAX_LIVE_ITEMS = 50
LIVE_CUTOFF_DAYS = 2


def select_live_items(
    items: List["Article"],
    max_items: int = MAX_LIVE_ITEMS,
    cutoff_days: int = LIVE_CUTOFF_DAYS,
    now: Optional[DateTime] = None,
) -> List["Article"]:
    """
    Select the live window from articles sorted newest first.

    Feeds at or under ``max_items`` are returned whole. Otherwise every
    article newer than ``cutoff_days`` is kept when there are at least
    ``max_items`` of them, else the newest ``max_items`` articles.

    Returns:
        New list sharing the article objects of ``items``
    """
    if len(items) <= max_items:
        return list(items)
    recent = [i for i in items if i.age(now) <= cutoff_days]
    if len(recent) >= max_items:
        return recent
    return items[:max_items]
