"""Resolution of aggregator links (Reddit, Hacker News) to their targets."""

import logging
import re
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .models import LinkResolution

logger = logging.getLogger(__name__)

REDDIT_HOST = "www.reddit.com"
REDDIT_SELF_HOSTS = ("www.reddit.com", "i.redd.it", "old.reddit.com", "new.reddit.com")
HN_HOST = "news.ycombinator.com"
HNRSS_HOST = "hnrss.org"
HNRSS_COMMENTS_LABEL = "Comments URL:"

# Sites that do not yield useful content when fetched.
SCRAPE_EXCLUDED_HOSTS = ("github.com", "github.io", "bloomberg.com", "youtube.com")


def url_host(url: str) -> str:
    """Lower-cased host of ``url``, empty if there is none."""
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def is_scrape_excluded(url: str) -> bool:
    """Whether ``url`` belongs to a site excluded from fetching."""
    host = url_host(url)
    return any(host == d or host.endswith("." + d) for d in SCRAPE_EXCLUDED_HOSTS)


def get_reddit_direct_link(url: str, content: str) -> Optional[str]:
    """Target of the ``[link]`` anchor in a reddit post, unless it points back to reddit."""
    if url_host(url) != REDDIT_HOST:
        return None
    soup = BeautifulSoup(content, "lxml")
    for anchor in soup.find_all("a", href=True):
        if anchor.get_text() != "[link]":
            continue
        target = anchor["href"].strip()
        host = url_host(target)
        if not host:
            logger.info(f"No host found in {target}")
            return None
        if host in REDDIT_SELF_HOSTS:
            logger.info("Self referential reddit link found, skipping")
            return None
        return target
    logger.info(f"No [link] anchor found for {url}")
    return None


def get_hnrss_comments_link(content: str) -> Optional[str]:
    """Link following the ``Comments URL:`` label of an hnrss.org entry."""
    soup = BeautifulSoup(content, "lxml")
    label = soup.find(string=re.compile(re.escape(HNRSS_COMMENTS_LABEL)))
    if label is None:
        return None
    anchor = label.find_next("a", href=True)
    return anchor["href"] if anchor is not None else None


def get_first_link(content: str) -> Optional[str]:
    """First anchor target in ``content``."""
    anchor = BeautifulSoup(content, "lxml").find("a", href=True)
    return anchor["href"] if anchor is not None else None


def resolve_article_link(
    article_url: str,
    feed_url: str,
    content: str,
    scrape_reddit: bool = True,
    scrape_hn: bool = True,
) -> LinkResolution:
    """
    Decide which url an article's content is taken from.

    Reddit posts are replaced with the page behind their ``[link]`` anchor.
    Hacker News entries keep their link and record the discussion page as
    comments url. Excluded sites are never fetched.

    Returns:
        LinkResolution with the working url, comments url and fetch decision
    """
    url = article_url
    comments_url = None
    scrape = False

    if scrape_reddit and url_host(url) == REDDIT_HOST:
        direct = get_reddit_direct_link(url, content)
        if direct is not None:
            comments_url = article_url
            url = direct
            scrape = True
    elif scrape_hn and url_host(url) != HN_HOST:
        feed_host = url_host(feed_url)
        if feed_host == HNRSS_HOST:
            comments_url = get_hnrss_comments_link(content)
            scrape = not urlparse(feed_url).path.startswith("/ask")
        elif feed_host == HN_HOST:
            comments_url = get_first_link(content)
            scrape = True

    if scrape and is_scrape_excluded(url):
        logger.info(f"Fetching disabled for excluded site {url}")
        scrape = False

    return LinkResolution(url=url, comments_url=comments_url, scrape=scrape)
