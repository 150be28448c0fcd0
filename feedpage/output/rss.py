"""RSS 2.0 channels: the aggregated page channel and query feed channels."""

import re
import xml.etree.ElementTree as ET
from typing import Dict, Iterable, List, Optional

import pendulum

from ..config import OptionsModel
from ..models import Article, Feed

CHANNELS_DIRNAME = "channels"
GENERATOR = "feedpage"

# Characters outside the XML 1.0 Char production.
INVALID_XML_CHARS = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def channel_path(feed: Feed) -> str:
    """Path of a query feed's channel, relative to the site root."""
    return f"{CHANNELS_DIRNAME}/{feed.id}.xml"


def rss_date(timestamp: int) -> str:
    return pendulum.from_timestamp(timestamp).to_rfc2822_string()


def xml_safe(value: Optional[str]) -> str:
    """Drop characters XML 1.0 cannot represent."""
    if not value:
        return ""
    return INVALID_XML_CHARS.sub("", value)


def sub_element(
    parent: ET.Element,
    tag: str,
    text: Optional[str] = None,
    attrib: Optional[Dict[str, str]] = None,
) -> ET.Element:
    """Append a child element with XML safe text and attributes."""
    element = ET.SubElement(parent, tag, {k: xml_safe(v) for k, v in (attrib or {}).items()})
    if text is not None:
        element.text = xml_safe(text)
    return element


def add_rss_item(channel: ET.Element, article: Article, include_content: bool) -> ET.Element:
    """Append an ``item`` element describing ``article``."""
    item = ET.SubElement(channel, "item")
    sub_element(item, "title", article.title)
    sub_element(item, "link", article.url)
    sub_element(item, "guid", str(article.guid), {"isPermaLink": "false"})
    sub_element(item, "pubDate", rss_date(article.published_at))
    if article.author:
        sub_element(item, "author", article.author)
    if include_content and article.content:
        sub_element(item, "description", article.content)
    if article.comments_url:
        sub_element(item, "comments", article.comments_url)
    if article.enclosure_url:
        sub_element(
            item,
            "enclosure",
            attrib={
                "url": article.enclosure_url,
                "type": article.enclosure_mime or "",
                "length": "0",
            },
        )

    owner = article.owner
    if owner is not None and not owner.is_query:
        sub_element(item, "source", owner.display_title, {"url": owner.feed_link or owner.url})
        for tag in owner.tags:
            sub_element(item, "category", tag)
    return item


def build_channel(
    title: str,
    link: str,
    description: str,
    articles: Iterable[Article],
    include_content: bool = True,
) -> str:
    """Render an RSS 2.0 document holding ``articles`` in the given order."""
    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")
    sub_element(channel, "title", title)
    sub_element(channel, "link", link)
    sub_element(channel, "description", description)
    sub_element(channel, "generator", GENERATOR)
    sub_element(channel, "lastBuildDate", pendulum.now("UTC").to_rfc2822_string())
    for article in articles:
        add_rss_item(channel, article, include_content)
    return ET.tostring(rss, encoding="utf-8", xml_declaration=True).decode("utf-8")


def aggregate_articles(feeds: List[Feed], max_items: int, cutoff_days: int) -> List[Article]:
    """
    Live window articles of all non-hidden feeds for the page channel.

    Articles are de-duplicated by guid, keeping the first occurrence in
    urls file order, and sorted newest first.
    """
    seen = set()
    articles = []
    for feed in sorted(feeds, key=lambda f: f.order_index):
        if feed.hidden:
            continue
        for article in feed.truncated_items(max_items, cutoff_days):
            if article.guid in seen:
                continue
            seen.add(article.guid)
            articles.append(article)
    articles.sort(key=lambda a: a.published_at, reverse=True)
    return articles


def generate_rss_channel(options: OptionsModel, feeds: List[Feed]) -> str:
    """Aggregated channel for the whole feed page."""
    articles = aggregate_articles(feeds, options.max_live_items, options.live_cutoff_days)
    return build_channel(
        options.title,
        options.site_url,
        f"Aggregated feed for {options.title}",
        articles,
        options.include_article_content_in_rss_feeds,
    )


def generate_query_channel(options: OptionsModel, feed: Feed) -> str:
    """Standalone channel for a query feed, so it can be subscribed to."""
    articles = feed.truncated_items(options.max_live_items, options.live_cutoff_days)
    return build_channel(
        feed.display_title,
        options.site_url,
        f"{feed.display_title} query feed for {options.title}",
        articles,
        options.include_article_content_in_rss_feeds,
    )
