"""OPML 2.0 subscription list for the feed page."""

import xml.etree.ElementTree as ET
from typing import Dict, List, Optional
from urllib.parse import urljoin

import pendulum
from pendulum import DateTime

from ..config import OptionsModel
from ..models import Feed
from .rss import channel_path, sub_element


def _add_feed_outline(parent: ET.Element, feed: Feed, options: OptionsModel) -> None:
    """Add a feed outline element to parent."""
    if feed.is_query:
        xml_url = urljoin(options.site_url, channel_path(feed))
        html_url = options.site_url
    else:
        xml_url = feed.url
        html_url = feed.feed_link
    attrs = {
        "type": "rss",
        "text": feed.display_title or xml_url,
        "title": feed.display_title or xml_url,
        "xmlUrl": xml_url,
    }
    if html_url:
        attrs["htmlUrl"] = html_url
    sub_element(parent, "outline", attrib=attrs)


def generate_opml(
    feeds: List[Feed],
    options: OptionsModel,
    now: Optional[DateTime] = None,
) -> str:
    """
    Generate OPML XML for url and query feeds.

    Tagged feeds appear once inside the group of each of their tags;
    untagged feeds and query feeds appear at the top level. Hidden feeds
    are left out.

    Returns:
        OPML XML string
    """
    if now is None:
        now = pendulum.now("UTC")
    timestamp = now.to_rfc2822_string()

    root = ET.Element("opml", version="2.0")
    head = ET.SubElement(root, "head")
    sub_element(head, "title", options.title)
    sub_element(head, "dateCreated", timestamp)
    sub_element(head, "dateModified", timestamp)
    body = ET.SubElement(root, "body")

    groups: Dict[str, List[Feed]] = {}
    top_level: List[Feed] = []
    for feed in sorted(feeds, key=lambda f: f.order_index):
        if feed.hidden:
            continue
        if feed.is_query or not feed.tags:
            top_level.append(feed)
            continue
        for tag in dict.fromkeys(feed.tags):
            groups.setdefault(tag, []).append(feed)

    for tag, tag_feeds in sorted(groups.items()):
        folder = sub_element(body, "outline", attrib={"text": tag, "title": tag})
        for feed in tag_feeds:
            _add_feed_outline(folder, feed, options)

    for feed in top_level:
        _add_feed_outline(body, feed, options)

    return ET.tostring(root, encoding="utf-8", xml_declaration=True).decode("utf-8")
