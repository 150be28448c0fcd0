"""Output artifacts of a feed page build."""

from .builder import SinglePageBuilder
from .json_feeds import dump_json, feed_list_entry, save_json_feeds
from .opml import generate_opml
from .rss import aggregate_articles, build_channel, generate_query_channel, generate_rss_channel, xml_safe
from .template import build_template_context, render_index

__all__ = [
    "SinglePageBuilder",
    "aggregate_articles",
    "build_channel",
    "build_template_context",
    "dump_json",
    "feed_list_entry",
    "generate_opml",
    "generate_query_channel",
    "generate_rss_channel",
    "render_index",
    "save_json_feeds",
    "xml_safe",
]
