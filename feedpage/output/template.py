"""Render the page entry point from the template's index.html."""

import html
import json
from pathlib import Path
from string import Template
from typing import Any, Dict, List

from ..config import OptionsModel
from ..errors import PathDoesNotExistError

INDEX_TEMPLATE = "index.html"

PUBLIC_OPTIONS = {
    "title",
    "site_path",
    "site_url",
    "show_read_articles",
    "include_article_content_in_rss_feeds",
}


def build_template_context(
    feed_list: List[Dict[str, Any]],
    options: OptionsModel,
    build_time: int,
) -> Dict[str, Any]:
    """Data embedded in the page so the client can find the feed files."""
    return {
        "buildTime": build_time,
        "feeds": [entry for entry in feed_list if not entry["isQuery"]],
        "queryFeeds": [entry for entry in feed_list if entry["isQuery"]],
        "options": options.model_dump(include=PUBLIC_OPTIONS),
    }


def render_index(template_path: Path, context: Dict[str, Any], options: OptionsModel) -> str:
    """
    Substitute ``$title``, ``$site_path``, ``$build_time`` and ``$context``.

    Unknown placeholders are left as they are.

    Raises:
        PathDoesNotExistError: If the template has no index.html
    """
    index_path = template_path / INDEX_TEMPLATE
    if not index_path.exists():
        raise PathDoesNotExistError(index_path)

    # Keep the JSON safe for inlining in a <script> block.
    context_json = json.dumps(context, ensure_ascii=False).replace("</", "<\\/")
    return Template(index_path.read_text(encoding="utf-8")).safe_substitute(
        title=html.escape(options.title),
        site_path=options.site_path,
        build_time=context["buildTime"],
        context=context_json,
    )
