"""Single page builder: stages artifacts, then publishes them."""

import logging
import shutil
from typing import List

from ..models import Feed
from ..context import BuildContext
from .json_feeds import FEEDS_DIRNAME, save_json_feeds
from .opml import generate_opml
from .rss import CHANNELS_DIRNAME, generate_query_channel, generate_rss_channel
from .template import build_template_context, render_index

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"
BUILD_TIME_FILE = "build_time.txt"
RSS_FILE = "rss.xml"
OPML_FILE = "opml.xml"
PUBLISHED_FILES = (INDEX_FILE, BUILD_TIME_FILE, RSS_FILE, OPML_FILE)
PUBLISHED_DIRS = (FEEDS_DIRNAME, CHANNELS_DIRNAME)


class SinglePageBuilder:
    """Writes every artifact of a build into the staging directory and
    copies the result into the build directory."""

    def __init__(self, ctx: BuildContext, feeds: List[Feed]) -> None:
        self.ctx = ctx
        self.feeds = sorted(feeds, key=lambda f: f.order_index)
        self.feed_list: List[dict] = []

    @property
    def query_feeds(self) -> List[Feed]:
        return [f for f in self.feeds if f.is_query]

    def create_staging(self) -> None:
        for dirname in PUBLISHED_DIRS:
            (self.ctx.staging_dir / dirname).mkdir(parents=True, exist_ok=True)

    def generate_aux_data(self) -> None:
        """Write feed JSON, feed list, channels, OPML and the build time."""
        options = self.ctx.options
        staging = self.ctx.staging_dir

        self.feed_list = save_json_feeds(
            staging / FEEDS_DIRNAME,
            self.feeds,
            options.max_live_items,
            options.live_cutoff_days,
            self.ctx.debug,
        )

        (staging / RSS_FILE).write_text(generate_rss_channel(options, self.feeds), encoding="utf-8")
        for feed in self.query_feeds:
            channel_file = staging / CHANNELS_DIRNAME / f"{feed.id}.xml"
            logger.info(f"Saving query channel at path {channel_file}")
            channel_file.write_text(generate_query_channel(options, feed), encoding="utf-8")

        (staging / OPML_FILE).write_text(generate_opml(self.feeds, options), encoding="utf-8")
        (staging / BUILD_TIME_FILE).write_text(str(self.ctx.build_time), encoding="utf-8")

    def render_templates(self) -> None:
        context = build_template_context(self.feed_list, self.ctx.options, self.ctx.build_time)
        page = render_index(self.ctx.template_path, context, self.ctx.options)
        (self.ctx.staging_dir / INDEX_FILE).write_text(page, encoding="utf-8")

    def publish(self) -> None:
        """
        Copy staged artifacts into the build directory.

        Template includes are copied first so build artifacts win on
        conflicts; feed and channel directories are replaced wholesale.
        """
        build_dir = self.ctx.build_dir
        build_dir.mkdir(parents=True, exist_ok=True)

        include_dir = self.ctx.template_path / "include"
        if include_dir.is_dir():
            logger.info(f"Copying template includes from {include_dir}")
            shutil.copytree(include_dir, build_dir, dirs_exist_ok=True)

        for dirname in PUBLISHED_DIRS:
            target = build_dir / dirname
            if target.exists():
                shutil.rmtree(target)
            shutil.copytree(self.ctx.staging_dir / dirname, target)

        for filename in PUBLISHED_FILES:
            shutil.copy2(self.ctx.staging_dir / filename, build_dir / filename)

    def build(self) -> None:
        """Run every builder step in order."""
        self.create_staging()
        self.generate_aux_data()
        self.render_templates()
        self.publish()
