"""Build orchestrator that runs one complete feed page build."""

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from ..config import Config, OptionsModel
from ..content import ContentExtractor, EnrichmentStats, enrich_articles
from ..context import BuildContext, build_context
from ..db import FeedStore, validate_connection
from ..models import Article, Feed, QueryFeedDeclaration, UrlFeedDeclaration
from ..output import SinglePageBuilder
from ..subscriptions import UrlReader

logger = logging.getLogger(__name__)

console = Console()


BUILD_STAGES = (
    ("init", "Reading subscriptions", "{url_feeds} url feeds, {query_feeds} query feeds"),
    ("fetch", "Reading feed reader cache", "{feeds} feeds, {articles} articles"),
    ("merge", "Merging subscriptions and articles", "{feeds} feeds, {articles} articles"),
    ("enrich", "Extracting article content", "{extracted} extracted, {fetched} fetched, {failed} failed"),
    ("match", "Evaluating query feeds", "{query_feeds} query feeds, {articles} articles"),
    ("emit", "Writing build artifacts", "{feeds} feeds written"),
    ("publish", "Publishing to build directory", "{build_dir}"),
)


class PipelineStage:
    """One timed build stage and the counters it reported."""

    def __init__(self, name: str, description: str, summary: str = ""):
        self.name = name
        self.description = description
        self.summary = summary
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.error: Optional[str] = None
        self.stats: Dict[str, Any] = {}

    @property
    def started(self) -> bool:
        return self.start_time is not None

    @property
    def success(self) -> bool:
        return self.end_time is not None and self.error is None

    @property
    def duration(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return self.end_time - self.start_time

    def start(self) -> None:
        self.start_time = time.time()

    def complete(self, stats: Dict[str, Any]) -> None:
        self.end_time = time.time()
        self.stats.update(stats)

    def fail(self, error: str) -> None:
        self.end_time = time.time()
        self.error = error

    def details(self) -> str:
        """Summary line for the build table: the error, or the formatted counters."""
        if self.error is not None:
            return self.error
        if not self.success or not self.summary:
            return ""
        return self.summary.format(**self.stats)

    def status(self) -> str:
        if not self.started:
            return "[dim]-[/dim]"
        return "[green]✓[/green]" if self.success else "[red]✗[/red]"


def merge_feeds(feeds: List[Feed], declarations: List[UrlFeedDeclaration]) -> List[Feed]:
    """Apply urls file metadata; feeds without a declaration are dropped."""
    by_url: Dict[str, UrlFeedDeclaration] = {}
    for declaration in declarations:
        # A url listed twice keeps its first declaration.
        by_url.setdefault(declaration.url, declaration)
    merged = []
    for feed in feeds:
        declaration = by_url.get(feed.url)
        if declaration is None:
            logger.info(f"Dropping feed without subscription entry: {feed.url}")
            continue
        feed.update_with_url_data(
            declaration.tags,
            declaration.hidden,
            declaration.title_override,
            declaration.order_index,
        )
        merged.append(feed)
    return merged


def populate_feeds(feeds: List[Feed], articles: List[Article], show_read_articles: bool = True) -> int:
    """
    Attach articles to their feeds by url and sort every feed.

    Returns:
        Number of articles attached
    """
    by_url = {f.url: f for f in feeds}
    attached = 0
    for article in articles:
        feed = by_url.get(article.feed_url)
        if feed is None:
            continue
        if not show_read_articles and not article.unread:
            continue
        article.set_owner(feed)
        feed.add_item(article)
        attached += 1
    for feed in feeds:
        feed.sort_items()
    return attached


def build_query_feeds(feeds: List[Feed], declarations: List[QueryFeedDeclaration]) -> List[Feed]:
    """
    Evaluate every query against the full article set of every feed.

    Matched articles are copied into the query feed; the copies keep
    pointing at their original feed for attribute fallback.
    """
    query_feeds = []
    for declaration in declarations:
        query_feed = Feed.init_query_feed(declaration.title, declaration.order_index)
        for feed in feeds:
            for article in feed.items:
                if declaration.matches(article):
                    query_feed.add_item(article.model_copy())
        query_feed.sort_items()
        logger.info(f"Query feed {declaration.title!r} matched {len(query_feed.items)} articles")
        query_feeds.append(query_feed)
    return query_feeds


def enrich_feeds(feeds: List[Feed], extractor: ContentExtractor, options: OptionsModel) -> EnrichmentStats:
    """Run content enrichment over the live window of every feed."""
    stats = EnrichmentStats()
    for feed in feeds:
        live_items = feed.truncated_items(options.max_live_items, options.live_cutoff_days)
        logger.info(f"Enriching {len(live_items)} articles of {feed}")
        stats.merge(enrich_articles(live_items, feed.url, extractor, options))
    return stats


class BuildOrchestrator:
    """Orchestrates a complete feed page build."""

    def __init__(self, config: Config, debug: bool = False, console: Console = console):
        """Initialize build orchestrator."""
        self.config = config
        self.debug = debug
        self.console = console
        self.stages = [PipelineStage(*stage) for stage in BUILD_STAGES]
        self.total_start_time: Optional[float] = None

    def _stage(self, name: str) -> PipelineStage:
        return next(s for s in self.stages if s.name == name)

    def _run_stage(
        self,
        progress: Progress,
        name: str,
        func: Callable[..., Tuple[Dict, Any]],
        *args: Any,
    ) -> Tuple[bool, Any]:
        """Run one stage; any exception fails the stage."""
        stage = self._stage(name)
        task = progress.add_task(stage.description, total=1)
        stage.start()
        try:
            stats, result = func(*args)
        except Exception as e:
            logger.debug(f"Stage {name} failed", exc_info=True)
            stage.fail(str(e))
            return False, None
        finally:
            progress.remove_task(task)
        stage.complete(stats)
        return True, result

    def _init(self) -> Tuple[Dict, Tuple[List[UrlFeedDeclaration], List[QueryFeedDeclaration]]]:
        self.config.check_paths()
        validate_connection(self.config.cache_file)
        reader = UrlReader.from_path(self.config.urls_file)
        url_declarations = reader.get_url_feeds()
        query_declarations = reader.get_query_feeds()
        stats = {"url_feeds": len(url_declarations), "query_feeds": len(query_declarations)}
        return stats, (url_declarations, query_declarations)

    def _fetch(
        self, ctx: BuildContext, url_declarations: List[UrlFeedDeclaration]
    ) -> Tuple[Dict, Tuple[List[Feed], List[Article]]]:
        store = FeedStore(ctx.cache_file)
        articles = store.get_articles(ctx.options.time_threshold)
        feeds = store.get_feeds([d.url for d in url_declarations])
        return {"feeds": len(feeds), "articles": len(articles)}, (feeds, articles)

    def _merge(
        self,
        ctx: BuildContext,
        feeds: List[Feed],
        articles: List[Article],
        url_declarations: List[UrlFeedDeclaration],
    ) -> Tuple[Dict, List[Feed]]:
        merged = merge_feeds(feeds, url_declarations)
        attached = populate_feeds(merged, articles, ctx.options.show_read_articles)
        return {"feeds": len(merged), "articles": attached}, merged

    def _enrich(self, ctx: BuildContext, feeds: List[Feed]) -> Tuple[Dict, None]:
        with ContentExtractor(timeout=ctx.options.request_timeout) as extractor:
            stats = enrich_feeds(feeds, extractor, ctx.options)
        return stats.model_dump(), None

    def _match(
        self, feeds: List[Feed], query_declarations: List[QueryFeedDeclaration]
    ) -> Tuple[Dict, List[Feed]]:
        query_feeds = build_query_feeds(feeds, query_declarations)
        matched = sum(len(f.items) for f in query_feeds)
        return {"query_feeds": len(query_feeds), "articles": matched}, query_feeds

    def _emit(self, ctx: BuildContext, feeds: List[Feed]) -> Tuple[Dict, SinglePageBuilder]:
        builder = SinglePageBuilder(ctx, feeds)
        builder.create_staging()
        builder.generate_aux_data()
        builder.render_templates()
        return {"feeds": len(builder.feed_list)}, builder

    def _publish(self, builder: SinglePageBuilder) -> Tuple[Dict, None]:
        builder.publish()
        return {"build_dir": str(builder.ctx.build_dir)}, None

    def _print_summary(self):
        """Print build execution summary."""
        successful_stages = sum(1 for s in self.stages if s.success)
        total_duration = time.time() - self.total_start_time if self.total_start_time else 0

        table = Table(title="Build Summary")
        table.add_column("Stage", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Duration", style="yellow")
        table.add_column("Details", style="dim")

        for stage in self.stages:
            duration = f"{stage.duration:.1f}s" if stage.duration > 0 else "-"
            table.add_row(stage.name.title(), stage.status(), duration, stage.details())

        self.console.print("\n")
        self.console.print(table)

        if successful_stages == len(self.stages):
            self.console.print(Panel(
                f"[green]✅ Build completed successfully![/green]\n\n"
                f"Duration: {total_duration:.1f} seconds\n"
                f"Output directory: {self.config.build_dir}",
                style="green"
            ))
        else:
            failed_stages = [s.name for s in self.stages if s.started and not s.success]
            self.console.print(Panel(
                f"[red]❌ Build failed![/red]\n\n"
                f"Failed stages: {', '.join(failed_stages)}\n"
                f"Duration: {total_duration:.1f} seconds\n"
                f"Run with --debug for details.",
                style="red"
            ))

    def run(self) -> bool:
        """
        Run the complete build.

        Returns:
            True if the build completed successfully, False otherwise
        """
        self.total_start_time = time.time()
        self.console.print(Panel.fit("📰 Feedpage build", style="bold blue"))

        try:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                TimeElapsedColumn(),
                console=self.console,
            ) as progress:
                ok, declarations = self._run_stage(progress, "init", self._init)
                if not ok:
                    return False
                with build_context(self.config, self.debug, self.console) as ctx:
                    return self._execute_build(progress, ctx, *declarations)
        finally:
            self._print_summary()

    def _execute_build(
        self,
        progress: Progress,
        ctx: BuildContext,
        url_declarations: List[UrlFeedDeclaration],
        query_declarations: List[QueryFeedDeclaration],
    ) -> bool:
        """Execute the stages that run inside the build context."""
        ok, fetched = self._run_stage(progress, "fetch", self._fetch, ctx, url_declarations)
        if not ok:
            return False
        feeds, articles = fetched

        ok, feeds = self._run_stage(progress, "merge", self._merge, ctx, feeds, articles, url_declarations)
        if not ok:
            return False

        ok, _ = self._run_stage(progress, "enrich", self._enrich, ctx, feeds)
        if not ok:
            return False

        ok, query_feeds = self._run_stage(progress, "match", self._match, feeds, query_declarations)
        if not ok:
            return False

        ok, builder = self._run_stage(progress, "emit", self._emit, ctx, feeds + query_feeds)
        if not ok:
            return False

        ok, _ = self._run_stage(progress, "publish", self._publish, builder)
        return ok
