"""Content enrichment: link resolution and readable content extraction."""

from .enrichment import enrich_articles
from .extractor import ContentExtractor
from .links import get_reddit_direct_link, is_scrape_excluded, resolve_article_link
from .models import EnrichmentStats, ExtractedContent, LinkResolution, ProcessedContent

__all__ = [
    "ContentExtractor",
    "EnrichmentStats",
    "ExtractedContent",
    "LinkResolution",
    "ProcessedContent",
    "enrich_articles",
    "get_reddit_direct_link",
    "is_scrape_excluded",
    "resolve_article_link",
]
