"""Content enrichment of a feed's live window."""

import logging
from typing import List

from ..config import OptionsModel
from ..errors import ContentExtractionError
from ..models import Article
from .extractor import ContentExtractor
from .models import EnrichmentStats

logger = logging.getLogger(__name__)


def enrich_articles(
    articles: List[Article],
    feed_url: str,
    extractor: ContentExtractor,
    options: OptionsModel,
) -> EnrichmentStats:
    """
    Replace article content with extracted readable content, in place.

    Failures are recovered per article: content is cleared, content
    length stays 0 and the remaining articles are processed.
    """
    stats = EnrichmentStats(total=len(articles))
    for article in articles:
        try:
            result = extractor.process_article(
                article,
                feed_url,
                scrape_reddit=options.scrape_reddit_links,
                scrape_hn=options.scrape_hn_links,
            )
        except ContentExtractionError as e:
            logger.info(f"Error processing content for {article}: {e}")
            article.content = ""
            article.content_length = 0
            stats.failed += 1
            continue

        if result.fetched:
            stats.fetched += 1
        article.url = result.url
        article.content = result.content
        article.extracted_text = result.text
        article.content_length = result.content_length
        if result.comments_url is not None:
            article.comments_url = result.comments_url
        stats.extracted += 1
    return stats
