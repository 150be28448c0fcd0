"""Article fetcher and readable content extractor."""

import logging
from typing import Optional

import httpx
import trafilatura
from bs4 import BeautifulSoup

from ..errors import ContentExtractionError
from ..models import Article
from .links import resolve_article_link
from .models import ExtractedContent, ProcessedContent

logger = logging.getLogger(__name__)


class ContentExtractor:
    """Fetch article pages and extract their readable content."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = "feedpage/1.0 (Feed Page Builder)",
        client: Optional[httpx.Client] = None,
    ) -> None:
        """Initialize content extractor."""
        self.timeout = timeout
        self.user_agent = user_agent
        self._client = client

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "text/html,application/xhtml+xml",
                },
            )
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "ContentExtractor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch(self, url: str) -> httpx.Response:
        """
        Fetch a page.

        Raises:
            ContentExtractionError: On HTTP errors, timeouts and malformed urls
        """
        try:
            response = self.client.get(url)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                error_msg = "Article not found (404)"
            elif status == 403:
                error_msg = "Access forbidden (403)"
            elif status >= 500:
                error_msg = f"Server error ({status})"
            else:
                error_msg = f"HTTP {status}"
            raise ContentExtractionError(f"{error_msg}: {url}") from e
        except httpx.TimeoutException as e:
            raise ContentExtractionError(f"Request timed out: {url}") from e
        except httpx.HTTPError as e:
            raise ContentExtractionError(f"HTTP error for {url}: {e}") from e
        except httpx.InvalidURL as e:
            raise ContentExtractionError(f"Invalid url {url!r}: {e}") from e

    def extract(self, html: str, url: str) -> ExtractedContent:
        """
        Extract readable content from html.

        Raises:
            ContentExtractionError: If no content could be extracted
        """
        try:
            extracted = trafilatura.extract(
                html,
                url=url,
                output_format="html",
                include_comments=False,
                include_links=True,
                include_images=True,
                deduplicate=True,
            )
        except Exception as e:
            raise ContentExtractionError(f"Unexpected extraction error for {url}: {e}") from e
        if not extracted:
            raise ContentExtractionError(f"Failed to extract article content: {url}")
        content = extracted.strip()
        text = BeautifulSoup(content, "lxml").get_text(" ", strip=True)
        return ExtractedContent(content=content, text=text, content_length=len(text))

    def process_article(
        self,
        article: Article,
        feed_url: str,
        scrape_reddit: bool = True,
        scrape_hn: bool = True,
    ) -> ProcessedContent:
        """
        Resolve an article's link and extract its readable content.

        Raises:
            ContentExtractionError: If fetching or extraction fails
        """
        try:
            resolution = resolve_article_link(
                article.url,
                feed_url,
                article.content,
                scrape_reddit=scrape_reddit,
                scrape_hn=scrape_hn,
            )
            if resolution.scrape:
                logger.info(f"Fetching {resolution.url}")
                response = self.fetch(resolution.url)
                extracted = self.extract(response.text, str(response.url))
            else:
                extracted = self.extract(article.content, article.url)
        except ContentExtractionError:
            raise
        except Exception as e:
            raise ContentExtractionError(f"Unexpected error for {article.url}: {e}") from e

        return ProcessedContent(
            url=resolution.url,
            content=extracted.content,
            text=extracted.text,
            content_length=extracted.content_length,
            comments_url=resolution.comments_url,
            fetched=resolution.scrape,
        )
