"""Configuration models."""

from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

DEFAULT_SITE_URL = "http://site-url-not-set.io/you-can-set-it-in-feedpage-config"


class OptionsModel(BaseModel):
    """Options controlling a feed page build."""

    title: str = Field("Feedpage feed page", description="Title of the page")
    site_path: str = Field("/", description="Root path for the feed site")
    site_url: str = Field(
        DEFAULT_SITE_URL,
        validate_default=True,
        description="Base url of the site, used for self referential query feed links",
    )
    show_read_articles: bool = Field(True, description="Include articles marked as read")
    scrape_reddit_links: bool = Field(True, description="Replace reddit posts with the linked article")
    scrape_hn_links: bool = Field(True, description="Replace Hacker News posts with the linked article")
    include_article_content_in_rss_feeds: bool = Field(
        True,
        description="Include article content in generated rss feeds",
    )
    urls_file: str = Field("", description="Path to the feed reader urls file")
    cache_file: str = Field("", description="Path to the feed reader cache database")
    time_threshold: int = Field(20, description="Number of days in the past to process", ge=1)
    build_dir: str = Field("", description="Directory the page is built into")
    template_name: str = Field("default", description="Name of the template to use")
    max_live_items: int = Field(50, description="Maximum articles in a feed's live window", ge=1)
    live_cutoff_days: int = Field(2, description="Articles newer than this stay in the live window", ge=0)
    request_timeout: float = Field(30.0, description="Timeout for content fetches in seconds", gt=0)

    @field_validator("site_url")
    @classmethod
    def validate_site_url(cls, v: str) -> str:
        """Require an absolute http(s) url ending with a slash."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid site url: {v!r}")
        if not v.endswith("/"):
            v += "/"
        return v
