"""Unit tests for build artifacts: JSON, RSS, OPML and the index page."""

import json
import xml.etree.ElementTree as ET

import pendulum
import pytest

from feedpage.context import BuildContext
from feedpage.models import Feed
from feedpage.output import (
    SinglePageBuilder,
    aggregate_articles,
    build_template_context,
    feed_list_entry,
    generate_opml,
    generate_query_channel,
    generate_rss_channel,
    render_index,
    save_json_feeds,
    xml_safe,
)


def _parse(xml: str) -> ET.Element:
    return ET.fromstring(xml.encode("utf-8"))


@pytest.fixture
def feeds(make_article, make_feed):
    """Two tagged feeds sharing one guid, an untagged feed and a hidden feed."""
    a = make_feed(
        url="https://a.example/feed.xml",
        title="Feed A",
        tags=["dev", "news"],
        order_index=0,
        articles=[
            make_article(1, feed_url="https://a.example/feed.xml", published_at=1733000000, author="ann"),
            make_article(3, feed_url="https://a.example/feed.xml", published_at=1733200000),
        ],
    )
    b = make_feed(
        url="https://b.example/rss",
        title="Feed B",
        order_index=1,
        articles=[
            make_article(2, feed_url="https://b.example/rss", published_at=1733100000),
            make_article(3, feed_url="https://b.example/rss", published_at=1733200000, title="Duplicate"),
        ],
    )
    hidden = make_feed(
        url="https://hidden.example/rss",
        title="Hidden",
        tags=["news"],
        hidden=True,
        order_index=2,
        articles=[make_article(9, feed_url="https://hidden.example/rss", published_at=1733300000)],
    )
    return [a, b, hidden]


@pytest.fixture
def query_feed(feeds):
    """Query feed holding a copy of one article of Feed A."""
    query = Feed.init_query_feed("Picked", order_index=3)
    query.add_item(feeds[0].items[0].model_copy())
    query.sort_items()
    return query


class TestAggregatedRss:
    """Tests for the aggregated page channel."""

    def test_newest_first_and_deduplicated(self, feeds):
        """Test ordering by publication time and guid de-duplication."""
        articles = aggregate_articles(feeds, 50, 2)

        assert [a.guid for a in articles] == [3, 2, 1]
        assert articles[0].title == "Article 3"

    def test_channel_items(self, feeds, options):
        """Test item order in the rendered channel."""
        root = _parse(generate_rss_channel(options, feeds))

        assert root.tag == "rss"
        assert root.get("version") == "2.0"
        channel = root.find("channel")
        assert channel.findtext("title") == "Test Page"
        assert channel.findtext("link") == "https://feeds.example.org/page/"
        assert [i.findtext("guid") for i in channel.findall("item")] == ["3", "2", "1"]

    def test_hidden_feed_excluded(self, feeds, options):
        """Test hidden feeds do not reach the aggregated channel."""
        root = _parse(generate_rss_channel(options, feeds))

        assert "9" not in [i.findtext("guid") for i in root.iter("item")]

    def test_item_fields(self, feeds, options):
        """Test item metadata, source and categories."""
        article = feeds[0].items[1]
        article.content = "<p>body</p>"
        article.comments_url = "https://a.example/1#comments"
        article.enclosure_url = "https://a.example/1.mp3"
        article.enclosure_mime = "audio/mpeg"

        root = _parse(generate_rss_channel(options, feeds))
        item = next(i for i in root.iter("item") if i.findtext("guid") == "1")

        assert item.findtext("title") == "Article 1"
        assert item.findtext("link") == "https://example.com/articles/1"
        assert item.find("guid").get("isPermaLink") == "false"
        assert item.findtext("pubDate") == pendulum.from_timestamp(1733000000).to_rfc2822_string()
        assert item.findtext("author") == "ann"
        assert item.findtext("description") == "<p>body</p>"
        assert item.findtext("comments") == "https://a.example/1#comments"
        enclosure = item.find("enclosure")
        assert enclosure.get("url") == "https://a.example/1.mp3"
        assert enclosure.get("type") == "audio/mpeg"
        assert item.findtext("source") == "Feed A"
        assert item.find("source").get("url") == "https://example.com"
        assert [c.text for c in item.findall("category")] == ["dev", "news"]

    def test_content_can_be_left_out(self, feeds, options):
        """Test the content inclusion option."""
        feeds[0].items[0].content = "<p>body</p>"
        options.include_article_content_in_rss_feeds = False

        root = _parse(generate_rss_channel(options, feeds))

        assert root.find(".//description[.='<p>body</p>']") is None

    def test_invalid_xml_characters_stripped(self, feeds, options):
        """Test control characters in cached text do not break the channel."""
        article = feeds[0].items[1]
        article.title = "bad\x0btitle"
        article.author = "a\x00nn"
        article.content = "<p>form\x0cfeed</p>"
        options.title = "Test\x1f Page"

        root = _parse(generate_rss_channel(options, feeds))
        item = next(i for i in root.iter("item") if i.findtext("guid") == "1")

        assert root.find("channel").findtext("title") == "Test Page"
        assert item.findtext("title") == "badtitle"
        assert item.findtext("author") == "ann"
        assert item.findtext("description") == "<p>formfeed</p>"

    def test_hidden_feed_reaches_channel_through_query_feed(self, feeds, options):
        """Test a hidden feed's article is only aggregated when a query feed matched it."""
        hidden_article = feeds[2].items[0]
        query = Feed.init_query_feed("Hidden picks", order_index=3)
        query.add_item(hidden_article.model_copy())
        query.sort_items()

        with_query = _parse(generate_rss_channel(options, feeds + [query]))
        without_query = _parse(generate_rss_channel(options, feeds))

        items = [i for i in with_query.iter("item") if i.findtext("guid") == "9"]
        assert len(items) == 1
        assert items[0].findtext("source") == "Hidden"
        assert "9" not in [i.findtext("guid") for i in without_query.iter("item")]


class TestQueryChannel:
    """Tests for self referential query channels."""

    def test_query_channel(self, query_feed, options):
        """Test a query channel holds exactly the query feed's articles."""
        root = _parse(generate_query_channel(options, query_feed))
        channel = root.find("channel")

        assert channel.findtext("title") == "Picked"
        assert [i.findtext("guid") for i in channel.findall("item")] == ["3"]

    def test_copied_articles_keep_source(self, query_feed, options):
        """Test copies still carry the source of their original feed."""
        root = _parse(generate_query_channel(options, query_feed))

        assert root.find(".//item/source").text == "Feed A"


class TestOpml:
    """Tests for the OPML subscription list."""

    def test_tagged_feed_grouped(self, feeds, query_feed, options):
        """Test a feed with two tags appears under both groups and not at top level."""
        body = _parse(generate_opml(feeds + [query_feed], options)).find("body")
        url = "https://a.example/feed.xml"

        top_level = [o for o in body.findall("outline") if o.get("xmlUrl") == url]
        grouped = [o for o in body.findall("outline/outline") if o.get("xmlUrl") == url]

        assert len(top_level) == 0
        assert len(grouped) == 2
        assert [g.get("text") for g in body.findall("outline") if g.get("xmlUrl") is None] == ["dev", "news"]

    def test_untagged_feed_top_level(self, feeds, options):
        """Test an untagged feed appears exactly once, at top level."""
        body = _parse(generate_opml(feeds, options)).find("body")
        url = "https://b.example/rss"

        assert len([o for o in body.findall("outline") if o.get("xmlUrl") == url]) == 1
        assert len([o for o in body.iter("outline") if o.get("xmlUrl") == url]) == 1

    def test_hidden_feed_excluded(self, feeds, options):
        """Test hidden feeds are left out, also from their tag groups."""
        body = _parse(generate_opml(feeds, options)).find("body")

        assert all(o.get("xmlUrl") != "https://hidden.example/rss" for o in body.iter("outline"))
        news = next(o for o in body.findall("outline") if o.get("text") == "news")
        assert len(news.findall("outline")) == 1

    def test_query_feed_points_at_channel(self, feeds, query_feed, options):
        """Test query feeds reference their self referential channel."""
        body = _parse(generate_opml(feeds + [query_feed], options)).find("body")
        outline = next(o for o in body.findall("outline") if o.get("text") == "Picked")

        assert outline.get("xmlUrl") == f"https://feeds.example.org/page/channels/{query_feed.id}.xml"
        assert outline.get("htmlUrl") == "https://feeds.example.org/page/"
        assert outline.get("type") == "rss"

    def test_head(self, feeds, options):
        """Test head metadata."""
        now = pendulum.datetime(2024, 12, 1)
        head = _parse(generate_opml(feeds, options, now=now)).find("head")

        assert head.findtext("title") == "Test Page"
        assert head.findtext("dateCreated") == now.to_rfc2822_string()
        assert head.findtext("dateModified") == now.to_rfc2822_string()

    def test_invalid_xml_characters_stripped(self, make_feed, options):
        """Test control characters in titles and tags do not break the document."""
        feed = make_feed(url="https://c.example/rss", title="Bad\x0bTitle", tags=["t\x01ag"])
        options.title = "Page\x1f"

        root = _parse(generate_opml([feed], options))
        folder = root.find("body/outline")

        assert root.find("head").findtext("title") == "Page"
        assert folder.get("text") == "tag"
        assert folder.find("outline").get("title") == "BadTitle"


class TestXmlSafe:
    """Tests for stripping characters XML 1.0 cannot carry."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("plain", "plain"),
            ("tab\tnew\nline\r", "tab\tnew\nline\r"),
            ("a\x00b\x08c\x1fd", "abcd"),
            ("a\ud800b\ufffec\uffff", "abc"),
            ("emoji \U0001f600", "emoji \U0001f600"),
            (None, ""),
        ],
    )
    def test_xml_safe(self, value, expected):
        assert xml_safe(value) == expected


class TestJsonFeeds:
    """Tests for per-feed JSON artifacts."""

    def test_files(self, tmp_path, feeds, query_feed):
        """Test live, archive and list files."""
        feed_list = save_json_feeds(tmp_path, feeds + [query_feed], 50, 2)
        a = feeds[0]

        live = json.loads((tmp_path / f"{a.id}.json").read_text())
        archive = json.loads((tmp_path / f"{a.id}_archive.json").read_text())
        listed = json.loads((tmp_path / "feeds.json").read_text())

        assert live["displayTitle"] == "Feed A"
        assert [i["guid"] for i in archive["items"]] == [3, 1]
        assert listed == feed_list
        assert [e["title"] for e in listed] == ["Feed A", "Feed B", "Picked"]
        assert (tmp_path / f"{query_feed.id}.json").exists()

    def test_hidden_and_empty_feeds_skipped(self, tmp_path, feeds):
        """Test hidden and empty feeds get no files and no list entry."""
        empty = Feed.init("https://empty.example/rss", "Empty", "")
        save_json_feeds(tmp_path, feeds + [empty], 50, 2)

        assert not (tmp_path / f"{feeds[2].id}.json").exists()
        assert not (tmp_path / f"{empty.id}.json").exists()
        listed = json.loads((tmp_path / "feeds.json").read_text())
        assert "Hidden" not in [e["title"] for e in listed]

    def test_live_file_is_truncated(self, tmp_path, make_article, make_feed):
        """Test the live file holds the live window and the archive everything."""
        old = pendulum.now().subtract(days=10).int_timestamp
        feed = make_feed(articles=[make_article(i, published_at=old - i) for i in range(60)])

        save_json_feeds(tmp_path, [feed], 50, 2)

        assert len(json.loads((tmp_path / f"{feed.id}.json").read_text())["items"]) == 50
        assert len(json.loads((tmp_path / f"{feed.id}_archive.json").read_text())["items"]) == 60

    def test_list_entry(self, feeds):
        """Test the compact list entry."""
        entry = feed_list_entry(feeds[0])

        assert entry == {
            "id": feeds[0].id,
            "title": "Feed A",
            "displayTitle": "Feed A",
            "url": "https://a.example/feed.xml",
            "feedLink": "https://example.com",
            "hidden": False,
            "isQuery": False,
            "tags": ["dev", "news"],
            "itemCount": 2,
        }

    def test_debug_pretty_prints(self, tmp_path, feeds):
        """Test debug mode indents JSON."""
        save_json_feeds(tmp_path, feeds, 50, 2, debug=True)

        assert (tmp_path / "feeds.json").read_text().startswith("[\n  {")


class TestIndexTemplate:
    """Tests for index page rendering."""

    def test_render(self, tmp_path, options):
        """Test placeholder substitution."""
        (tmp_path / "index.html").write_text("<title>$title</title><base href=\"$site_path\">$build_time $missing\n"
                                             "<script>const c = $context;</script>")
        options.title = "News & Notes"
        entries = [{"isQuery": False, "title": "</script>"}, {"isQuery": True, "title": "Q"}]
        context = build_template_context(entries, options, 1733000000)

        page = render_index(tmp_path, context, options)

        assert "<title>News &amp; Notes</title>" in page
        assert '<base href="/">' in page
        assert "1733000000 $missing" in page
        assert "<\\/script>" in page
        blob = page.split("const c = ")[1].split(";</script>")[0]
        data = json.loads(blob)
        assert data["buildTime"] == 1733000000
        assert [f["title"] for f in data["queryFeeds"]] == ["Q"]
        assert data["options"]["title"] == "News & Notes"

    def test_missing_template(self, tmp_path, options):
        """Test a template without index.html is a setup error."""
        from feedpage.errors import PathDoesNotExistError

        with pytest.raises(PathDoesNotExistError):
            render_index(tmp_path, {"buildTime": 0}, options)


class TestSinglePageBuilder:
    """Tests for staging and publishing a build."""

    @pytest.fixture
    def ctx(self, tmp_path, options):
        template = tmp_path / "template"
        (template / "include" / "css").mkdir(parents=True)
        (template / "include" / "css" / "style.css").write_text("body {}")
        (template / "index.html").write_text("<h1>$title</h1>")
        staging = tmp_path / "staging"
        staging.mkdir()
        return BuildContext(
            options=options,
            urls_file=tmp_path / "urls",
            cache_file=tmp_path / "cache.db",
            build_dir=tmp_path / "build",
            template_path=template,
            staging_dir=staging,
            build_time=1733000000,
        )

    def test_build(self, ctx, feeds, query_feed):
        """Test the published file layout."""
        SinglePageBuilder(ctx, feeds + [query_feed]).build()
        build = ctx.build_dir

        for name in ("index.html", "build_time.txt", "rss.xml", "opml.xml", "feeds/feeds.json"):
            assert (build / name).exists(), name
        assert (build / "css" / "style.css").read_text() == "body {}"
        assert (build / "index.html").read_text() == "<h1>Test Page</h1>"
        assert (build / "build_time.txt").read_text() == "1733000000"
        assert (build / "feeds" / f"{feeds[0].id}_archive.json").exists()
        assert (build / "channels" / f"{query_feed.id}.xml").exists()

    def test_feeds_directory_replaced(self, ctx, feeds):
        """Test stale feed files from earlier builds are removed."""
        stale = ctx.build_dir / "feeds" / "stale.json"
        stale.parent.mkdir(parents=True)
        stale.write_text("{}")

        SinglePageBuilder(ctx, feeds).build()

        assert not stale.exists()
        assert (ctx.build_dir / "feeds" / "feeds.json").exists()
