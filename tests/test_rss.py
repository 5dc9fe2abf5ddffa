import asyncio
import pytest
from datetime import date

import feedparser

from core.config import DEV_SITE_URL, SiteConfig
from core.models import BlogEntry, CollectionEntry
from core.rss import build_feed, entry_link, get_feed, resolve_site_url, verify_feed


def _make_entry(title="Test Article", **overrides) -> CollectionEntry:
    data = {
        "title": title,
        "author": "Hafi",
        "publish_date": date(2024, 3, 5),
        "category": "Notes",
        "tags": [],
        "description": f"About {title}.",
    }
    data.update(overrides)
    return CollectionEntry(id=title.lower(), body="", data=BlogEntry.model_validate(data))


SITE = SiteConfig(site="https://blog.example.com", base="/")


# ── resolve_site_url / entry_link ─────────────────────────────

class TestLinks:
    def test_configured_site(self):
        assert resolve_site_url(SITE) == "https://blog.example.com"

    def test_missing_site_uses_placeholder(self):
        assert resolve_site_url(SiteConfig(site=None)) == DEV_SITE_URL

    def test_link_root_base(self):
        assert entry_link("https://a.com", "/", "post") == "https://a.com/post/"

    def test_link_with_base_prefix(self):
        assert entry_link("https://a.com/", "/blog/", "post") == "https://a.com/blog/post/"

    def test_link_empty_base(self):
        assert entry_link("https://a.com", "", "post") == "https://a.com/post/"


# ── build_feed ────────────────────────────────────────────────

class TestBuildFeed:
    def test_valid_rss(self):
        xml = build_feed([_make_entry()], SITE)
        verify_feed(xml)
        assert xml.startswith("<?xml")

    def test_item_fields(self):
        xml = build_feed([_make_entry("Hello, World!")], SITE)
        feed = feedparser.parse(xml)
        item = feed.entries[0]
        assert item.title == "Hello, World!"
        assert item.link == "https://blog.example.com/hello-world/"
        assert item.description == "About Hello, World!."
        assert item.published_parsed[:3] == (2024, 3, 5)

    def test_channel_fields(self):
        feed = feedparser.parse(build_feed([], SITE, title="T", description="D"))
        assert feed.feed.title == "T"
        assert feed.feed.description == "D"
        assert feed.feed.link == "https://blog.example.com"

    def test_missing_site_placeholder(self):
        feed = feedparser.parse(build_feed([_make_entry("A")], SiteConfig(site=None)))
        assert feed.feed.link == DEV_SITE_URL
        assert feed.entries[0].link == f"{DEV_SITE_URL}/a/"

    def test_order_preserved(self):
        entries = [
            _make_entry("A", publish_date=date(2024, 1, 1)),
            _make_entry("B", publish_date=date(2025, 1, 1)),
            _make_entry("C", publish_date=date(2023, 1, 1)),
        ]
        feed = feedparser.parse(build_feed(entries, SITE))
        assert [e.title for e in feed.entries] == ["A", "B", "C"]

    def test_explicit_slug_used(self):
        feed = feedparser.parse(build_feed([_make_entry("A", slug="custom")], SITE))
        assert feed.entries[0].link == "https://blog.example.com/custom/"

    def test_drafts_kept_by_default(self):
        entries = [_make_entry("A"), _make_entry("B", draft=True), _make_entry("C")]
        feed = feedparser.parse(build_feed(entries, SITE))
        assert [e.title for e in feed.entries] == ["A", "B", "C"]

    def test_drafts_excluded_on_request(self):
        entries = [_make_entry("A"), _make_entry("B", draft=True), _make_entry("C")]
        feed = feedparser.parse(build_feed(entries, SITE, exclude_drafts=True))
        assert [e.title for e in feed.entries] == ["A", "C"]

    def test_title_without_word_chars_links_by_id(self):
        entries = [
            CollectionEntry(id="first", body="", data=_make_entry("!!!").data),
            CollectionEntry(id="second", body="", data=_make_entry("???").data),
        ]
        feed = feedparser.parse(build_feed(entries, SiteConfig(site="https://x.com")))
        assert [e.link for e in feed.entries] == ["https://x.com/first/", "https://x.com/second/"]
        assert len({e.id for e in feed.entries}) == 2

    def test_pub_date_gmt(self):
        xml = build_feed([_make_entry("A")], SITE)
        assert "<pubDate>Tue, 05 Mar 2024 00:00:00 GMT</pubDate>" in xml

    def test_escapes_markup(self):
        xml = build_feed([_make_entry("Tips & <Tricks>")], SITE)
        verify_feed(xml)
        assert "&amp;" in xml


# ── verify_feed ───────────────────────────────────────────────

class TestVerifyFeed:
    def test_rejects_malformed(self):
        with pytest.raises(ValueError):
            verify_feed("<rss version='2.0'><channel><title>x</channel>")

    def test_rejects_non_rss(self):
        with pytest.raises(ValueError):
            verify_feed("<html><body>nope</body></html>")


# ── get_feed ──────────────────────────────────────────────────

class TestGetFeed:
    def test_reads_collection(self, tmp_path):
        blog = tmp_path / "blog"
        blog.mkdir()
        for name in ("one", "two"):
            (blog / f"{name}.md").write_text(
                "---\n"
                f"title: {name}\n"
                "author: Hafi\n"
                "publish_date: 2024-03-05\n"
                "category: Notes\n"
                "tags: []\n"
                "description: d\n"
                "---\nbody\n",
                encoding="utf-8",
            )
        xml = asyncio.run(get_feed(str(tmp_path), SITE))
        feed = feedparser.parse(xml)
        assert [e.link for e in feed.entries] == [
            "https://blog.example.com/one/",
            "https://blog.example.com/two/",
        ]
