import logging
from datetime import date, datetime, time, timezone
from email.utils import format_datetime
from typing import Iterable, Optional

import feedparser
from lxml import etree

from core.config import (
    BLOG_COLLECTION,
    DEV_SITE_URL,
    FEED_DESCRIPTION,
    FEED_TITLE,
    SiteConfig,
    load_site_config,
)
from core.content import get_collection
from core.models import CollectionEntry

log = logging.getLogger("blog.rss")


def resolve_site_url(config: SiteConfig) -> str:
    if config.site:
        return config.site
    log.info("Pas d'URL de site configuree, utilisation de %s.", DEV_SITE_URL)
    return DEV_SITE_URL


def entry_link(site_url: str, base: str, slug: str) -> str:
    """site + base + /{slug}/ with duplicate slashes collapsed."""
    path = "/".join(p for p in (base or "").split("/") if p)
    path = f"/{path}/{slug}/" if path else f"/{slug}/"
    return site_url.rstrip("/") + path


def _rfc822(value: date) -> str:
    if not isinstance(value, datetime):
        value = datetime.combine(value, time(0, 0), tzinfo=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def _sub(parent: etree._Element, tag: str, text: str, **attrs: str) -> etree._Element:
    el = etree.SubElement(parent, tag, **attrs)
    el.text = text
    return el


def build_feed(
    entries: Iterable[CollectionEntry],
    config: SiteConfig,
    title: str = FEED_TITLE,
    description: str = FEED_DESCRIPTION,
    exclude_drafts: bool = False,
) -> str:
    """RSS 2.0 document for the given entries, in the order they are given."""
    site_url = resolve_site_url(config)

    rss = etree.Element("rss", version="2.0")
    channel = etree.SubElement(rss, "channel")
    _sub(channel, "title", title)
    _sub(channel, "description", description)
    _sub(channel, "link", site_url)

    count = 0
    for entry in entries:
        if exclude_drafts and entry.data.draft:
            log.debug("Brouillon exclu du flux: %s", entry.id)
            continue
        link = entry_link(site_url, config.base, entry.slug)
        item = etree.SubElement(channel, "item")
        _sub(item, "title", entry.data.title)
        _sub(item, "link", link)
        _sub(item, "guid", link, isPermaLink="true")
        _sub(item, "description", entry.data.description)
        _sub(item, "pubDate", _rfc822(entry.data.publish_date))
        count += 1

    log.info("Flux RSS: %d article(s).", count)
    xml = etree.tostring(rss, xml_declaration=True, encoding="UTF-8", pretty_print=True)
    return xml.decode("utf-8")


def verify_feed(xml: str) -> None:
    parsed = feedparser.parse(xml)
    if parsed.bozo:
        raise ValueError(f"Flux RSS invalide: {parsed.get('bozo_exception')}")
    if parsed.get("version") != "rss20":
        raise ValueError(f"Flux RSS invalide: version {parsed.get('version')!r}")


async def get_feed(
    content_dir: Optional[str] = None,
    config: Optional[SiteConfig] = None,
) -> str:
    posts = await get_collection(BLOG_COLLECTION, content_dir)
    return build_feed(posts, config or load_site_config())
