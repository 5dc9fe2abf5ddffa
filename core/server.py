import logging
from typing import Optional

from aiohttp import web

from core.config import FEED_FILENAME, SiteConfig
from core.rss import get_feed

log = logging.getLogger("blog.server")

RSS_CONTENT_TYPE = "application/rss+xml"

CONTENT_DIR_KEY = web.AppKey("content_dir", str)
SITE_CONFIG_KEY = web.AppKey("site_config", SiteConfig)


async def rss_handler(request: web.Request) -> web.Response:
    app = request.app
    xml = await get_feed(app.get(CONTENT_DIR_KEY), app.get(SITE_CONFIG_KEY))
    return web.Response(text=xml, content_type=RSS_CONTENT_TYPE, charset="utf-8")


def create_app(content_dir: Optional[str] = None, config: Optional[SiteConfig] = None) -> web.Application:
    app = web.Application()
    if content_dir is not None:
        app[CONTENT_DIR_KEY] = content_dir
    if config is not None:
        app[SITE_CONFIG_KEY] = config
    app.router.add_get(f"/{FEED_FILENAME}", rss_handler)
    return app


def run(host: str, port: int, content_dir: Optional[str] = None, config: Optional[SiteConfig] = None) -> None:
    log.info("Serveur du flux sur http://%s:%s/%s", host, port, FEED_FILENAME)
    web.run_app(create_app(content_dir, config), host=host, port=port, print=None)
