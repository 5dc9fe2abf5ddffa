import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from core.config import (
    BLOG_COLLECTION,
    CONTENT_DIR,
    DIST_DIR,
    FEED_FILENAME,
    SERVER_HOST,
    SERVER_PORT,
    load_site_config,
)
from core.content import ContentValidationError, get_collection
from core.fade_in import reveal_all
from core.rss import build_feed, verify_feed
from core import server
from core.utils import format_date


logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
log = logging.getLogger("blog")


def _atomic_write_text(path: str, text: str) -> None:
    tmp = f"{path}.tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        f.write(text)
    os.replace(tmp, path)


def cmd_check(args: argparse.Namespace) -> int:
    posts = asyncio.run(get_collection(BLOG_COLLECTION, args.content_dir))
    for post in posts:
        flags = []
        if post.data.draft:
            flags.append("draft")
        if post.data.featured:
            flags.append("featured")
        print(
            f"{post.id}\t{format_date(post.data.publish_date)}\t"
            f"{post.read_time()} min\t/{post.slug}/\t{','.join(flags)}"
        )
    log.info("%d article(s) valide(s).", len(posts))
    return 0


def cmd_build(args: argparse.Namespace) -> int:
    config = load_site_config(args.site_config)
    posts = asyncio.run(get_collection(BLOG_COLLECTION, args.content_dir))
    xml = build_feed(posts, config, exclude_drafts=args.exclude_drafts)
    verify_feed(xml)
    os.makedirs(args.dist_dir, exist_ok=True)
    out = os.path.join(args.dist_dir, FEED_FILENAME)
    _atomic_write_text(out, xml)
    log.info("Flux ecrit: %s", out)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    server.run(args.host, args.port, args.content_dir, load_site_config(args.site_config))
    return 0


def cmd_fade_in(args: argparse.Namespace) -> int:
    with open(args.file, "r", encoding="utf-8") as f:
        html = f.read()
    sys.stdout.write(reveal_all(html))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="blog", description="Outils de build du blog.")
    parser.add_argument("--content-dir", default=CONTENT_DIR)
    parser.add_argument("--site-config", default=None, help="Fichier JSON {site, base}")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("check", help="Valider les articles")
    p.set_defaults(func=cmd_check)

    p = sub.add_parser("build", help="Generer rss.xml")
    p.add_argument("--dist-dir", default=DIST_DIR)
    p.add_argument("--exclude-drafts", action="store_true")
    p.set_defaults(func=cmd_build)

    p = sub.add_parser("serve", help="Servir le flux RSS")
    p.add_argument("--host", default=SERVER_HOST)
    p.add_argument("--port", type=int, default=SERVER_PORT)
    p.set_defaults(func=cmd_serve)

    p = sub.add_parser("fade-in", help="Pre-rendu des elements fade-in")
    p.add_argument("file")
    p.set_defaults(func=cmd_fade_in)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except ContentValidationError as e:
        log.error("Validation du contenu echouee: %s", e)
        return 1
    except ValueError as e:
        log.error("Build interrompu: %s", e)
        return 1
    except FileNotFoundError as e:
        log.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
