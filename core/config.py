"""Centralized configuration for the blog build."""

import os
import json
import logging
from dataclasses import dataclass
from typing import Optional

log = logging.getLogger("blog.config")

# =========================
# Site
# =========================
SITE_URL: str = os.getenv("BLOG_SITE_URL", "https://blog.hafi.click")
BASE_PATH: str = os.getenv("BLOG_BASE_PATH", "/")
DEV_SITE_URL: str = os.getenv("BLOG_DEV_SITE_URL", "http://localhost:4321")

# =========================
# File paths
# =========================
CONTENT_DIR: str = os.getenv("BLOG_CONTENT_DIR", "src/content")
DIST_DIR: str = os.getenv("BLOG_DIST_DIR", "dist")
BLOG_COLLECTION: str = "blog"

# =========================
# Feed
# =========================
FEED_TITLE: str = os.getenv("BLOG_FEED_TITLE", "Hafi's Blog")
FEED_DESCRIPTION: str = os.getenv(
    "BLOG_FEED_DESCRIPTION", "A blog about my personal notes during my learning journey."
)
FEED_FILENAME: str = "rss.xml"

# =========================
# Presentation
# =========================
DATE_LOCALE: str = os.getenv("BLOG_DATE_LOCALE", "id-ID")
def positive_int_env(name: str, default: str) -> int:
    value = int(os.getenv(name, default))
    if value <= 0:
        raise ValueError(f"{name} doit etre strictement positif (recu {value})")
    return value


WORDS_PER_MINUTE: int = positive_int_env("BLOG_WORDS_PER_MINUTE", "250")
FADE_IN_THRESHOLD: float = float(os.getenv("BLOG_FADE_IN_THRESHOLD", "0.2"))
DESCRIPTION_MAX: int = 160

# =========================
# Server
# =========================
SERVER_HOST: str = os.getenv("BLOG_SERVER_HOST", "127.0.0.1")
SERVER_PORT: int = int(os.getenv("BLOG_SERVER_PORT", "4321"))


@dataclass(frozen=True)
class SiteConfig:
    site: Optional[str]  # None = pas d'URL publique configuree
    base: str = "/"


def _clean_site(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def load_site_config(path: Optional[str] = None) -> SiteConfig:
    """Build the SiteConfig from the environment, or from a JSON file when given."""
    if path is None:
        return SiteConfig(site=_clean_site(SITE_URL), base=BASE_PATH or "/")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        log.warning("Fichier %s introuvable, configuration par environnement.", path)
        return SiteConfig(site=_clean_site(SITE_URL), base=BASE_PATH or "/")
    except json.JSONDecodeError as e:
        raise ValueError(f"Configuration invalide dans {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Configuration invalide dans {path}: objet JSON attendu")
    site = data.get("site")
    base = data.get("base", "/")
    if site is not None and not isinstance(site, str):
        raise ValueError(f"'site' doit etre une chaine dans {path}")
    if not isinstance(base, str):
        raise ValueError(f"'base' doit etre une chaine dans {path}")
    return SiteConfig(site=_clean_site(site), base=base or "/")
