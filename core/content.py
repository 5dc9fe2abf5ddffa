"""File-based content store: Markdown files with a YAML front-matter block.

Layout:
  <content_dir>/<kind>/<id>.md

Each file starts with a front-matter block:
  ---
  title: ...
  publish_date: 2024-03-05
  ---
  Body text...
"""

import asyncio
import logging
import os
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from core.config import CONTENT_DIR
from core.models import BlogEntry, CollectionEntry

log = logging.getLogger("blog.content")

CONTENT_EXTENSIONS = (".md", ".markdown")
FRONT_MATTER_DELIM = "---"


class ContentValidationError(ValueError):
    """An entry does not satisfy the collection schema. Aborts the build."""

    def __init__(self, path: str, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.path = path
        self.errors = errors or []
        super().__init__(f"{path}: {message}")


def split_front_matter(text: str) -> Tuple[str, str]:
    """Return (front_matter_yaml, body). Raises ValueError if no block is found."""
    lines = text.lstrip("\ufeff").splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONT_MATTER_DELIM:
        raise ValueError("front matter absent")
    for i in range(1, len(lines)):
        if lines[i].strip() == FRONT_MATTER_DELIM:
            return "".join(lines[1:i]), "".join(lines[i + 1:])
    raise ValueError("front matter non terminee")


def _format_errors(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg', '')}")
    return "; ".join(parts)


def load_entry(path: str, entry_id: Optional[str] = None) -> CollectionEntry:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    try:
        raw_yaml, body = split_front_matter(text)
        data = yaml.safe_load(raw_yaml) or {}
    except (ValueError, yaml.YAMLError) as e:
        raise ContentValidationError(path, str(e)) from e
    if not isinstance(data, dict):
        raise ContentValidationError(path, "front matter doit etre un mapping")
    try:
        entry = BlogEntry.model_validate(data)
    except ValidationError as e:
        raise ContentValidationError(path, _format_errors(e), e.errors()) from e
    if entry_id is None:
        entry_id = os.path.splitext(os.path.basename(path))[0]
    return CollectionEntry(id=entry_id, body=body, data=entry)


def list_entry_paths(kind_dir: str) -> List[str]:
    """Content files under kind_dir, in sorted relative-path order."""
    paths = []
    for root, dirs, files in os.walk(kind_dir):
        dirs.sort()
        for name in files:
            if name.startswith((".", "_")):
                continue
            if name.lower().endswith(CONTENT_EXTENSIONS):
                paths.append(os.path.join(root, name))
    return sorted(paths, key=lambda p: os.path.relpath(p, kind_dir).replace(os.sep, "/"))


def read_collection(kind: str, content_dir: Optional[str] = None) -> List[CollectionEntry]:
    kind_dir = os.path.join(content_dir or CONTENT_DIR, kind)
    if not os.path.isdir(kind_dir):
        raise FileNotFoundError(f"Collection introuvable: {kind_dir}")
    entries = []
    for path in list_entry_paths(kind_dir):
        rel = os.path.relpath(path, kind_dir).replace(os.sep, "/")
        entries.append(load_entry(path, entry_id=os.path.splitext(rel)[0]))
    log.info("Collection '%s': %d entree(s) validee(s).", kind, len(entries))
    return entries


async def get_collection(
    kind: str,
    content_dir: Optional[str] = None,
    filter: Optional[Callable[[CollectionEntry], bool]] = None,
) -> List[CollectionEntry]:
    entries = await asyncio.to_thread(read_collection, kind, content_dir)
    if filter is not None:
        entries = [e for e in entries if filter(e)]
    return entries
