from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.config import DESCRIPTION_MAX, WORDS_PER_MINUTE
from core.utils import calculate_read_times, slugify


class BlogEntry(BaseModel):
    """Front matter of one blog post, validated at build time."""

    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    title: str
    author: str
    publish_date: date
    category: str
    tags: List[str]
    description: str = Field(max_length=DESCRIPTION_MAX)
    image: Optional[str] = None
    imageAlt: Optional[str] = None
    draft: bool = False
    featured: bool = False
    slug: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def derive_slug(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("slug") is None and isinstance(data.get("title"), str):
            data = dict(data)
            data["slug"] = slugify(data["title"]) or None
        return data

    @field_validator("publish_date", mode="before")
    @classmethod
    def narrow_datetime(cls, v: Any) -> Any:
        # YAML timestamps arrive as datetime
        if isinstance(v, datetime):
            return v.date()
        return v


@dataclass(frozen=True)
class CollectionEntry:
    id: str
    body: str
    data: BlogEntry

    @property
    def slug(self) -> str:
        # data.slug is None when the title has no word characters
        return self.data.slug or self.id

    def read_time(self, words_per_minute: int = WORDS_PER_MINUTE) -> int:
        return calculate_read_times(self.body, words_per_minute)
