import math
import re
from datetime import date
from typing import Dict, List

from core.config import DATE_LOCALE, WORDS_PER_MINUTE

_SLUG_STRIP = re.compile(r"[^A-Za-z0-9_\s-]")
_WHITESPACE = re.compile(r"\s+")

MONTH_NAMES: Dict[str, List[str]] = {
    "id-ID": [
        "Januari", "Februari", "Maret", "April", "Mei", "Juni",
        "Juli", "Agustus", "September", "Oktober", "November", "Desember",
    ],
    "en-US": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
    "en-GB": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
    "fr-FR": [
        "janvier", "février", "mars", "avril", "mai", "juin",
        "juillet", "août", "septembre", "octobre", "novembre", "décembre",
    ],
}


def format_date(value: date, locale: str = DATE_LOCALE) -> str:
    """Long-form date, e.g. '5 Maret 2024' for id-ID or 'March 5, 2024' for en-US."""
    try:
        months = MONTH_NAMES[locale]
    except KeyError:
        raise ValueError(f"Locale non supportee: {locale}") from None
    month = months[value.month - 1]
    if locale == "en-US":
        return f"{month} {value.day}, {value.year}"
    return f"{value.day} {month} {value.year}"


def calculate_read_times(content: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    if words_per_minute <= 0:
        raise ValueError(f"words_per_minute doit etre positif (recu {words_per_minute})")
    words = len((content or "").split())
    return math.ceil(words / words_per_minute)


def slugify(text: str) -> str:
    text = _SLUG_STRIP.sub("", (text or "").lower())
    return _WHITESPACE.sub("-", text.strip())
