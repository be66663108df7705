import math
import re

from portfolio.core.config import settings

_INVALID_SLUG_CHARS = re.compile(r"[^a-z0-9 -]")
_WHITESPACE = re.compile(r"\s+")
_REPEATED_HYPHENS = re.compile(r"-+")


def generate_slug(title: str) -> str:
    """
    Build a URL-safe slug from a title.

    "Hello,  World -- 2024!" -> "hello-world-2024"
    """
    slug = _INVALID_SLUG_CHARS.sub("", (title or "").lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _REPEATED_HYPHENS.sub("-", slug)
    return slug.strip("-")


def count_words(content: str) -> int:
    return len((content or "").split())


def calculate_read_time(content: str, words_per_minute: int = None) -> int:
    """Estimated minutes to read ``content``; never less than one."""
    wpm = words_per_minute or settings.READ_TIME_WPM
    return max(1, math.ceil(count_words(content) / wpm))
