import re

import pytest

from portfolio.utils.text import calculate_read_time, count_words, generate_slug

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")

TITLES = [
    "Building Modern Web Applications with Next.js 14",
    "Mastering React Hooks: A Complete Guide",
    "  --Leading and trailing--  ",
    "Tabs\tand\nnewlines",
    "C'est déjà l'été!",
    "100% Pure -- Awesome!!!",
    "already-a-slug",
    "a - b",
    "!!!",
    "",
]


def test_generate_slug_examples():
    assert generate_slug("Building Modern Web Applications with Next.js 14") == "building-modern-web-applications-with-nextjs-14"
    assert generate_slug("Mastering React Hooks: A Complete Guide") == "mastering-react-hooks-a-complete-guide"
    assert generate_slug("TypeScript Best Practices for Frontend Development") == "typescript-best-practices-for-frontend-development"
    assert generate_slug("Hello,  World -- 2024!") == "hello-world-2024"
    assert generate_slug("  --Leading and trailing--  ") == "leading-and-trailing"


def test_generate_slug_strips_everything_outside_the_alphabet():
    assert generate_slug("!!!") == ""
    assert generate_slug("") == ""
    assert generate_slug("C'est déjà l'été!") == "cest-dj-lt"


@pytest.mark.parametrize("title", TITLES)
def test_generate_slug_is_idempotent(title):
    slug = generate_slug(title)
    assert generate_slug(slug) == slug


@pytest.mark.parametrize("title", TITLES)
def test_generate_slug_shape(title):
    slug = generate_slug(title)
    assert slug == "" or SLUG_PATTERN.match(slug)


def test_count_words_splits_on_any_whitespace():
    assert count_words("one  two\tthree\nfour") == 4
    assert count_words("") == 0
    assert count_words(None) == 0


def test_calculate_read_time():
    assert calculate_read_time("") == 1
    assert calculate_read_time("word " * 200) == 1
    assert calculate_read_time("word " * 201) == 2
    assert calculate_read_time("word " * 1000) == 5


def test_calculate_read_time_custom_speed():
    assert calculate_read_time("word " * 100, words_per_minute=50) == 2
