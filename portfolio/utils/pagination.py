# portfolio/utils/pagination.py
from __future__ import annotations

import math
from dataclasses import dataclass, field, asdict
from typing import List, Sequence, TypeVar

from portfolio.core.config import settings

T = TypeVar("T")


@dataclass(frozen=True)
class PaginationInfo:
    current_page: int
    total_pages: int
    total_posts: int
    posts_per_page: int
    has_next_page: bool
    has_prev_page: bool
    visible_pages: List[int] = field(default_factory=list)
    start_post: int = 0
    end_post: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def calculate_pagination(
    total_posts: int,
    current_page: int = 1,
    posts_per_page: int = None,
    max_buttons: int = None,
) -> PaginationInfo:
    """
    Pagination metadata for a listing of ``total_posts`` items.

    Rules:
    - total_pages is at least 1, so an empty listing still has page 1
    - current_page is clamped into [1, total_pages]
    - visible_pages is a window of at most ``max_buttons`` pages centred on
      current_page, shifted so it never leaves [1, total_pages]
    """
    posts_per_page = max(1, posts_per_page or settings.POSTS_PER_PAGE)
    max_buttons = max(1, max_buttons or settings.MAX_PAGINATION_BUTTONS)
    total_posts = max(0, total_posts or 0)

    total_pages = max(1, math.ceil(total_posts / posts_per_page))
    current_page = min(max(1, current_page or 1), total_pages)

    start_page = max(1, current_page - max_buttons // 2)
    end_page = min(total_pages, start_page + max_buttons - 1)
    # Near the end the window is short; pull the start back
    start_page = max(1, end_page - max_buttons + 1)

    if total_posts:
        start_post = (current_page - 1) * posts_per_page + 1
        end_post = min(current_page * posts_per_page, total_posts)
    else:
        start_post = end_post = 0

    return PaginationInfo(
        current_page=current_page,
        total_pages=total_pages,
        total_posts=total_posts,
        posts_per_page=posts_per_page,
        has_next_page=current_page < total_pages,
        has_prev_page=current_page > 1,
        visible_pages=list(range(start_page, end_page + 1)),
        start_post=start_post,
        end_post=end_post,
    )


def page_offset(page: int, per_page: int) -> int:
    return (max(1, page) - 1) * per_page


def get_paginated_posts(items: Sequence[T], current_page: int = 1, posts_per_page: int = None) -> List[T]:
    """Slice one page out of an already ordered sequence."""
    per_page = max(1, posts_per_page or settings.POSTS_PER_PAGE)
    start = page_offset(current_page, per_page)
    return list(items[start:start + per_page])
