from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from portfolio.models.blog import Blog
from portfolio.utils.markdown import (
    format_display_date,
    format_read_time,
    generate_toc,
    render_markdown,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class BlogCreate(CamelModel):
    title: str
    content: str = Field(min_length=1)
    author: str
    excerpt: Optional[str] = None
    thumbnail: Optional[str] = None
    featured_image: Optional[str] = None
    tags: List[str] = []
    category: Optional[str] = None
    is_published: bool = False
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    published_at: Optional[datetime] = None

    @field_validator("title", "author")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value: List[str]) -> List[str]:
        return _clean_tags(value)


class BlogUpdate(CamelModel):
    """
    Partial update. Only fields present in the request body are applied;
    use ``model_dump(exclude_unset=True)`` to read them.
    """
    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    excerpt: Optional[str] = None
    thumbnail: Optional[str] = None
    featured_image: Optional[str] = None
    tags: Optional[List[str]] = None
    category: Optional[str] = None
    is_published: Optional[bool] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    published_at: Optional[datetime] = None
    # Unpublishing keeps published_at unless this is set
    clear_published_at: bool = False

    @field_validator("title", "author")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(value)


class BlogRead(CamelModel):
    id: int
    title: str
    slug: str
    excerpt: str
    content: str
    author: str
    date: str
    thumbnail: Optional[str]
    featured_image: Optional[str]
    tags: List[str]
    category: str
    read_time: int
    view_count: int
    is_published: bool
    is_draft: bool
    published_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    seo_title: str
    seo_description: str

    @classmethod
    def from_blog(cls, blog: Blog) -> "BlogRead":
        return cls(
            id=blog.id,
            title=blog.title,
            slug=blog.slug,
            excerpt=blog.excerpt or "",
            content=blog.content or "",
            author=blog.author,
            date=format_display_date(blog.sort_date),
            thumbnail=blog.thumbnail,
            featured_image=blog.featured_image or blog.thumbnail,
            tags=list(blog.tags or []),
            category=blog.category,
            read_time=blog.read_time,
            view_count=blog.view_count or 0,
            is_published=blog.is_published,
            is_draft=blog.is_draft,
            published_at=blog.published_at,
            created_at=blog.created_at,
            updated_at=blog.updated_at,
            seo_title=blog.seo_title or blog.title,
            seo_description=blog.seo_description or blog.excerpt or "",
        )


class TocEntry(BaseModel):
    id: str
    title: str
    level: int


class BlogDetail(BlogRead):
    """Single post as a reader page needs it"""
    content_html: str
    toc: List[TocEntry]
    read_time_label: str

    @classmethod
    def from_blog(cls, blog: Blog) -> "BlogDetail":
        base = BlogRead.from_blog(blog)
        return cls(
            **base.model_dump(),
            content_html=render_markdown(blog.content),
            toc=generate_toc(blog.content),
            read_time_label=format_read_time(blog.read_time),
        )


class PaginationRead(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool
    visible_pages: List[int]
    start_item: int
    end_item: int


class BlogListResponse(BaseModel):
    blogs: List[BlogRead]
    pagination: PaginationRead


class RelatedBlogsResponse(CamelModel):
    related_blogs: List[BlogRead]


class TagsResponse(BaseModel):
    tags: List[str]


class CategoriesResponse(BaseModel):
    categories: List[str]


