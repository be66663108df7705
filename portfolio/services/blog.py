import json
import logging
import re
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import Text, func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql.expression import type_coerce
from sqlmodel import Session, select

from portfolio.core.config import settings
from portfolio.models.blog import Blog
from portfolio.models.types import utcnow
from portfolio.schemas.blog import BlogCreate, BlogUpdate
from portfolio.utils.pagination import PaginationInfo, calculate_pagination, page_offset
from portfolio.utils.text import calculate_read_time, generate_slug

logger = logging.getLogger(__name__)

# Columns that may be explicitly cleared with null in a partial update
NULLABLE_FIELDS = {"thumbnail", "featured_image", "seo_title", "seo_description"}

SLUG_CONFLICT = "A blog with this title already exists"

_JSON_PUNCTUATION = re.compile(r"[\[\]\"\\,]")


def _tags_text():
    # Raw JSON text of the tags column, for LIKE matching
    return type_coerce(Blog.tags, Text)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_filter(query: str):
    pattern = f"%{_escape_like(query)}%"
    conditions = [
        Blog.title.ilike(pattern, escape="\\"),
        Blog.excerpt.ilike(pattern, escape="\\"),
        Blog.content.ilike(pattern, escape="\\"),
        Blog.category.ilike(pattern, escape="\\"),
        Blog.author.ilike(pattern, escape="\\"),
    ]
    # Without JSON punctuation a match cannot span the array syntax
    tag_query = _JSON_PUNCTUATION.sub("", query).strip()
    if tag_query:
        conditions.append(_tags_text().ilike(f"%{_escape_like(tag_query)}%", escape="\\"))
    return or_(*conditions)


def tag_filter(tag: str):
    # Tags are stored as a JSON array, so match the quoted element
    return _tags_text().contains(json.dumps(tag, ensure_ascii=False), autoescape=True)


def listing_filters(
    search: Optional[str] = None,
    category: Optional[str] = None,
    tag: Optional[str] = None,
) -> list:
    """
    At most one of search, category and tag applies, in that priority order.
    The catch-all category ("All") is no filter at all.
    """
    search = (search or "").strip()
    category = (category or "").strip()
    tag = (tag or "").strip()

    if search:
        return [search_filter(search)]
    if category and category != settings.DEFAULT_CATEGORY:
        return [Blog.category == category]
    if tag:
        return [tag_filter(tag)]
    return []


def _is_slug_violation(error: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed: blog.slug"; PostgreSQL names ix_blog_slug
    message = str(error.orig).lower()
    return "slug" in message and ("unique" in message or "duplicate" in message)


def newest_first():
    return (func.coalesce(Blog.published_at, Blog.created_at).desc(), Blog.id.desc())


class BlogService:
    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_paginated_blogs(
        self,
        page: int = 1,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        search: Optional[str] = None,
        per_page: Optional[int] = None,
        published_only: bool = True,
    ) -> Tuple[List[Blog], PaginationInfo]:
        per_page = per_page or settings.POSTS_PER_PAGE
        conditions = listing_filters(search=search, category=category, tag=tag)
        if published_only:
            conditions.append(Blog.is_published == True)

        total = self.session.exec(select(func.count(Blog.id)).where(*conditions)).one()
        pagination = calculate_pagination(total, page, per_page)

        blogs = self.session.exec(
            select(Blog)
            .where(*conditions)
            .order_by(*newest_first())
            .offset(page_offset(pagination.current_page, per_page))
            .limit(per_page)
        ).all()
        return list(blogs), pagination

    def get_all_published(self) -> List[Blog]:
        return list(self.session.exec(
            select(Blog).where(Blog.is_published == True).order_by(*newest_first())
        ).all())

    def get_blog(self, blog_id: int) -> Optional[Blog]:
        return self.session.get(Blog, blog_id)

    def get_blog_or_404(self, blog_id: int) -> Blog:
        blog = self.get_blog(blog_id)
        if not blog:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blog not found")
        return blog

    def get_by_slug(self, slug: str, published_only: bool = True) -> Optional[Blog]:
        statement = select(Blog).where(Blog.slug == slug)
        if published_only:
            statement = statement.where(Blog.is_published == True)
        return self.session.exec(statement).first()

    def get_related_blogs(self, blog_id: int, limit: int = 3) -> List[Blog]:
        source = self.get_blog(blog_id)
        if not source or limit <= 0:
            return []

        shared = [Blog.category == source.category]
        shared.extend(tag_filter(tag) for tag in source.tags)

        return list(self.session.exec(
            select(Blog)
            .where(Blog.id != source.id, Blog.is_published == True, or_(*shared))
            .order_by(*newest_first())
            .limit(limit)
        ).all())

    def get_all_tags(self) -> List[str]:
        rows = self.session.exec(select(Blog.tags).where(Blog.is_published == True)).all()
        return sorted({tag for tags in rows for tag in tags})

    def get_all_categories(self) -> List[str]:
        rows = self.session.exec(
            select(Blog.category).where(Blog.is_published == True).distinct()
        ).all()
        return sorted(category for category in rows if category)

    def increment_view_count(self, blog: Blog) -> Blog:
        """Count one public view; the increment happens in the database."""
        self.session.exec(
            update(Blog).where(Blog.id == blog.id).values(view_count=Blog.view_count + 1)
        )
        self.session.commit()
        self.session.refresh(blog)
        return blog

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def _slug_for(self, title: str, exclude_id: Optional[int] = None) -> str:
        slug = generate_slug(title)
        if not slug:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Title must contain at least one letter or number",
            )

        statement = select(Blog.id).where(Blog.slug == slug)
        if exclude_id is not None:
            statement = statement.where(Blog.id != exclude_id)
        if self.session.exec(statement).first() is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SLUG_CONFLICT)
        return slug

    def _save(self, blog: Blog) -> Blog:
        self.session.add(blog)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if not _is_slug_violation(e):
                raise
            # Lost a race on the unique slug
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SLUG_CONFLICT)
        self.session.refresh(blog)
        return blog

    def create_blog(self, data: BlogCreate) -> Blog:
        slug = self._slug_for(data.title)

        published_at = None
        if data.is_published:
            published_at = data.published_at or utcnow()

        blog = Blog(
            title=data.title,
            slug=slug,
            excerpt=data.excerpt or data.title[:160],
            content=data.content,
            author=data.author,
            thumbnail=data.thumbnail,
            featured_image=data.featured_image,
            tags=data.tags,
            category=data.category or "General",
            read_time=calculate_read_time(data.content),
            is_published=data.is_published,
            published_at=published_at,
            seo_title=data.seo_title or data.title,
            seo_description=data.seo_description or data.excerpt or data.title[:160],
        )
        blog = self._save(blog)
        logger.info("Created blog %s (%s, published=%s)", blog.id, blog.slug, blog.is_published)
        return blog

    def update_blog(self, blog_id: int, data: BlogUpdate) -> Blog:
        blog = self.get_blog_or_404(blog_id)

        changes = data.model_dump(exclude_unset=True)
        clear_published_at = changes.pop("clear_published_at", False)
        requested_published_at = changes.pop("published_at", None)
        is_published = changes.pop("is_published", None)

        title = changes.pop("title", None)
        if title is not None and title != blog.title:
            blog.slug = self._slug_for(title, exclude_id=blog.id)
            blog.title = title

        content = changes.pop("content", None)
        if content is not None:
            blog.content = content
            blog.read_time = calculate_read_time(content)

        for field, value in changes.items():
            if value is None and field not in NULLABLE_FIELDS:
                continue
            setattr(blog, field, value)

        if is_published is True:
            blog.is_published = True
            if blog.published_at is None:
                blog.published_at = requested_published_at or utcnow()
        elif is_published is False:
            blog.is_published = False

        if clear_published_at and not blog.is_published:
            blog.published_at = None

        blog.updated_at = utcnow()
        blog = self._save(blog)
        logger.info("Updated blog %s (%s)", blog.id, ", ".join(sorted(data.model_fields_set)) or "no fields")
        return blog

    def delete_blog(self, blog_id: int) -> None:
        blog = self.get_blog_or_404(blog_id)
        slug = blog.slug
        self.session.delete(blog)
        self.session.commit()
        logger.info("Deleted blog %s (%s)", blog_id, slug)
