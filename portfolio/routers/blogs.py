from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session

from portfolio.db.session import get_session
from portfolio.models.user import User
from portfolio.routers.auth import get_admin_user, get_current_user_optional
from portfolio.schemas.blog import (
    BlogCreate,
    BlogDetail,
    BlogListResponse,
    BlogRead,
    BlogUpdate,
    CategoriesResponse,
    PaginationRead,
    RelatedBlogsResponse,
    TagsResponse,
)
from portfolio.services.blog import BlogService
from portfolio.utils.pagination import PaginationInfo

router = APIRouter()

def get_blog_service(session: Session = Depends(get_session)) -> BlogService:
    return BlogService(session)

def to_pagination_read(info: PaginationInfo) -> PaginationRead:
    return PaginationRead(
        current_page=info.current_page,
        total_pages=info.total_pages,
        total_items=info.total_posts,
        items_per_page=info.posts_per_page,
        has_next_page=info.has_next_page,
        has_prev_page=info.has_prev_page,
        visible_pages=info.visible_pages,
        start_item=info.start_post,
        end_item=info.end_post,
    )

@router.get("", response_model=BlogListResponse)
def list_blogs(
    page: int = 1,
    limit: Optional[int] = Query(None, ge=1, le=100),
    search: Optional[str] = None,
    category: Optional[str] = None,
    tag: Optional[str] = None,
    published: bool = True,
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: BlogService = Depends(get_blog_service),
):
    """
    Page of posts, newest first. Only one of search, category and tag is
    applied (in that order of priority). Drafts are listed only for admins
    asking with published=false.
    """
    if not published and not (current_user and current_user.is_admin):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Admin session required to list drafts")

    blogs, pagination = service.get_paginated_blogs(
        page=page,
        category=category,
        tag=tag,
        search=search,
        per_page=limit,
        published_only=published,
    )
    return BlogListResponse(
        blogs=[BlogRead.from_blog(blog) for blog in blogs],
        pagination=to_pagination_read(pagination),
    )

@router.get("/tags", response_model=TagsResponse)
def list_tags(service: BlogService = Depends(get_blog_service)):
    return TagsResponse(tags=service.get_all_tags())

@router.get("/categories", response_model=CategoriesResponse)
def list_categories(service: BlogService = Depends(get_blog_service)):
    return CategoriesResponse(categories=service.get_all_categories())

@router.get("/{blog_id}/related", response_model=RelatedBlogsResponse)
def related_blogs(
    blog_id: int,
    limit: int = Query(3, ge=1, le=12),
    service: BlogService = Depends(get_blog_service),
):
    related = service.get_related_blogs(blog_id, limit)
    return RelatedBlogsResponse(related_blogs=[BlogRead.from_blog(blog) for blog in related])

@router.get("/{id_or_slug}", response_model=BlogDetail)
def read_blog(
    id_or_slug: str,
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: BlogService = Depends(get_blog_service),
):
    """
    Numeric ids are admin/editor lookups and never count as a view.
    Slugs are public page views of published posts and bump viewCount.
    """
    if id_or_slug.isascii() and id_or_slug.isdigit():
        blog = service.get_blog(int(id_or_slug))
        if blog and blog.is_draft and not (current_user and current_user.is_admin):
            blog = None
        if not blog:
            raise HTTPException(status_code=404, detail="Blog not found")
        return BlogDetail.from_blog(blog)

    blog = service.get_by_slug(id_or_slug)
    if not blog:
        raise HTTPException(status_code=404, detail="Blog not found")
    return BlogDetail.from_blog(service.increment_view_count(blog))

@router.post("", response_model=BlogRead, status_code=status.HTTP_201_CREATED)
def create_blog(
    blog_in: BlogCreate,
    admin_user: User = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service),
):
    return BlogRead.from_blog(service.create_blog(blog_in))

@router.put("/{blog_id}", response_model=BlogRead)
def update_blog(
    blog_id: int,
    blog_in: BlogUpdate,
    admin_user: User = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service),
):
    """Partial update: fields missing from the body are left alone."""
    return BlogRead.from_blog(service.update_blog(blog_id, blog_in))

@router.delete("/{blog_id}")
def delete_blog(
    blog_id: int,
    admin_user: User = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service),
):
    service.delete_blog(blog_id)
    return {"message": "Blog deleted successfully"}
