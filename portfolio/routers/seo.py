from fastapi import APIRouter, Depends, HTTPException, Response

from portfolio.routers.blogs import get_blog_service
from portfolio.services import seo
from portfolio.services.blog import BlogService

router = APIRouter()

XML_CACHE_HEADERS = {"Cache-Control": "public, max-age=3600, s-maxage=3600"}

@router.get("/sitemap.xml")
def sitemap(service: BlogService = Depends(get_blog_service)):
    return Response(
        content=seo.build_sitemap(service.get_all_published()),
        media_type="application/xml",
        headers=XML_CACHE_HEADERS,
    )

@router.get("/blog/feed.xml")
def rss_feed(service: BlogService = Depends(get_blog_service)):
    return Response(
        content=seo.build_rss_feed(service.get_all_published()),
        media_type="application/rss+xml",
        headers=XML_CACHE_HEADERS,
    )

@router.get("/api/blogs/{slug}/seo")
def blog_seo(slug: str, service: BlogService = Depends(get_blog_service)):
    """Open Graph, Twitter card and JSON-LD metadata for a published post"""
    blog = service.get_by_slug(slug)
    if not blog:
        raise HTTPException(status_code=404, detail="Blog not found")
    return seo.blog_metadata(blog)

@router.get("/api/structured-data/website")
def website_structured_data():
    return seo.website_structured_data()

@router.get("/api/structured-data/blog")
def blog_structured_data(service: BlogService = Depends(get_blog_service)):
    return seo.blog_listing_structured_data(service.get_all_published())
