"""
SEO metadata: JSON-LD structured data, Open Graph/Twitter tags, the XML
sitemap and the RSS feed. Everything here is a pure function of posts and
settings.
"""
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Iterable, Optional, Sequence

from portfolio.core.config import settings
from portfolio.models.blog import Blog
from portfolio.models.types import utcnow
from portfolio.services.media import media_service
from portfolio.utils.markdown import extract_excerpt
from portfolio.utils.text import count_words

SCHEMA_CONTEXT = "https://schema.org"
ATOM_NS = "http://www.w3.org/2005/Atom"
SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

OG_IMAGE_WIDTH = 1200
OG_IMAGE_HEIGHT = 630

# (path, changefreq, priority)
STATIC_PAGES = [
    ("", "monthly", 1.0),
    ("/blog", "weekly", 0.8),
    ("/services", "monthly", 0.7),
    ("/portfolio", "monthly", 0.7),
    ("/resume", "monthly", 0.6),
    ("/pricing", "monthly", 0.6),
    ("/contact", "monthly", 0.5),
]

ET.register_namespace("atom", ATOM_NS)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _description(blog: Blog) -> str:
    return blog.seo_description or blog.excerpt or extract_excerpt(blog.content)


def blog_url(blog: Blog, base_url: Optional[str] = None) -> str:
    return f"{base_url or settings.BASE_URL}/blog/{blog.slug}"


def default_image_url(base_url: Optional[str] = None) -> str:
    return f"{base_url or settings.BASE_URL}/images/default-blog.jpg"


def og_image_url(blog: Blog, base_url: Optional[str] = None) -> str:
    """1200x630 social card image; Cloudinary images are cropped to fit."""
    image = blog.featured_image or blog.thumbnail
    if not image:
        return default_image_url(base_url)
    return media_service.transform_url(image, width=OG_IMAGE_WIDTH, height=OG_IMAGE_HEIGHT, crop="fill")


def _publisher(base_url: str) -> dict:
    return {
        "@type": "Organization",
        "name": settings.SITE_NAME,
        "url": base_url,
        "logo": {
            "@type": "ImageObject",
            "url": f"{base_url}/images/logo.png",
            "width": 60,
            "height": 60,
        },
    }


def blog_post_structured_data(blog: Blog, base_url: Optional[str] = None) -> dict:
    base_url = base_url or settings.BASE_URL
    url = blog_url(blog, base_url)
    published = _iso(blog.published_at or blog.created_at)

    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BlogPosting",
        "headline": blog.seo_title or blog.title,
        "description": _description(blog),
        "image": {
            "@type": "ImageObject",
            "url": og_image_url(blog, base_url),
            "width": OG_IMAGE_WIDTH,
            "height": OG_IMAGE_HEIGHT,
        },
        "author": {"@type": "Person", "name": blog.author, "url": f"{base_url}/about"},
        "publisher": _publisher(base_url),
        "datePublished": published,
        "dateModified": _iso(blog.updated_at) or published,
        "mainEntityOfPage": {"@type": "WebPage", "@id": url},
        "url": url,
        "wordCount": count_words(blog.content),
        "timeRequired": f"PT{blog.read_time}M",
        "keywords": list(blog.tags),
        "articleSection": blog.category,
        "isAccessibleForFree": True,
        "interactionStatistic": {
            "@type": "InteractionCounter",
            "interactionType": "https://schema.org/ReadAction",
            "userInteractionCount": blog.view_count or 0,
        },
        "potentialAction": {"@type": "ReadAction", "target": [url]},
    }


def blog_listing_structured_data(blogs: Sequence[Blog], base_url: Optional[str] = None) -> dict:
    base_url = base_url or settings.BASE_URL
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Blog",
        "name": f"{settings.AUTHOR_NAME}'s Blog",
        "url": f"{base_url}/blog",
        "author": {"@type": "Person", "name": settings.AUTHOR_NAME, "url": f"{base_url}/about"},
        "publisher": _publisher(base_url),
        "blogPost": [
            {
                "@type": "BlogPosting",
                "headline": blog.title,
                "description": blog.excerpt,
                "url": blog_url(blog, base_url),
                "datePublished": _iso(blog.published_at or blog.created_at),
                "author": {"@type": "Person", "name": blog.author},
                "image": blog.thumbnail or default_image_url(base_url),
            }
            for blog in blogs[:10]
        ],
    }


def breadcrumb_structured_data(items: Iterable[tuple], base_url: Optional[str] = None) -> dict:
    """``items`` are (name, url) pairs; relative urls are joined to the site."""
    base_url = base_url or settings.BASE_URL
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": position,
                "name": name,
                "item": url if url.startswith("http") else f"{base_url}{url}",
            }
            for position, (name, url) in enumerate(items, start=1)
        ],
    }


def website_structured_data(base_url: Optional[str] = None) -> dict:
    base_url = base_url or settings.BASE_URL
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "WebSite",
        "name": settings.SITE_NAME,
        "url": base_url,
        "author": {"@type": "Person", "name": settings.AUTHOR_NAME, "url": f"{base_url}/about"},
        "potentialAction": {
            "@type": "SearchAction",
            "target": {
                "@type": "EntryPoint",
                "urlTemplate": f"{base_url}/blog?search={{search_term_string}}",
            },
            "query-input": "required name=search_term_string",
        },
    }


def blog_metadata(blog: Blog, base_url: Optional[str] = None) -> dict:
    """Everything a page head needs for one post."""
    base_url = base_url or settings.BASE_URL
    url = blog_url(blog, base_url)
    title = blog.seo_title or blog.title
    description = _description(blog)
    image = og_image_url(blog, base_url)

    return {
        "title": title,
        "description": description,
        "canonical": url,
        "keywords": list(blog.tags),
        "openGraph": {
            "type": "article",
            "title": title,
            "description": description,
            "url": url,
            "siteName": settings.SITE_NAME,
            "images": [{"url": image, "width": OG_IMAGE_WIDTH, "height": OG_IMAGE_HEIGHT, "alt": blog.title}],
            "publishedTime": _iso(blog.published_at or blog.created_at),
            "modifiedTime": _iso(blog.updated_at),
            "authors": [blog.author],
            "section": blog.category,
            "tags": list(blog.tags),
        },
        "twitter": {
            "card": "summary_large_image",
            "title": title,
            "description": description,
            "images": [image],
        },
        "jsonLd": [
            blog_post_structured_data(blog, base_url),
            breadcrumb_structured_data(
                [("Home", "/"), ("Blog", "/blog"), (blog.title, f"/blog/{blog.slug}")],
                base_url,
            ),
        ],
    }


def build_sitemap(blogs: Sequence[Blog], base_url: Optional[str] = None, now: Optional[datetime] = None) -> bytes:
    base_url = base_url or settings.BASE_URL
    today = (now or utcnow()).date().isoformat()

    urlset = ET.Element("urlset", xmlns=SITEMAP_NS)

    def add(loc: str, lastmod: str, changefreq: str, priority: float) -> None:
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = loc
        ET.SubElement(url, "lastmod").text = lastmod
        ET.SubElement(url, "changefreq").text = changefreq
        ET.SubElement(url, "priority").text = f"{priority:.1f}"

    for path, changefreq, priority in STATIC_PAGES:
        add(f"{base_url}{path}", today, changefreq, priority)
    for blog in blogs:
        modified = blog.updated_at or blog.published_at or blog.created_at
        add(blog_url(blog, base_url), modified.date().isoformat(), "monthly", 0.6)

    return ET.tostring(urlset, encoding="utf-8", xml_declaration=True)


def _rfc822(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def build_rss_feed(blogs: Sequence[Blog], base_url: Optional[str] = None, now: Optional[datetime] = None) -> bytes:
    base_url = base_url or settings.BASE_URL

    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = f"{settings.AUTHOR_NAME}'s Blog"
    ET.SubElement(channel, "description").text = f"Articles from {settings.SITE_NAME}"
    ET.SubElement(channel, "link").text = f"{base_url}/blog"
    ET.SubElement(channel, "language").text = "en-us"
    ET.SubElement(channel, "lastBuildDate").text = _rfc822(now or utcnow())
    ET.SubElement(
        channel,
        f"{{{ATOM_NS}}}link",
        href=f"{base_url}/blog/feed.xml",
        rel="self",
        type="application/rss+xml",
    )

    for blog in blogs:
        url = blog_url(blog, base_url)
        item = ET.SubElement(channel, "item")
        ET.SubElement(item, "title").text = blog.title
        ET.SubElement(item, "description").text = blog.excerpt
        ET.SubElement(item, "link").text = url
        ET.SubElement(item, "guid", isPermaLink="true").text = url
        ET.SubElement(item, "pubDate").text = _rfc822(blog.published_at or blog.created_at)
        ET.SubElement(item, "author").text = blog.author
        for category in [blog.category, *blog.tags]:
            ET.SubElement(item, "category").text = category

    return ET.tostring(rss, encoding="utf-8", xml_declaration=True)
