import logging
from datetime import datetime, timezone

from sqlmodel import Session, select

from portfolio.core.logging import setup_logging
from portfolio.db.session import engine, create_db_and_tables
from portfolio.models.blog import Blog
from portfolio.schemas.blog import BlogCreate
from portfolio.services.auth import AuthService
from portfolio.services.blog import BlogService
from portfolio.utils.text import generate_slug

logger = logging.getLogger("portfolio.seed")

ADMIN_EMAIL = "admin@portfolio.com"
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"

SAMPLE_IMAGE = "https://res.cloudinary.com/demo/image/upload/w_400,h_300,c_fill/sample.jpg"
SAMPLE_FEATURED_IMAGE = "https://res.cloudinary.com/demo/image/upload/w_1200,h_600,c_fill/sample.jpg"

SAMPLE_BLOGS = [
    {
        "title": "Building Modern Web Applications with Next.js 14",
        "excerpt": "Discover the latest features in Next.js 14 and learn how to build scalable, performant web applications. From the new App Router to improved performance optimizations.",
        "content": """# Building Modern Web Applications with Next.js 14

Next.js 14 has changed the way we build web applications. With its new App Router, improved performance optimizations, and enhanced developer experience, it has become the go-to framework for React developers.

## Key Features

### App Router
- File-system based routing
- Layouts and templates
- Loading and error states

### Performance Improvements
- Turbopack for faster builds
- Improved image optimization
- Better code splitting

## Getting Started

```bash
npx create-next-app@latest my-app
cd my-app
npm run dev
```

## Conclusion

Next.js 14 offers powerful tools for building modern web applications and is an excellent choice for your next project.""",
        "category": "Development",
        "tags": ["Next.js", "React", "Web Development", "JavaScript"],
        "seo_title": "Building Modern Web Applications with Next.js 14 - Complete Guide",
        "seo_description": "Learn how to build scalable web applications with Next.js 14. Explore App Router, performance optimizations, and best practices.",
        "published_at": datetime(2024, 9, 18, tzinfo=timezone.utc),
    },
    {
        "title": "Mastering React Hooks: A Complete Guide",
        "excerpt": "Learn how to effectively use React Hooks to manage state and side effects in your functional components. This guide covers useState, useEffect, and custom hooks.",
        "content": """# Mastering React Hooks: A Complete Guide

React Hooks let us use state and other React features without writing class components.

## useState Hook

```javascript
const [count, setCount] = useState(0);
```

## useEffect Hook

The useEffect hook lets you perform side effects in function components, such as updating the document title after every render.

## Custom Hooks

Custom hooks let you extract component logic into reusable functions, for example a `useWindowWidth` hook that tracks resize events.

## Best Practices

1. **Always use hooks at the top level**
2. **Use dependency arrays correctly**
3. **Extract custom hooks** when logic becomes complex

## Conclusion

Hooks make functional components just as capable as class components, with less boilerplate.""",
        "category": "Development",
        "tags": ["React", "Hooks", "JavaScript", "Frontend"],
        "seo_title": "Mastering React Hooks - Complete Guide with Examples",
        "seo_description": "Learn React Hooks with practical examples. Master useState, useEffect, and custom hooks for better React development.",
        "published_at": datetime(2024, 9, 15, tzinfo=timezone.utc),
    },
    {
        "title": "TypeScript Best Practices for Frontend Development",
        "excerpt": "Explore TypeScript best practices that will make your frontend code more maintainable, type-safe, and scalable. Learn advanced patterns used by professional developers.",
        "content": """# TypeScript Best Practices for Frontend Development

TypeScript has become essential for modern frontend development. It provides type safety, better IDE support, and helps catch errors at compile time.

## Setting Up TypeScript

Start with a strict compiler configuration so mistakes surface early.

## Prefer Interfaces for Object Shapes

```typescript
interface User {
  id: number;
  name: string;
  email?: string;
}
```

## Use Union Types Instead of Enums

```typescript
type Status = 'idle' | 'loading' | 'success' | 'error';
```

## Conclusion

A few consistent habits make a TypeScript codebase far easier to maintain as it grows.""",
        "category": "Development",
        "tags": ["TypeScript", "Frontend", "JavaScript", "Best Practices"],
        "seo_title": "TypeScript Best Practices for Frontend Development",
        "seo_description": "Learn TypeScript best practices for frontend development. Improve code quality, type safety, and maintainability.",
        "published_at": datetime(2024, 9, 12, tzinfo=timezone.utc),
    },
]


def seed_admin(session: Session):
    return AuthService(session).ensure_admin(ADMIN_EMAIL, ADMIN_USERNAME, ADMIN_PASSWORD)


def seed_blogs(session: Session) -> int:
    """Create the sample posts that are not there yet; returns how many were added."""
    service = BlogService(session)
    created = 0
    for sample in SAMPLE_BLOGS:
        slug = generate_slug(sample["title"])
        if session.exec(select(Blog).where(Blog.slug == slug)).first():
            continue
        service.create_blog(BlogCreate(
            author="Adedayo",
            thumbnail=SAMPLE_IMAGE,
            featured_image=SAMPLE_FEATURED_IMAGE,
            is_published=True,
            **sample,
        ))
        created += 1
    return created


def seed():
    setup_logging()
    logger.info("Creating database and tables...")
    create_db_and_tables()

    with Session(engine) as session:
        admin = seed_admin(session)
        logger.info("Admin user: %s", admin.email)

        created = seed_blogs(session)
        logger.info("Seeded %d blog posts", created)


if __name__ == "__main__":
    seed()
