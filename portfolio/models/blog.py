from typing import Optional, List
from datetime import datetime
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import Text

from portfolio.models.types import TagList, UTCDateTime, utcnow

class Blog(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # Content
    title: str = Field(index=True)
    slug: str = Field(unique=True, index=True)  # URL-friendly title
    excerpt: str = ""  # Short summary for listings and social previews
    content: str = Field(default="", sa_column=Column(Text, nullable=False))  # Markdown
    author: str

    # Images (usually Cloudinary URLs)
    thumbnail: Optional[str] = None  # Card image
    featured_image: Optional[str] = None  # Full-size image for the detail page

    # Categorization
    category: str = Field(default="General", index=True)
    tags: List[str] = Field(default_factory=list, sa_column=Column(TagList, nullable=False))

    # Stats
    read_time: int = Field(default=1)  # Minutes, computed when content is written
    view_count: int = Field(default=0)

    # Status; a post is a draft exactly when it is not published
    is_published: bool = Field(default=False, index=True)
    published_at: Optional[datetime] = Field(default=None, sa_column=Column(UTCDateTime, nullable=True))

    # SEO overrides
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime, nullable=False))

    @property
    def is_draft(self) -> bool:
        return not self.is_published

    @property
    def sort_date(self) -> datetime:
        return self.published_at or self.created_at
