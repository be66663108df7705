from typing import Optional
from sqlmodel import Column, Field, SQLModel
from datetime import datetime

from portfolio.models.types import UTCDateTime, utcnow

ADMIN_ROLE = "admin"

class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # Basic Info
    email: str = Field(unique=True, index=True)
    username: str = Field(unique=True, index=True)
    password_hash: str

    # Opaque role string; only "admin" may author content
    role: str = Field(default="user")

    # Account Status
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime, nullable=False))

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE
