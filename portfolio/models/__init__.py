# Import all models to register them with SQLModel
from portfolio.models.user import User, ADMIN_ROLE
from portfolio.models.blog import Blog

__all__ = [
    "User",
    "ADMIN_ROLE",
    "Blog",
]
