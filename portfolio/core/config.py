from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Portfolio API"
    DATABASE_URL: str = "sqlite:///./portfolio.db"
    SECRET_KEY: str = "supersecretkey_change_me_in_production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 1 day
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Site / SEO
    SITE_URL: str = "http://localhost:3000"
    SITE_NAME: str = "Adedayo Portfolio"
    AUTHOR_NAME: str = "Adedayo"

    # Blog
    POSTS_PER_PAGE: int = 9  # 3x3 grid
    MAX_PAGINATION_BUTTONS: int = 5
    READ_TIME_WPM: int = 200
    DEFAULT_CATEGORY: str = "All"

    # Cloudinary
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_UPLOAD_FOLDER: str = "portfolio/blog"
    UPLOAD_MAX_BYTES: int = 10 * 1024 * 1024  # 10MB
    UPLOAD_TIMEOUT_SECONDS: int = 30

    @property
    def BASE_URL(self) -> str:
        return self.SITE_URL.rstrip("/")

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
