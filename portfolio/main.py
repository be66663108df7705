import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio.core.config import settings
from portfolio.core.errors import register_error_handlers
from portfolio.core.logging import setup_logging
from portfolio.db.session import create_db_and_tables

# Import models to ensure they are registered with SQLModel metadata
from portfolio.models import Blog, User

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger("portfolio")

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info("%s started", settings.PROJECT_NAME)
    yield

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    lifespan=lifespan,
    description="Blog and media API for the portfolio website"
)

@app.get("/")
def read_root():
    return {"message": "Welcome to the Portfolio API. Visit /docs for Swagger UI."}

from portfolio.routers import auth, blogs, upload, seo

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(blogs.router, prefix="/api/blogs", tags=["blogs"])
app.include_router(upload.router, prefix="/api/upload", tags=["upload"])
app.include_router(seo.router, tags=["seo"])

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
