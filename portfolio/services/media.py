import io
import logging
import re
from typing import Dict, List, Optional
from urllib.parse import urlparse

import cloudinary
import cloudinary.uploader
import cloudinary.utils
from cloudinary.exceptions import Error as CloudinaryError
from cloudinary.search import Search
from fastapi import HTTPException

from portfolio.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}

# Applied by Cloudinary to every incoming upload
INCOMING_TRANSFORMATION = [
    {"width": 1200, "height": 800, "crop": "limit", "quality": "auto:good", "format": "webp"}
]
UPLOAD_TAGS = ["blog", "portfolio", "admin-upload"]

DEFAULT_SEARCH_RESULTS = 20
MAX_SEARCH_RESULTS = 500

# Gravity only means something for crops that cut the image
GRAVITY_CROPS = {"fill", "lfill", "fill_pad", "crop", "thumb", "auto"}

RESPONSIVE_SIZES = {
    "sm": (400, 300),
    "md": (800, 600),
    "lg": (1200, 900),
    "xl": (1600, 1200),
}
THUMBNAIL_SIZES = {
    "small": (150, 150),
    "medium": (300, 300),
    "large": (500, 500),
}

_VERSION_SEGMENT = re.compile(r"^v\d+$")
_TRANSFORMATION_SEGMENT = re.compile(
    r"^(?:(?:w|h|c|q|f|g|x|y|r|e|a|o|b|l|u|t|z|d|ar|bo|co|dpr|fl)_[^,]+)(?:,(?:w|h|c|q|f|g|x|y|r|e|a|o|b|l|u|t|z|d|ar|bo|co|dpr|fl)_[^,]+)*$"
)


def extract_public_id(url: str) -> Optional[str]:
    """
    Recover the public id from a delivery URL, e.g.
    https://res.cloudinary.com/demo/image/upload/v1712/portfolio/blog/cat.jpg -> portfolio/blog/cat
    """
    try:
        parts = [part for part in urlparse(url).path.split("/") if part]
    except (TypeError, ValueError, AttributeError):
        return None

    version_index = next((i for i, part in enumerate(parts) if _VERSION_SEGMENT.match(part)), None)
    if version_index is not None:
        public_parts = parts[version_index + 1:]
    elif "upload" in parts:
        public_parts = parts[parts.index("upload") + 1:]
        while len(public_parts) > 1 and _TRANSFORMATION_SEGMENT.match(public_parts[0]):
            public_parts = public_parts[1:]
    else:
        return None

    if not public_parts:
        return None
    public_parts[-1] = re.sub(r"\.[^.]+$", "", public_parts[-1])
    return "/".join(public_parts)


def is_cloudinary_url(url: str) -> bool:
    try:
        hostname = urlparse(url).hostname or ""
    except (TypeError, ValueError, AttributeError):
        return False
    return hostname == "cloudinary.com" or hostname.endswith(".cloudinary.com")


class MediaService:
    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
    ):
        self.cloud_name = cloud_name if cloud_name is not None else settings.CLOUDINARY_CLOUD_NAME
        self.api_key = api_key if api_key is not None else settings.CLOUDINARY_API_KEY
        self.api_secret = api_secret if api_secret is not None else settings.CLOUDINARY_API_SECRET
        self.folder = settings.CLOUDINARY_UPLOAD_FOLDER
        self.max_bytes = settings.UPLOAD_MAX_BYTES
        self.timeout = settings.UPLOAD_TIMEOUT_SECONDS

    @property
    def is_configured(self) -> bool:
        placeholders = {"", "your-cloud-name", "your-api-key", "your-api-secret"}
        return not {self.cloud_name, self.api_key, self.api_secret} & placeholders

    @property
    def credentials(self) -> Dict[str, str]:
        return {"cloud_name": self.cloud_name, "api_key": self.api_key, "api_secret": self.api_secret}

    def require_configuration(self) -> None:
        if not self.is_configured:
            logger.error("Cloudinary configuration missing or incomplete")
            raise HTTPException(
                status_code=500,
                detail="Cloudinary is not properly configured. Please check your environment variables.",
            )

    def validate_upload(self, content_type: Optional[str], size: Optional[int]) -> None:
        """
        Reject files the CDN should never see. Runs before any network call.
        """
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise HTTPException(
                status_code=400,
                detail="Invalid file type. Only JPEG, PNG, GIF, and WebP images are allowed.",
            )
        if size is not None and size > self.max_bytes:
            raise HTTPException(
                status_code=400,
                detail=f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB.",
            )

    def upload_image(self, file_content: bytes, file_name: str) -> dict:
        """
        Upload an image and return Cloudinary's upload result.

        Raises HTTPException(500) when credentials are missing, the upload
        times out, or Cloudinary rejects it. There are no retries.
        """
        self.require_configuration()

        stream = io.BytesIO(file_content)
        stream.name = file_name
        try:
            result = cloudinary.uploader.upload(
                stream,
                folder=self.folder,
                tags=UPLOAD_TAGS,
                transformation=INCOMING_TRANSFORMATION,
                resource_type="image",
                use_filename=True,
                unique_filename=True,
                overwrite=False,
                timeout=self.timeout,
                **self.credentials,
            )
        except (CloudinaryError, OSError) as e:
            logger.error("Cloudinary upload of %s failed: %s", file_name, e)
            raise HTTPException(status_code=500, detail=f"Failed to upload image to Cloudinary: {e}")

        logger.info("Uploaded %s as %s (%s bytes)", file_name, result.get("public_id"), result.get("bytes"))
        return result

    def search_images(
        self,
        folder: Optional[str] = None,
        tags: Optional[List[str]] = None,
        max_results: int = DEFAULT_SEARCH_RESULTS,
        next_cursor: Optional[str] = None,
    ) -> dict:
        """
        Page through stored images, newest first.

        ``tags`` match any of the given tags. Returns the raw resources plus
        ``next_cursor`` (None on the last page) and ``total_count``.
        """
        self.require_configuration()

        clauses = []
        if folder:
            clauses.append(f"folder:{folder}")
        tags = [tag.strip() for tag in tags or [] if tag.strip()]
        if tags:
            clauses.append("(" + " OR ".join(f"tags:{tag}" for tag in tags) + ")")

        search = (
            Search()
            .expression(" AND ".join(clauses) or "resource_type:image")
            .sort_by("created_at", "desc")
            .max_results(min(max(1, max_results), MAX_SEARCH_RESULTS))
        )
        if next_cursor:
            search = search.next_cursor(next_cursor)

        try:
            result = search.execute(timeout=self.timeout, **self.credentials)
        except (CloudinaryError, OSError) as e:
            logger.error("Cloudinary search in %s failed: %s", folder or "all folders", e)
            raise HTTPException(status_code=500, detail="Failed to fetch media files")

        return {
            "resources": result.get("resources", []),
            "next_cursor": result.get("next_cursor"),
            "total_count": result.get("total_count", 0),
        }

    def delete_image(self, public_id: str) -> bool:
        try:
            result = cloudinary.uploader.destroy(public_id, invalidate=True, **self.credentials)
        except (CloudinaryError, OSError) as e:
            logger.error("Cloudinary delete of %s failed: %s", public_id, e)
            return False
        return result.get("result") == "ok"

    def build_image_url(
        self,
        public_id: str,
        width: Optional[int] = None,
        height: Optional[int] = None,
        crop: str = "limit",
        quality: str = "auto:good",
        format: str = "auto",
        gravity: str = "auto",
    ) -> str:
        options = {
            "width": width,
            "height": height,
            "crop": crop,
            "quality": quality,
            "fetch_format": format,
        }
        if crop in GRAVITY_CROPS:
            options["gravity"] = gravity
        url, _ = cloudinary.utils.cloudinary_url(
            public_id,
            cloud_name=self.cloud_name,
            secure=True,
            **{key: value for key, value in options.items() if value is not None},
        )
        return url

    def get_thumbnail_url(self, public_id: str, size: str = "medium") -> str:
        width, height = THUMBNAIL_SIZES[size]
        return self.build_image_url(public_id, width=width, height=height, crop="fill")

    def get_responsive_urls(self, public_id: str) -> Dict[str, str]:
        return {
            suffix: self.build_image_url(public_id, width=width, height=height, crop="fill")
            for suffix, (width, height) in RESPONSIVE_SIZES.items()
        }

    def get_og_image_url(self, public_id: str) -> str:
        return self.build_image_url(public_id, width=1200, height=630, crop="fill")

    def transform_url(self, url: Optional[str], **options) -> Optional[str]:
        """
        Re-derive a delivery URL with new transformation options. Works for
        any Cloudinary account named in the URL; other URLs pass through.
        """
        if not url or not is_cloudinary_url(url):
            return url
        public_id = extract_public_id(url)
        parts = [part for part in urlparse(url).path.split("/") if part]
        if not public_id or not parts:
            return url
        return MediaService(cloud_name=parts[0]).build_image_url(public_id, **options)

    def get_image_transformations(self, public_id: str) -> dict:
        return {
            "original": self.build_image_url(public_id),
            "thumbnail": self.get_thumbnail_url(public_id, "small"),
            "preview": self.build_image_url(public_id, width=800, height=600, crop="fit"),
            "banner": self.build_image_url(public_id, width=1200, height=400, crop="fill"),
            "og": self.get_og_image_url(public_id),
            "responsive": self.get_responsive_urls(public_id),
        }


# Singleton instance
media_service = MediaService()
