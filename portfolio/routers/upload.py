from typing import Optional
from fastapi import APIRouter, UploadFile, File, HTTPException, Depends, Query
from starlette.concurrency import run_in_threadpool

from portfolio.models.user import User
from portfolio.routers.auth import get_admin_user
from portfolio.services.media import (
    DEFAULT_SEARCH_RESULTS,
    MAX_SEARCH_RESULTS,
    MediaService,
    media_service,
)

router = APIRouter()

def get_media_service() -> MediaService:
    return media_service

@router.post("")
async def upload_image(
    file: UploadFile = File(...),
    admin_user: User = Depends(get_admin_user),
    service: MediaService = Depends(get_media_service),
):
    """
    Upload a blog image to Cloudinary.
    Returns the stored URL plus ready-made transformation URLs.
    Admin only.
    """
    # Reject on the declared size before buffering the body
    service.validate_upload(file.content_type, file.size)

    content = await file.read()
    service.validate_upload(file.content_type, len(content))

    result = await run_in_threadpool(service.upload_image, content, file.filename or "upload")

    transformations = service.get_image_transformations(result["public_id"])
    return {
        "success": True,
        "url": result.get("secure_url"),
        "publicId": result["public_id"],
        "width": result.get("width"),
        "height": result.get("height"),
        "format": result.get("format"),
        "size": result.get("bytes"),
        "filename": file.filename,
        "type": file.content_type,
        "createdAt": result.get("created_at"),
        "transformations": transformations,
        "thumbnail": transformations["thumbnail"],
        "preview": transformations["preview"],
        "responsive": transformations["responsive"],
    }


@router.get("")
def list_images(
    folder: Optional[str] = None,
    tags: Optional[str] = None,
    limit: int = Query(DEFAULT_SEARCH_RESULTS, ge=1, le=MAX_SEARCH_RESULTS),
    cursor: Optional[str] = None,
    admin_user: User = Depends(get_admin_user),
    service: MediaService = Depends(get_media_service),
):
    """
    Media library: stored images newest first, one page per call.
    ``tags`` is comma separated; pass ``nextCursor`` back as ``cursor``.
    Admin only.
    """
    result = service.search_images(
        folder=folder or service.folder,
        tags=tags.split(",") if tags else None,
        max_results=limit,
        next_cursor=cursor,
    )
    return {
        "success": True,
        "resources": [
            {
                "publicId": resource["public_id"],
                "url": resource.get("secure_url"),
                "width": resource.get("width"),
                "height": resource.get("height"),
                "format": resource.get("format"),
                "size": resource.get("bytes"),
                "createdAt": resource.get("created_at"),
                "folder": resource.get("folder"),
                "tags": resource.get("tags") or [],
                "transformations": service.get_image_transformations(resource["public_id"]),
            }
            for resource in result["resources"]
        ],
        "nextCursor": result["next_cursor"],
        "totalCount": result["total_count"],
    }


@router.delete("/{public_id:path}")
def delete_image(
    public_id: str,
    admin_user: User = Depends(get_admin_user),
    service: MediaService = Depends(get_media_service),
):
    """
    Delete an image from Cloudinary.
    Admin only.
    """
    if not service.delete_image(public_id):
        raise HTTPException(status_code=500, detail="Failed to delete image")

    return {"message": "Image deleted successfully"}
