import cloudinary.uploader
import pytest
from cloudinary.exceptions import Error as CloudinaryError
from fastapi import HTTPException

from portfolio.main import app
from portfolio.routers.upload import get_media_service
from portfolio.services import media as media_module
from portfolio.services.media import MediaService

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def uploads(monkeypatch):
    """Record calls to the Cloudinary uploader instead of hitting the network"""
    calls = []

    def fake_upload(file, **options):
        calls.append({"file": file, **options})
        return {
            "public_id": "portfolio/blog/cat",
            "secure_url": "https://res.cloudinary.com/demo/image/upload/v1712/portfolio/blog/cat.webp",
            "width": 1200,
            "height": 800,
            "format": "webp",
            "bytes": 2048,
            "created_at": "2024-09-18T10:00:00Z",
        }

    monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)
    return calls


@pytest.fixture
def media():
    service = MediaService(cloud_name="demo", api_key="key", api_secret="secret")
    app.dependency_overrides[get_media_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_media_service, None)


def test_upload_image(client, admin_headers, media, uploads):
    response = client.post(
        "/api/upload",
        files={"file": ("cat.png", PNG, "image/png")},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["publicId"] == "portfolio/blog/cat"
    assert data["url"].endswith("cat.webp")
    assert data["filename"] == "cat.png"
    assert data["type"] == "image/png"
    assert "w_150" in data["thumbnail"] and "c_fill" in data["thumbnail"]
    assert "w_800" in data["preview"] and "c_fit" in data["preview"]
    assert set(data["responsive"]) == {"sm", "md", "lg", "xl"}
    assert set(data["transformations"]) >= {"original", "thumbnail", "preview", "banner", "og", "responsive"}

    assert len(uploads) == 1
    call = uploads[0]
    assert call["folder"] == "portfolio/blog"
    assert call["tags"] == ["blog", "portfolio", "admin-upload"]
    assert call["timeout"] == 30
    assert call["cloud_name"] == "demo"
    assert call["transformation"][0]["crop"] == "limit"


def test_upload_too_large_never_reaches_cdn(client, admin_headers, media, uploads):
    big = b"\x00" * (15 * 1024 * 1024)
    response = client.post(
        "/api/upload",
        files={"file": ("huge.png", big, "image/png")},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "File too large. Maximum size is 10MB."
    assert uploads == []


def test_upload_rejects_non_images(client, admin_headers, media, uploads):
    response = client.post(
        "/api/upload",
        files={"file": ("notes.pdf", b"%PDF-1.4", "application/pdf")},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert "Invalid file type" in response.json()["detail"]
    assert uploads == []


def test_upload_requires_file(client, admin_headers, media):
    assert client.post("/api/upload", headers=admin_headers).status_code == 400


def test_upload_requires_admin(client, reader_headers, media, uploads):
    files = {"file": ("cat.png", PNG, "image/png")}
    assert client.post("/api/upload", files=files).status_code == 401
    assert client.post("/api/upload", files=files, headers=reader_headers).status_code == 403
    assert uploads == []


def test_upload_cdn_failure(client, admin_headers, media, monkeypatch):
    def failing_upload(file, **options):
        raise CloudinaryError("Request Timeout")

    monkeypatch.setattr(cloudinary.uploader, "upload", failing_upload)
    response = client.post(
        "/api/upload",
        files={"file": ("cat.png", PNG, "image/png")},
        headers=admin_headers,
    )
    assert response.status_code == 500
    assert "Request Timeout" in response.json()["detail"]


def test_upload_without_credentials(client, admin_headers, uploads):
    unconfigured = MediaService(cloud_name="", api_key="", api_secret="")
    app.dependency_overrides[get_media_service] = lambda: unconfigured

    response = client.post(
        "/api/upload",
        files={"file": ("cat.png", PNG, "image/png")},
        headers=admin_headers,
    )
    assert response.status_code == 500
    assert "not properly configured" in response.json()["detail"]
    assert uploads == []


def test_delete_image(client, admin_headers, media, monkeypatch):
    destroyed = []

    def fake_destroy(public_id, **options):
        destroyed.append(public_id)
        return {"result": "ok"}

    monkeypatch.setattr(cloudinary.uploader, "destroy", fake_destroy)
    response = client.delete("/api/upload/portfolio/blog/cat", headers=admin_headers)
    assert response.status_code == 200
    assert destroyed == ["portfolio/blog/cat"]


def test_delete_image_failure(client, admin_headers, media, monkeypatch):
    monkeypatch.setattr(cloudinary.uploader, "destroy", lambda public_id, **options: {"result": "not found"})
    response = client.delete("/api/upload/portfolio/blog/missing", headers=admin_headers)
    assert response.status_code == 500


def test_validate_upload_limits():
    service = MediaService(cloud_name="demo", api_key="key", api_secret="secret")
    service.validate_upload("image/webp", 10 * 1024 * 1024)

    with pytest.raises(HTTPException) as exc_info:
        service.validate_upload("image/png", 10 * 1024 * 1024 + 1)
    assert exc_info.value.status_code == 400

    with pytest.raises(HTTPException):
        service.validate_upload("image/svg+xml", 10)


@pytest.fixture
def searches(monkeypatch):
    """Replace Cloudinary's Search API with one that records the query"""
    recorded = []

    class RecordingSearch:
        def __init__(self):
            self.query = {}
            self.options = None
            recorded.append(self)

        def expression(self, value):
            self.query["expression"] = value
            return self

        def sort_by(self, field_name, direction=None):
            self.query["sort_by"] = (field_name, direction)
            return self

        def max_results(self, value):
            self.query["max_results"] = value
            return self

        def next_cursor(self, value):
            self.query["next_cursor"] = value
            return self

        def execute(self, **options):
            self.options = options
            return {
                "resources": [
                    {
                        "public_id": "portfolio/blog/hero",
                        "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/portfolio/blog/hero.webp",
                        "width": 1200,
                        "height": 800,
                        "format": "webp",
                        "bytes": 4096,
                        "created_at": "2024-09-18T10:00:00Z",
                        "folder": "portfolio/blog",
                        "tags": ["blog", "hero"],
                    }
                ],
                "next_cursor": "page-2",
                "total_count": 42,
            }

    monkeypatch.setattr(media_module, "Search", RecordingSearch)
    return recorded


def test_media_library(client, admin_headers, media, searches):
    response = client.get(
        "/api/upload",
        params={"tags": "hero, cover", "limit": 5, "cursor": "page-1"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["nextCursor"] == "page-2"
    assert data["totalCount"] == 42

    resource = data["resources"][0]
    assert resource["publicId"] == "portfolio/blog/hero"
    assert resource["tags"] == ["blog", "hero"]
    assert resource["size"] == 4096
    assert "w_150" in resource["transformations"]["thumbnail"]

    search = searches[0]
    assert search.query["expression"] == "folder:portfolio/blog AND (tags:hero OR tags:cover)"
    assert search.query["sort_by"] == ("created_at", "desc")
    assert search.query["max_results"] == 5
    assert search.query["next_cursor"] == "page-1"
    assert search.options["cloud_name"] == "demo"
    assert search.options["timeout"] == 30


def test_media_library_defaults(media, searches):
    result = media.search_images()
    assert result["total_count"] == 42
    assert searches[0].query["expression"] == "resource_type:image"
    assert searches[0].query["max_results"] == 20
    assert "next_cursor" not in searches[0].query


def test_media_library_requires_admin(client, reader_headers, media, searches):
    assert client.get("/api/upload").status_code == 401
    assert client.get("/api/upload", headers=reader_headers).status_code == 403
    assert searches == []


def test_media_library_rejects_bad_limit(client, admin_headers, media, searches):
    assert client.get("/api/upload", params={"limit": 0}, headers=admin_headers).status_code == 400
    assert searches == []


def test_media_library_cdn_failure(client, admin_headers, media, monkeypatch):
    class FailingSearch:
        def __getattr__(self, name):
            return lambda *args, **kwargs: self

        def execute(self, **options):
            raise CloudinaryError("Request Timeout")

    monkeypatch.setattr(media_module, "Search", FailingSearch)
    response = client.get("/api/upload", headers=admin_headers)
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to fetch media files"
