import pytest

from portfolio.services.media import MediaService, extract_public_id, is_cloudinary_url


@pytest.fixture
def media():
    return MediaService(cloud_name="demo", api_key="key", api_secret="secret")


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://res.cloudinary.com/demo/image/upload/v1712/portfolio/blog/cat.jpg", "portfolio/blog/cat"),
        ("https://res.cloudinary.com/demo/image/upload/w_400,h_300,c_fill/v1/sample.jpg", "sample"),
        ("https://res.cloudinary.com/demo/image/upload/w_400,h_300,c_fill/sample.jpg", "sample"),
        ("https://res.cloudinary.com/demo/image/upload/sample.png", "sample"),
        ("https://example.com/images/cat.jpg", None),
        ("not a url", None),
    ],
)
def test_extract_public_id(url, expected):
    assert extract_public_id(url) == expected


def test_is_cloudinary_url():
    assert is_cloudinary_url("https://res.cloudinary.com/demo/image/upload/sample.jpg")
    assert not is_cloudinary_url("https://cloudinary.com.evil.example/sample.jpg")
    assert not is_cloudinary_url("https://example.com/sample.jpg")


def test_is_configured():
    assert MediaService(cloud_name="demo", api_key="key", api_secret="secret").is_configured
    assert not MediaService(cloud_name="your-cloud-name", api_key="key", api_secret="secret").is_configured
    assert not MediaService(cloud_name="demo", api_key="", api_secret="secret").is_configured


def test_build_image_url(media):
    url = media.build_image_url("portfolio/blog/cat", width=400, height=300, crop="fill")
    assert url.startswith("https://res.cloudinary.com/demo/image/upload/")
    for part in ("w_400", "h_300", "c_fill", "g_auto", "q_auto:good", "f_auto"):
        assert part in url
    assert url.endswith("portfolio/blog/cat")


def test_build_image_url_skips_gravity_for_non_cropping_modes(media):
    url = media.build_image_url("sample", width=800, height=600, crop="fit")
    assert "c_fit" in url
    assert "g_auto" not in url


def test_image_transformations(media):
    transformations = media.get_image_transformations("sample")
    assert "w_150" in transformations["thumbnail"]
    assert "w_1200" in transformations["banner"] and "h_400" in transformations["banner"]
    assert "h_630" in transformations["og"]
    assert "w_1600" in transformations["responsive"]["xl"]


def test_transform_url_uses_the_account_in_the_url(media):
    url = media.transform_url(
        "https://res.cloudinary.com/other/image/upload/v3/blog/pic.jpg", width=1200, height=630, crop="fill"
    )
    assert url.startswith("https://res.cloudinary.com/other/")
    assert "w_1200" in url and "h_630" in url
    assert "blog/pic" in url


def test_transform_url_passes_other_urls_through(media):
    assert media.transform_url("https://example.com/pic.jpg", width=10) == "https://example.com/pic.jpg"
    assert media.transform_url(None) is None
