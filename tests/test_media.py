"""Tests for media URL classification and thumbnails."""

import pytest

from showcase.core.media import (
    MediaType,
    format_media_url,
    google_drive_image_url,
    is_valid_url,
    media_type,
    project_thumbnail,
    youtube_video_id,
)
from showcase.core.models import Project

DRIVE_DIRECT = "https://drive.google.com/uc?export=view&id=abc_123-XYZ"


@pytest.mark.parametrize("url", [
    "https://drive.google.com/file/d/abc_123-XYZ/view?usp=sharing",
    "https://drive.google.com/open?id=abc_123-XYZ",
])
def test_drive_links_become_direct_images(url):
    assert google_drive_image_url(url) == DRIVE_DIRECT
    assert format_media_url(url) == DRIVE_DIRECT
    assert media_type(url) == MediaType.IMAGE


def test_drive_link_without_id_is_unchanged():
    assert google_drive_image_url("https://drive.google.com/drive/my-drive") == \
        "https://drive.google.com/drive/my-drive"


@pytest.mark.parametrize("url", [
    "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    "https://youtu.be/dQw4w9WgXcQ",
    "https://www.youtube.com/embed/dQw4w9WgXcQ",
    "https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
])
def test_youtube_ids(url):
    assert youtube_video_id(url) == "dQw4w9WgXcQ"
    assert media_type(url) == MediaType.VIDEO


def test_media_types():
    assert media_type("https://i.ibb.co/xyz/shot.png") == MediaType.IMAGE
    assert media_type("https://example.com/photo.JPG") == MediaType.IMAGE
    assert media_type("https://example.com/page") == MediaType.UNKNOWN
    assert youtube_video_id("https://example.com/page") is None


@pytest.mark.parametrize("url, valid", [
    ("https://app.vercel.app", True),
    ("http://localhost:3000/x", True),
    ("app.vercel.app", False),
    ("javascript:alert(1)", False),
    ("", False),
])
def test_is_valid_url(url, valid):
    assert is_valid_url(url) is valid


def _project(**kwargs):
    defaults = dict(id="p1", user_id="u1", title="My App", url="https://my-app.vercel.app")
    defaults.update(kwargs)
    return Project(**defaults)


def test_thumbnail_prefers_custom_image():
    project = _project(thumbnail_url="https://drive.google.com/file/d/abc_123-XYZ/view")
    assert project_thumbnail(project) == DRIVE_DIRECT


def test_thumbnail_falls_back_to_screenshot():
    thumb = project_thumbnail(_project(thumbnail_url="https://example.com/not-hosted.png"))
    assert "screenshotone" in thumb
    assert "https%3A%2F%2Fmy-app.vercel.app" in thumb


def test_thumbnail_placeholder_for_bad_url():
    thumb = project_thumbnail(_project(url="not a url"))
    assert thumb.startswith("https://placehold.co/")
    assert thumb.endswith("My%20App")
