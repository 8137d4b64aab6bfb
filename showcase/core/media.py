"""
Media classification helpers.
Pure string functions for Google Drive, ImgBB and YouTube links.
"""

import logging
import re
from enum import Enum
from typing import Optional, TYPE_CHECKING
from urllib.parse import quote, urlparse

import config

if TYPE_CHECKING:
    from showcase.core.models import Project

logger = logging.getLogger(__name__)

_DRIVE_FILE_RE = re.compile(r"/file/d/([a-zA-Z0-9_-]+)")
_DRIVE_ID_PARAM_RE = re.compile(r"[?&]id=([a-zA-Z0-9_-]+)")
_IMAGE_EXTENSION_RE = re.compile(r"\.(jpg|jpeg|png|gif|webp|svg)$", re.IGNORECASE)

YOUTUBE_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/watch\?.*v=([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtu\.be/([a-zA-Z0-9_-]{11})"),
]


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    UNKNOWN = "unknown"


def is_google_drive_url(url: str) -> bool:
    """Check if a URL points at a shared Google Drive file."""
    return "drive.google.com" in url and ("/file/" in url or "?id=" in url)


def google_drive_image_url(drive_url: str) -> str:
    """
    Convert a Google Drive sharing URL to a direct image URL.

    Supports both /file/d/{id}/view and open?id={id} formats.
    Returns the input unchanged when no file id can be found.
    """
    if not drive_url:
        return ""

    match = _DRIVE_FILE_RE.search(drive_url) or _DRIVE_ID_PARAM_RE.search(drive_url)
    if match:
        return config.GOOGLE_DRIVE_IMAGE_TEMPLATE.format(file_id=match.group(1))
    return drive_url


def is_imgbb_url(url: str) -> bool:
    return "ibb.co" in url


def is_youtube_url(url: str) -> bool:
    return "youtube.com" in url or "youtu.be" in url


def youtube_video_id(url: str) -> Optional[str]:
    """Extract the 11-character video id from any common YouTube URL form."""
    if not url:
        return None
    for pattern in YOUTUBE_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def youtube_embed_url(video_id: str) -> str:
    return config.YOUTUBE_EMBED_TEMPLATE.format(video_id=video_id)


def media_type(url: str) -> MediaType:
    """Classify a media URL as image, video or unknown."""
    if is_youtube_url(url):
        return MediaType.VIDEO
    if is_google_drive_url(url) or is_imgbb_url(url) or _IMAGE_EXTENSION_RE.search(url):
        return MediaType.IMAGE
    return MediaType.UNKNOWN


def is_valid_url(url: str) -> bool:
    """Accept absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(url.strip())
    except (AttributeError, ValueError):
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def format_media_url(url: str) -> str:
    """Normalize a media URL for direct display."""
    if is_google_drive_url(url):
        return google_drive_image_url(url)
    # ImgBB and plain image links are already direct
    return url


def project_thumbnail(project: "Project") -> str:
    """
    Pick the thumbnail to show for a project.

    Order: custom Drive/ImgBB thumbnail, website screenshot, titled placeholder.
    """
    thumb = project.thumbnail_url
    if thumb and (is_google_drive_url(thumb) or is_imgbb_url(thumb)):
        return format_media_url(thumb)

    if is_valid_url(project.url):
        return config.SCREENSHOT_URL_TEMPLATE.format(url=quote(project.url, safe=""))

    logger.debug(f"No usable thumbnail for project {project.id}, using placeholder")
    return config.PLACEHOLDER_URL_TEMPLATE.format(text=quote(project.title or "Project"))
