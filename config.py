"""
Project Showcase Configuration
Central configuration for backend settings, limits, and display defaults.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Project paths
PROJECT_ROOT = Path(__file__).parent

# Load environment variables
load_dotenv(PROJECT_ROOT / ".env")

# Backend settings
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
GATEWAY_TIMEOUT_SECONDS = float(os.getenv("GATEWAY_TIMEOUT_SECONDS", "10"))

# Falls back to the in-process store when no Supabase credentials are present
DEFAULT_GATEWAY = os.getenv(
    "SHOWCASE_GATEWAY",
    "supabase" if SUPABASE_URL and SUPABASE_ANON_KEY else "memory",
)
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "1") not in ("0", "false", "False", "")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Table names
TABLE_PROJECTS = "projects"
TABLE_PROJECTS_VIEW = "projects_with_votes"
TABLE_VOTES = "votes"
TABLE_COMMENTS = "comments"
TABLE_USERS = "users"

# Postgres error codes surfaced by the REST layer
PG_UNIQUE_VIOLATION = "23505"
PG_FOREIGN_KEY_VIOLATION = "23503"
PG_INSUFFICIENT_PRIVILEGE = "42501"

# Project field limits
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
COMMENT_MAX_LENGTH = 2000

# Time windows (days before the start of today)
WINDOW_WEEK_DAYS = 7
WINDOW_MONTH_DAYS = 30

# Comment deletion: "orphan" keeps replies visible, "cascade" removes them too
COMMENT_DELETE_POLICY = os.getenv("COMMENT_DELETE_POLICY", "orphan")

# Thumbnails
SCREENSHOT_URL_TEMPLATE = (
    "https://api.screenshotone.com/take?url={url}"
    "&width=800&height=600&format=jpeg&quality=80&block_ads=true&delay=2"
)
PLACEHOLDER_URL_TEMPLATE = "https://placehold.co/600x400/F0DFCB/020202?text={text}"
GOOGLE_DRIVE_IMAGE_TEMPLATE = "https://drive.google.com/uc?export=view&id={file_id}"
YOUTUBE_EMBED_TEMPLATE = "https://www.youtube.com/embed/{video_id}"

# Gallery settings
GALLERY_COLUMNS = 3
GALLERY_COLUMNS_WITH_DETAILS = 1
DESCRIPTION_PREVIEW_CHARS = 140
ANONYMOUS_NAME = "Anonymous"

# Visualization settings
LEADERBOARD_TOP_N = 10
PLOT_HEIGHT = 420
PLOT_WIDTH = 800

# Time window registry
TIME_WINDOWS = {
    "all": {"label": "All time"},
    "today": {"label": "Today"},
    "week": {"label": "This week"},
    "month": {"label": "This month"},
}

DEFAULT_TIME_WINDOW = "all"
