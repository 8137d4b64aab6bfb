"""UI components for the Project Showcase Streamlit application."""

from .state import AppState, init_session_state
from .styles import inject_styles, render_header, THEME
from . import sidebar
from . import gallery
from . import details
from . import submit
from . import dashboard

__all__ = [
    "AppState",
    "init_session_state",
    "inject_styles",
    "render_header",
    "THEME",
    "sidebar",
    "gallery",
    "details",
    "submit",
    "dashboard",
]
