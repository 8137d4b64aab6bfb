"""
Theme constants and CSS injection for Project Showcase.
Centralizes all styling in one place for easy customization.
"""

import html

import streamlit as st
from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """Central theme configuration - all colors in one place."""
    # Primary palette
    primary: str = "#020202"
    accent: str = "#F0DFCB"

    # Backgrounds
    bg_page: str = "#F2F2F2"
    bg_card: str = "#FFFFFF"
    bg_muted: str = "rgba(240, 223, 203, 0.35)"

    # Text
    text_primary: str = "#111111"
    text_secondary: str = "#4b5563"
    text_muted: str = "#6b7280"

    # States
    voted: str = "#10b981"
    danger: str = "#ef4444"
    warning: str = "#f59e0b"

    # Borders
    border_subtle: str = "rgba(2, 2, 2, 0.08)"
    border_focus: str = "rgba(2, 2, 2, 0.35)"


THEME = Theme()


def get_css() -> str:
    """Generate CSS using theme constants."""
    return f"""
<style>
    :root {{
        --sc-primary: {THEME.primary};
        --sc-accent: {THEME.accent};
        --sc-text-primary: {THEME.text_primary};
        --sc-text-secondary: {THEME.text_secondary};
    }}

    [data-testid="stAppViewContainer"] {{
        background: {THEME.bg_page};
    }}

    .sc-header {{
        font-family: 'Playfair Display', Georgia, serif;
        color: var(--sc-primary);
        font-size: 2.6rem;
        font-weight: 700;
        margin-bottom: 0;
        letter-spacing: -0.02em;
    }}

    .sc-subheader {{
        font-family: 'Poppins', sans-serif;
        color: var(--sc-text-secondary);
        font-size: 1rem;
        margin-top: 0.25rem;
    }}

    /* Project card */
    .sc-card {{
        background: {THEME.bg_card};
        border: 1px solid {THEME.border_subtle};
        border-radius: 14px;
        padding: 1rem 1.25rem;
        margin: 0.5rem 0;
        transition: border-color 0.2s ease, box-shadow 0.2s ease;
    }}

    .sc-card:hover {{
        border-color: {THEME.border_focus};
        box-shadow: 0 4px 20px rgba(2, 2, 2, 0.06);
    }}

    .sc-card-title {{
        color: {THEME.text_primary};
        font-size: 1.15rem;
        font-weight: 600;
        line-height: 1.3;
    }}

    .sc-card-owner {{
        color: {THEME.text_muted};
        font-size: 0.85rem;
        margin-bottom: 0.5rem;
    }}

    .sc-card-text {{
        color: {THEME.text_secondary};
        font-size: 0.92rem;
        line-height: 1.6;
        white-space: pre-wrap;
    }}

    /* Vote badge */
    .sc-badge {{
        background: {THEME.accent};
        color: {THEME.primary};
        padding: 0.2rem 0.7rem;
        border-radius: 20px;
        font-size: 0.8rem;
        font-weight: 600;
        display: inline-block;
    }}

    .sc-badge-voted {{
        background: {THEME.voted};
        color: white;
    }}

    /* Comments */
    .sc-comment {{
        background: {THEME.bg_card};
        border-left: 3px solid {THEME.accent};
        padding: 0.6rem 0.9rem;
        margin: 0.4rem 0;
        border-radius: 0 8px 8px 0;
    }}

    .sc-reply {{
        margin-left: 2rem;
        background: {THEME.bg_muted};
    }}

    .sc-comment-meta {{
        color: {THEME.text_muted};
        font-size: 0.78rem;
        margin-bottom: 0.2rem;
    }}

    /* Messages */
    .sc-error {{
        background: rgba(239, 68, 68, 0.08);
        border: 1px solid rgba(239, 68, 68, 0.3);
        border-radius: 8px;
        padding: 0.75rem 1rem;
        color: #b91c1c;
        margin: 0.5rem 0;
        font-size: 0.9rem;
    }}

    .sc-warning {{
        background: rgba(245, 158, 11, 0.08);
        border: 1px solid rgba(245, 158, 11, 0.3);
        border-radius: 8px;
        padding: 0.75rem 1rem;
        color: #92400e;
        margin: 0.5rem 0;
        font-size: 0.85rem;
    }}

    .sc-info {{
        background: {THEME.bg_muted};
        border: 1px solid {THEME.border_subtle};
        border-radius: 8px;
        padding: 0.75rem 1rem;
        color: {THEME.text_primary};
        margin: 0.5rem 0;
        font-size: 0.85rem;
    }}

    [data-baseweb="tab"][aria-selected="true"] {{
        background: {THEME.primary};
        color: white;
    }}

    .stButton > button[kind="primary"] {{
        background: {THEME.primary};
        border: none;
    }}
</style>
"""


def inject_styles() -> None:
    """Inject CSS styles into the Streamlit app."""
    st.markdown(get_css(), unsafe_allow_html=True)


def render_header() -> None:
    """Render the styled application header."""
    st.markdown('<h1 class="sc-header">Project Showcase</h1>', unsafe_allow_html=True)
    st.markdown(
        '<p class="sc-subheader">Share what you built. Vote for what you love.</p>',
        unsafe_allow_html=True
    )


def escape_html(text: str) -> str:
    """Escape HTML special characters."""
    return html.escape(str(text), quote=True)


def render_error(message: str) -> None:
    """Render a styled error message."""
    st.markdown(f'<div class="sc-error">{escape_html(message)}</div>', unsafe_allow_html=True)


def render_warning(message: str) -> None:
    """Render a styled warning message."""
    st.markdown(f'<div class="sc-warning">{escape_html(message)}</div>', unsafe_allow_html=True)


def render_info(message: str) -> None:
    """Render a styled info message."""
    st.markdown(f'<div class="sc-info">{escape_html(message)}</div>', unsafe_allow_html=True)
