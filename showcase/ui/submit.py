"""Project submission form."""

import logging
import streamlit as st

from showcase.core.errors import ShowcaseError
from showcase.ui.state import AppState
from showcase.ui.styles import render_info
import config

logger = logging.getLogger(__name__)


def render_submit_form() -> None:
    """Render the upload form for a new project."""
    st.markdown("### Submit a Project")

    if not AppState.is_authenticated():
        render_info("Sign in to submit a project.")
        return

    with st.form("submit_project_form", clear_on_submit=True):
        title = st.text_input("Title", max_chars=config.TITLE_MAX_LENGTH)
        url = st.text_input("Project URL", placeholder="https://my-project.vercel.app")
        description = st.text_area(
            "Description",
            max_chars=config.DESCRIPTION_MAX_LENGTH,
            help="What does it do? How did you build it?",
        )
        thumbnail_url = st.text_input(
            "Thumbnail URL (optional)",
            help="Google Drive or ImgBB image link. A screenshot of the site is used otherwise.",
        )
        media_text = st.text_area(
            "Media URLs (optional, one per line)",
            help="Images or YouTube videos shown on the project page.",
        )
        submitted = st.form_submit_button("Submit", type="primary")

    if not submitted:
        return

    media_urls = parse_media_lines(media_text)
    try:
        project = AppState.board().submit_project(
            AppState.user_id(),
            title,
            url,
            description,
            thumbnail_url=thumbnail_url,
            media_urls=media_urls,
        )
    except ShowcaseError as e:
        logger.info(f"Submission rejected: {e}")
        st.error(e.message)
        return

    AppState.set_notice(f"'{project.title}' is live!")
    AppState.select_project(project.id)
    st.rerun()


def parse_media_lines(text: str) -> list[str]:
    """Split a textarea into media URLs, dropping blank lines."""
    return [line.strip() for line in (text or "").splitlines() if line.strip()]
