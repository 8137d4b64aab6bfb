"""
Project Showcase: share projects, vote on them and discuss them.
Main Streamlit application.

Run with: streamlit run app.py
"""

import logging

import streamlit as st

from showcase.core.errors import LoadFailed
from showcase.ui.dashboard import render_dashboard
from showcase.ui.details import render_project_details
from showcase.ui.gallery import render_gallery, render_leaderboard
from showcase.ui.sidebar import render_sidebar
from showcase.ui.state import AppState, init_session_state
from showcase.ui.styles import inject_styles, render_error, render_header, render_warning
from showcase.ui.submit import render_submit_form
import config


# -----------------------------------------------------------------------------
# Page Configuration
# -----------------------------------------------------------------------------

st.set_page_config(
    page_title="Project Showcase",
    page_icon="🚀",
    layout="wide",
    initial_sidebar_state="expanded"
)

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger("showcase.app")


# -----------------------------------------------------------------------------
# Data Loading
# -----------------------------------------------------------------------------

def ensure_board_loaded() -> bool:
    """Load the gallery once per browser session."""
    board = AppState.board()
    if board.is_loaded:
        return True

    with st.spinner("Loading projects..."):
        try:
            board.load()
        except LoadFailed as e:
            logger.error(f"Initial load failed: {e}")
            render_error(e.message)
            return False
    return True


# -----------------------------------------------------------------------------
# About Tab
# -----------------------------------------------------------------------------

def render_about_tab() -> None:
    st.markdown(f"""
## How it works

**Submit** a link to something you built, with an optional thumbnail and
extra screenshots or YouTube videos.

**Vote** for the projects you like. One vote per person per project, and you
can't vote for your own. Click again to take your vote back.

**Discuss** on each project's page. Comments can have one level of replies,
and you can edit or delete what you wrote.

### Ranking

Projects are ranked by vote count. Use the sidebar to search by title,
description or maker, or to narrow the gallery to projects submitted today,
in the last {config.WINDOW_WEEK_DAYS} days or in the last {config.WINDOW_MONTH_DAYS} days.

### Backend

This instance is running on the **{AppState.session().gateway.name}** backend.
""")


# -----------------------------------------------------------------------------
# Main Application
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()
    inject_styles()
    render_header()

    if config.DEFAULT_GATEWAY == "memory" and not config.SUPABASE_URL:
        st.caption("Running on the in-memory demo backend. Data resets when the server restarts.")

    render_sidebar()

    if AppState.has_error():
        render_warning(st.session_state.last_error)
        if st.button("Dismiss"):
            AppState.clear_error()
            st.rerun()

    notice = AppState.pop_notice()
    if notice:
        st.success(notice)

    if not ensure_board_loaded():
        st.stop()

    tab_projects, tab_submit, tab_dashboard, tab_about = st.tabs([
        "🏆 Projects", "➕ Submit", "👤 Dashboard", "ℹ️ About"
    ])

    with tab_projects:
        if AppState.has_selection():
            col_gallery, col_details = st.columns([3, 2])
            with col_gallery:
                render_gallery(columns=config.GALLERY_COLUMNS_WITH_DETAILS)
            with col_details:
                render_project_details()
        else:
            render_gallery()
            render_leaderboard()

    with tab_submit:
        render_submit_form()

    with tab_dashboard:
        render_dashboard()

    with tab_about:
        render_about_tab()


if __name__ == "__main__":
    main()
