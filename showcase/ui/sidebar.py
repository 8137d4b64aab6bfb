"""Sidebar UI components for Project Showcase."""

import logging
import streamlit as st

from showcase.core.errors import LoadFailed, ShowcaseError
from showcase.core.models import TimeWindow
from showcase.ui.state import AppState
import config

logger = logging.getLogger(__name__)


def render_sidebar() -> None:
    """Render the complete sidebar."""
    with st.sidebar:
        render_auth_panel()
        st.markdown("---")
        render_filters()
        st.markdown("---")
        render_board_info()


def render_auth_panel() -> None:
    """Render sign in / sign up forms, or the signed-in user with sign out."""
    st.markdown("### Account")
    session = AppState.session()

    if session.is_authenticated:
        st.success(f"Signed in as {session.current_user.display_name}")
        if st.button("Sign out", use_container_width=True):
            try:
                session.sign_out()
            except ShowcaseError as e:
                logger.warning(f"Sign out failed: {e}")
                AppState.set_error(e.message)
            AppState.reset_for_auth_change()
            st.rerun()
        return

    tab_in, tab_up = st.tabs(["Sign in", "Sign up"])
    with tab_in:
        _render_credentials_form("signin", "Sign in", session.sign_in)
    with tab_up:
        _render_credentials_form("signup", "Create account", session.sign_up)


def _render_credentials_form(key: str, label: str, action) -> None:
    with st.form(f"{key}_form", clear_on_submit=False):
        email = st.text_input("Email", key=f"{key}_email")
        password = st.text_input("Password", type="password", key=f"{key}_password")
        submitted = st.form_submit_button(label, type="primary", use_container_width=True)

    if submitted:
        try:
            action(email, password)
        except ShowcaseError as e:
            logger.info(f"{label} rejected: {e}")
            st.error(e.message)
            return
        AppState.reset_for_auth_change()
        st.rerun()


def render_filters() -> None:
    """Render gallery search and time window controls."""
    st.markdown("### Filter Projects")
    board = AppState.board()

    text = st.text_input(
        "Search",
        value=board.filter_text,
        placeholder="Title, description or maker...",
        key="filter_text_input",
    )
    if text != board.filter_text:
        board.set_filter_text(text)

    windows = [w.value for w in TimeWindow]
    selected = st.radio(
        "Submitted:",
        windows,
        format_func=lambda x: config.TIME_WINDOWS[x]["label"],
        index=windows.index(board.time_window.value),
        key="time_window_radio",
    )
    if selected != board.time_window.value:
        board.set_time_window(selected)


def render_board_info() -> None:
    """Render project counts and a refresh button."""
    board = AppState.board()
    st.markdown("### Gallery")
    st.markdown(f"**Projects:** {len(board.projects):,}")
    if AppState.is_authenticated():
        st.markdown(f"**Your votes:** {len(board.voted)}")

    if st.button("Refresh", help="Reload projects and votes"):
        try:
            board.load()
        except LoadFailed as e:
            AppState.set_error(e.message)
        st.rerun()
