"""Personal dashboard: the user's own projects and the projects they voted for."""

import logging
import streamlit as st
from typing import TYPE_CHECKING

from showcase.core.errors import ShowcaseError
from showcase.ui.gallery import toggle_vote
from showcase.ui.state import AppState
from showcase.ui.styles import escape_html, render_info
from showcase.visualization.leaderboard import projects_frame
import config

if TYPE_CHECKING:
    from showcase.core.models import Project

logger = logging.getLogger(__name__)


def render_dashboard() -> None:
    """Render the signed-in user's dashboard."""
    if not AppState.is_authenticated():
        render_info("Sign in to see your dashboard.")
        return

    board = AppState.board()
    user_id = AppState.user_id()
    mine = board.owned_by(user_id)
    voted = board.voted_projects()

    col1, col2, col3 = st.columns(3)
    col1.metric("Your projects", len(mine))
    col2.metric("Votes received", sum(p.vote_count for p in mine))
    col3.metric("Votes given", len(voted))

    st.markdown("### Your Projects")
    if not mine:
        render_info("You haven't submitted anything yet.")
    for project in mine:
        render_owned_project(project)

    st.markdown("### Your Votes")
    if not voted:
        render_info("You haven't voted for any projects yet.")
        return

    for project in voted:
        col1, col2 = st.columns([4, 1])
        with col1:
            st.markdown(
                f"**{escape_html(project.title)}** by {escape_html(project.owner_display_name)}"
                f" · {project.vote_count} votes"
            )
        with col2:
            if st.button("Remove vote", key=f"unvote_{project.id}", use_container_width=True):
                toggle_vote(project.id)
                st.rerun()

    df = projects_frame(voted, board.voted)
    st.dataframe(
        df[["title", "owner", "votes", "url"]],
        hide_index=True,
        use_container_width=True,
        column_config={"url": st.column_config.LinkColumn("Link")},
    )


def render_owned_project(project: "Project") -> None:
    """One of the user's projects, with inline edit and delete."""
    board = AppState.board()
    user_id = AppState.user_id()

    with st.expander(f"{project.title} · {project.vote_count} votes"):
        if st.session_state.editing_project == project.id:
            with st.form(f"edit_project_{project.id}"):
                title = st.text_input("Title", value=project.title, max_chars=config.TITLE_MAX_LENGTH)
                description = st.text_area(
                    "Description", value=project.description, max_chars=config.DESCRIPTION_MAX_LENGTH
                )
                col1, col2 = st.columns(2)
                save = col1.form_submit_button("Save", type="primary")
                cancel = col2.form_submit_button("Cancel")
            if save:
                try:
                    board.update_project(project.id, user_id, title, description)
                except ShowcaseError as e:
                    st.error(e.message)
                    return
                st.session_state.editing_project = None
                st.rerun()
            if cancel:
                st.session_state.editing_project = None
                st.rerun()
            return

        st.markdown(escape_html(project.description) or "_No description_")
        st.markdown(f"[{escape_html(project.url)}]({project.url})")

        col1, col2, col3 = st.columns(3)
        if col1.button("Open", key=f"open_{project.id}"):
            AppState.select_project(project.id)
            st.rerun()
        if col2.button("Edit", key=f"edit_project_btn_{project.id}"):
            st.session_state.editing_project = project.id
            st.rerun()
        confirm = st.checkbox("Confirm delete", key=f"confirm_delete_{project.id}")
        if col3.button("Delete", key=f"delete_project_{project.id}", disabled=not confirm):
            try:
                board.delete_project(project.id, user_id)
            except ShowcaseError as e:
                logger.warning(f"Delete of {project.id} failed: {e}")
                AppState.set_error(e.message)
            else:
                if st.session_state.selected_project_id == project.id:
                    AppState.clear_selection()
                AppState.set_notice(f"Deleted '{project.title}'.")
            st.rerun()
