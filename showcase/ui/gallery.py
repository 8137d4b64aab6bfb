"""Gallery UI components (ranked project grid, vote buttons, leaderboard)."""

import logging
import streamlit as st
from typing import TYPE_CHECKING

from showcase.core.errors import RequiresAuthentication, ShowcaseError
from showcase.core.media import project_thumbnail
from showcase.ui.state import AppState
from showcase.ui.styles import escape_html, render_info
from showcase.visualization.leaderboard import LeaderboardBuilder
import config

if TYPE_CHECKING:
    from showcase.core.models import Project

logger = logging.getLogger(__name__)


def render_gallery(columns: int = config.GALLERY_COLUMNS) -> None:
    """Render the filtered, vote-ranked project grid."""
    board = AppState.board()
    view = board.filtered_view()
    projects = list(view)

    if not projects:
        if board.projects:
            render_info("No projects match your filters.")
        else:
            render_info("No projects yet. Be the first to submit one!")
        return

    st.caption(f"{len(projects)} of {len(board.projects)} projects")

    grid = st.columns(columns)
    for rank, project in enumerate(projects, 1):
        with grid[(rank - 1) % columns]:
            render_project_card(project, rank)


def render_project_card(project: "Project", rank: int) -> None:
    """Render a single project card with vote and details controls."""
    board = AppState.board()
    voted = board.has_voted(project.id)

    st.image(project_thumbnail(project), use_container_width=True)

    description = project.description
    if len(description) > config.DESCRIPTION_PREVIEW_CHARS:
        description = description[:config.DESCRIPTION_PREVIEW_CHARS].rstrip() + "..."

    st.markdown(f"""
    <div class="sc-card">
        <div class="sc-card-title">#{rank} {escape_html(project.title)}</div>
        <div class="sc-card-owner">by {escape_html(project.owner_display_name)}</div>
        <div class="sc-card-text">{escape_html(description)}</div>
    </div>
    """, unsafe_allow_html=True)

    col1, col2, col3 = st.columns([2, 2, 1])
    with col1:
        render_vote_button(project, key_prefix="gallery")
    with col2:
        if st.button("Details", key=f"details_{project.id}", use_container_width=True):
            AppState.select_project(project.id)
            st.rerun()
    with col3:
        badge_class = "sc-badge sc-badge-voted" if voted else "sc-badge"
        st.markdown(
            f"<span class='{badge_class}'>{project.vote_count}</span>",
            unsafe_allow_html=True
        )


def render_vote_button(project: "Project", key_prefix: str) -> None:
    """Vote toggle; disabled for the owner and while a toggle is pending."""
    board = AppState.board()
    user_id = AppState.user_id()
    voted = board.has_voted(project.id)
    own = user_id is not None and project.user_id == user_id

    label = "Voted" if voted else "Upvote"
    help_text = "You can't vote on your own project" if own else None
    disabled = own or board.is_pending(project.id)

    if st.button(
        f"👍 {label}",
        key=f"{key_prefix}_vote_{project.id}",
        disabled=disabled,
        help=help_text,
        type="primary" if voted else "secondary",
        use_container_width=True,
    ):
        toggle_vote(project.id)
        st.rerun()


def toggle_vote(project_id: str) -> None:
    """Toggle a vote and record any failure for display."""
    try:
        AppState.board().toggle_vote(project_id, AppState.user_id())
    except RequiresAuthentication as e:
        AppState.set_error(e.message)
    except ShowcaseError as e:
        logger.warning(f"Vote on {project_id} failed: {e}")
        AppState.set_error(e.message)


def render_leaderboard() -> None:
    """Render the top projects by votes as a bar chart."""
    projects = list(AppState.board().filtered_view())
    if not projects:
        return

    st.markdown("### Leaderboard")
    try:
        fig = LeaderboardBuilder().build(projects, voted_ids=AppState.board().voted)
        st.plotly_chart(fig, use_container_width=True)
    except Exception as e:
        logger.exception("Leaderboard rendering failed")
        st.error(f"Leaderboard unavailable: {e}")
