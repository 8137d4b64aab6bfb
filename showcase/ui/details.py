"""Project details panel components (media, vote control, comment thread)."""

import logging
import streamlit as st
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from showcase.core.errors import LoadFailed, ProjectNotFound, ShowcaseError
from showcase.core.media import (
    MediaType,
    format_media_url,
    media_type,
    project_thumbnail,
    youtube_embed_url,
    youtube_video_id,
)
from showcase.ui.gallery import render_vote_button
from showcase.ui.state import AppState
from showcase.ui.styles import escape_html, render_info

if TYPE_CHECKING:
    from showcase.core.models import Comment, Project

logger = logging.getLogger(__name__)


def render_project_details() -> None:
    """Render the selected project's details panel."""
    board = AppState.board()
    project_id = st.session_state.selected_project_id

    try:
        project = board.get(project_id)
    except ProjectNotFound:
        try:
            project = board.refresh_project(project_id)
        except ShowcaseError as e:
            render_info(e.message)
            if st.button("Back to gallery"):
                AppState.clear_selection()
                st.rerun()
            return

    if st.button("← Back to gallery"):
        AppState.clear_selection()
        st.rerun()

    render_project_card(project)
    render_media(project)
    render_comment_thread(project)


def render_project_card(project: "Project") -> None:
    """Render the project header, link and vote control."""
    st.markdown(f"""
    <div class="sc-card">
        <div class="sc-card-title">{escape_html(project.title)}</div>
        <div class="sc-card-owner">by {escape_html(project.owner_display_name)}
            · {format_age(project.created_at)}</div>
        <div class="sc-card-text">{escape_html(project.description)}</div>
    </div>
    """, unsafe_allow_html=True)

    col1, col2, col3 = st.columns([2, 2, 1])
    with col1:
        render_vote_button(project, key_prefix="detail")
    with col2:
        st.link_button("Visit project ↗", project.url, use_container_width=True)
    with col3:
        st.markdown(f"<span class='sc-badge'>{project.vote_count}</span>", unsafe_allow_html=True)


def render_media(project: "Project") -> None:
    """Render the project's media as a simple carousel."""
    urls = list(project.media_urls) or [project_thumbnail(project)]

    if len(urls) > 1:
        index = st.select_slider(
            "Media",
            options=list(range(len(urls))),
            format_func=lambda i: f"{i + 1} / {len(urls)}",
            key=f"media_{project.id}",
        )
    else:
        index = 0

    url = urls[index]
    kind = media_type(url)
    if kind == MediaType.VIDEO:
        video_id = youtube_video_id(url)
        st.video(youtube_embed_url(video_id) if video_id else url)
    elif kind == MediaType.IMAGE or url == urls[0]:
        st.image(format_media_url(url), use_container_width=True)
    else:
        st.markdown(f"[Open media]({url})")


def render_comment_thread(project: "Project") -> None:
    """Render the comment form and the two-level thread."""
    thread = AppState.thread()
    if thread.project_id != project.id:
        try:
            thread.load(project.id)
        except LoadFailed as e:
            logger.warning(f"Comments for {project.id} failed to load: {e}")
            st.error(e.message)
            return

    st.markdown(f"### Comments ({thread.count()})")

    if AppState.is_authenticated():
        with st.form(f"comment_form_{project.id}", clear_on_submit=True):
            text = st.text_area("Add a comment", key=f"new_comment_{project.id}")
            if st.form_submit_button("Post", type="primary"):
                _run(lambda: thread.add_comment(project.id, AppState.user_id(), text))
    else:
        render_info("Sign in to join the conversation.")

    if not thread.top_level:
        st.caption("No comments yet.")

    for comment in thread.top_level:
        render_comment(comment)
        for reply in comment.replies:
            render_comment(reply)


def render_comment(comment: "Comment") -> None:
    """Render one comment with reply/edit/delete controls."""
    is_reply = comment.is_reply
    thread = AppState.thread()
    user_id = AppState.user_id()
    css = "sc-comment sc-reply" if is_reply else "sc-comment"
    edited = " · edited" if comment.updated_at else ""

    if st.session_state.editing_comment == comment.id:
        with st.form(f"edit_form_{comment.id}"):
            text = st.text_area("Edit comment", value=comment.content)
            col1, col2 = st.columns(2)
            save = col1.form_submit_button("Save", type="primary")
            cancel = col2.form_submit_button("Cancel")
        if save:
            if _run(lambda: thread.edit_comment(comment.id, text), rerun=False):
                st.session_state.editing_comment = None
            st.rerun()
        if cancel:
            st.session_state.editing_comment = None
            st.rerun()
        return

    st.markdown(f"""
    <div class="{css}">
        <div class="sc-comment-meta">{escape_html(comment.author_display_name)}
            · {format_age(comment.created_at)}{edited}</div>
        <div>{escape_html(comment.content)}</div>
    </div>
    """, unsafe_allow_html=True)

    if user_id is None:
        return

    cols = st.columns([1, 1, 1, 3])
    if not is_reply and cols[0].button("Reply", key=f"reply_{comment.id}"):
        st.session_state.replying_to = comment.id
        st.rerun()
    if comment.user_id == user_id:
        if cols[1].button("Edit", key=f"edit_{comment.id}"):
            st.session_state.editing_comment = comment.id
            st.rerun()
        if cols[2].button("Delete", key=f"delete_{comment.id}"):
            _run(lambda: thread.delete_comment(comment.id))

    if not is_reply and st.session_state.replying_to == comment.id:
        with st.form(f"reply_form_{comment.id}", clear_on_submit=True):
            text = st.text_area("Write a reply")
            col1, col2 = st.columns(2)
            send = col1.form_submit_button("Reply", type="primary")
            cancel = col2.form_submit_button("Cancel")
        if send:
            if _run(lambda: thread.add_reply(comment.id, user_id, text), rerun=False):
                st.session_state.replying_to = None
            st.rerun()
        if cancel:
            st.session_state.replying_to = None
            st.rerun()


def _run(action, rerun: bool = True) -> bool:
    """Run a comment mutation, recording a failure for display."""
    try:
        action()
    except ShowcaseError as e:
        logger.warning(f"Comment action failed: {e}")
        AppState.set_error(e.message)
        ok = False
    else:
        ok = True
    if rerun:
        st.rerun()
    return ok


def format_age(created_at: datetime) -> str:
    """Relative time like '3h ago', falling back to the date after a week."""
    hours = int((datetime.now(timezone.utc) - created_at).total_seconds() // 3600)
    if hours < 1:
        return "Just now"
    if hours < 24:
        return f"{hours}h ago"
    if hours < 168:
        return f"{hours // 24}d ago"
    return created_at.astimezone().strftime("%b %d, %Y")
