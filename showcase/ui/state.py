"""
Centralized session state management for Project Showcase.
Provides typed accessors and clear state transition methods.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Any

import streamlit as st

from showcase.core.board import ProjectBoard
from showcase.core.comments import CommentThread
from showcase.core.session import SessionState
from showcase.gateways.base import BaseGateway, get_gateway
from showcase.gateways.memory_gateway import MemoryStore
import config

logger = logging.getLogger(__name__)


@dataclass
class StateDefaults:
    """Default values for all session state variables."""
    gateway: Optional[Any] = None
    session: Optional[Any] = None
    board: Optional[Any] = None
    thread: Optional[Any] = None
    selected_project_id: Optional[str] = None
    replying_to: Optional[str] = None
    editing_comment: Optional[str] = None
    editing_project: Optional[str] = None
    last_error: Optional[str] = None
    last_notice: Optional[str] = None


@st.cache_resource(show_spinner=False)
def get_shared_store() -> MemoryStore:
    """
    One in-memory store per server process, shared by all browser sessions.
    """
    store = MemoryStore()
    if config.SEED_DEMO_DATA:
        store.seed_demo_data()
    return store


def create_gateway(name: str = config.DEFAULT_GATEWAY) -> BaseGateway:
    """Build the gateway for one browser session (auth is per session)."""
    if name == "memory":
        return get_gateway("memory", store=get_shared_store())
    return get_gateway(name)


class AppState:
    """
    Wrapper around Streamlit session state with type hints and defaults.
    Provides clear API for state transitions.
    """

    @classmethod
    def init(cls, gateway_name: str = config.DEFAULT_GATEWAY) -> None:
        """Initialize all session state with defaults and wire the engines."""
        defaults = StateDefaults()
        for field_name in defaults.__dataclass_fields__:
            if field_name not in st.session_state:
                st.session_state[field_name] = getattr(defaults, field_name)

        if st.session_state.gateway is None:
            gateway = create_gateway(gateway_name)
            session = SessionState(gateway)
            session.restore()
            st.session_state.gateway = gateway
            st.session_state.session = session
            st.session_state.board = ProjectBoard(gateway, session)
            st.session_state.thread = CommentThread(gateway, session)
            logger.info(f"Initialized session with gateway '{gateway.name}'")

    # Typed accessors

    @staticmethod
    def session() -> SessionState:
        return st.session_state.session

    @staticmethod
    def board() -> ProjectBoard:
        return st.session_state.board

    @staticmethod
    def thread() -> CommentThread:
        return st.session_state.thread

    @staticmethod
    def user_id() -> Optional[str]:
        return st.session_state.session.user_id

    # Transitions

    @classmethod
    def select_project(cls, project_id: str) -> None:
        """Open a project's detail panel and clear comment editing state."""
        st.session_state.selected_project_id = project_id
        cls.clear_comment_editing()

    @classmethod
    def clear_selection(cls) -> None:
        st.session_state.selected_project_id = None
        cls.clear_comment_editing()

    @classmethod
    def clear_comment_editing(cls) -> None:
        st.session_state.replying_to = None
        st.session_state.editing_comment = None

    @classmethod
    def reset_for_auth_change(cls) -> None:
        """Clear per-user UI state after sign in or sign out."""
        st.session_state.editing_project = None
        cls.clear_comment_editing()
        cls.clear_error()

    @classmethod
    def set_error(cls, message: str) -> None:
        """Record an error for display."""
        st.session_state.last_error = message

    @classmethod
    def clear_error(cls) -> None:
        """Clear any recorded error."""
        st.session_state.last_error = None

    @classmethod
    def set_notice(cls, message: str) -> None:
        st.session_state.last_notice = message

    @classmethod
    def pop_notice(cls) -> Optional[str]:
        notice = st.session_state.get("last_notice")
        st.session_state.last_notice = None
        return notice

    # Property-style accessors for common checks
    @staticmethod
    def has_selection() -> bool:
        """Check if a project is selected."""
        return st.session_state.get("selected_project_id") is not None

    @staticmethod
    def has_error() -> bool:
        """Check if there's an error to display."""
        return st.session_state.get("last_error") is not None

    @staticmethod
    def is_authenticated() -> bool:
        session = st.session_state.get("session")
        return session is not None and session.is_authenticated


def init_session_state(gateway_name: str = config.DEFAULT_GATEWAY) -> None:
    """Convenience function to initialize session state."""
    AppState.init(gateway_name)
