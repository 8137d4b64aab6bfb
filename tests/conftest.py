"""Shared fixtures: a seeded in-memory backend and engines wired to it."""

from datetime import datetime, timezone

import pytest

from showcase.core.board import ProjectBoard
from showcase.core.comments import CommentThread
from showcase.core.models import Project
from showcase.core.session import SessionState
from showcase.gateways.memory_gateway import MemoryGateway, MemoryStore

PASSWORD = "password"


@pytest.fixture
def store():
    store = MemoryStore()
    store.seed_demo_data()
    return store


@pytest.fixture
def gateway(store):
    return MemoryGateway(store)


@pytest.fixture
def session(gateway):
    return SessionState(gateway)


@pytest.fixture
def grace(session):
    """Session signed in as grace, who owns 'Bug Bingo' and voted for 'Pixel Garden'."""
    return session.sign_in("grace@example.com", PASSWORD)


@pytest.fixture
def board(gateway, session, grace):
    board = ProjectBoard(gateway, session)
    board.load()
    return board


@pytest.fixture
def thread(gateway, session):
    return CommentThread(gateway, session, delete_policy="orphan")


def project_id(store, title):
    for row in store.projects.values():
        if row["title"] == title:
            return row["id"]
    raise KeyError(title)


def make_project(pid, votes, created_at, title=None, owner="someone", **kwargs):
    return Project(
        id=pid,
        user_id=owner,
        title=title or f"Project {pid}",
        url=f"https://{pid}.example.com",
        created_at=created_at,
        vote_count=votes,
        **kwargs,
    )


NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
