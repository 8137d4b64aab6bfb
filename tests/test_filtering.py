"""Tests for the filtered, ranked gallery view."""

from datetime import timedelta

import pytest

from showcase.core.board import ProjectBoard, window_start
from showcase.core.models import TimeWindow
from showcase.core.session import SessionState
from showcase.gateways.memory_gateway import MemoryGateway

from conftest import NOW, make_project


@pytest.fixture
def empty_board():
    gateway = MemoryGateway()
    return ProjectBoard(gateway, SessionState(gateway))


def test_time_windows_drop_old_projects(empty_board):
    fresh = make_project("a", votes=3, created_at=NOW)
    old = make_project("b", votes=5, created_at=NOW - timedelta(days=40))
    empty_board.projects = [fresh, old]

    assert empty_board.filtered_view(now=NOW).ids() == ["b", "a"]
    for window in ("today", "week", "month"):
        empty_board.set_time_window(window)
        assert empty_board.filtered_view(now=NOW).ids() == ["a"]


def test_week_window_boundary(empty_board):
    start = window_start(TimeWindow.WEEK, NOW)
    inside = make_project("in", votes=0, created_at=start)
    outside = make_project("out", votes=9, created_at=start - timedelta(seconds=1))
    empty_board.projects = [inside, outside]
    empty_board.set_time_window(TimeWindow.WEEK)

    assert empty_board.filtered_view(now=NOW).ids() == ["in"]


def test_window_start_is_local_midnight():
    start = window_start(TimeWindow.TODAY, NOW)
    assert (start.hour, start.minute, start.second) == (0, 0, 0)
    assert window_start(TimeWindow.MONTH, NOW) == start - timedelta(days=30)
    assert window_start(TimeWindow.ALL, NOW) is None


def test_ties_keep_load_order(empty_board):
    empty_board.projects = [
        make_project("x", votes=2, created_at=NOW),
        make_project("y", votes=4, created_at=NOW),
        make_project("z", votes=2, created_at=NOW - timedelta(hours=1)),
    ]
    view = empty_board.filtered_view(now=NOW)
    assert view.ids() == ["y", "x", "z"]
    assert view.ids() == view.ids()


def test_text_filter_matches_title_description_and_owner(empty_board):
    empty_board.projects = [
        make_project("a", 1, NOW, title="Weather Bot"),
        make_project("b", 2, NOW, description="A WEATHER dashboard"),
        make_project("c", 3, NOW, owner_name="weatherman@example.com"),
        make_project("d", 4, NOW, title="Chess"),
    ]
    empty_board.set_filter_text("  weather ")
    assert empty_board.filtered_view(now=NOW).ids() == ["c", "b", "a"]


def test_whitespace_filter_matches_everything(empty_board):
    empty_board.projects = [make_project("a", 1, NOW), make_project("b", 2, NOW)]
    empty_board.set_filter_text("   ")
    assert len(empty_board.filtered_view(now=NOW)) == 2


def test_view_is_a_snapshot(empty_board):
    empty_board.projects = [make_project("a", 1, NOW)]
    view = empty_board.filtered_view(now=NOW)

    empty_board.projects.append(make_project("b", 5, NOW))

    assert view.ids() == ["a"]
    assert empty_board.filtered_view(now=NOW).ids() == ["b", "a"]


def test_unknown_time_window_rejected(empty_board):
    with pytest.raises(ValueError):
        empty_board.set_time_window("decade")
