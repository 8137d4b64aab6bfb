"""Tests for the leaderboard table and chart."""

from datetime import timedelta

from showcase.visualization.leaderboard import LeaderboardBuilder, projects_frame

from conftest import NOW, make_project


def _projects():
    return [
        make_project("a", 7, NOW, title="Alpha", owner_name="ada@example.com"),
        make_project("b", 4, NOW - timedelta(days=1), title="Beta"),
        make_project("c", 1, NOW - timedelta(days=2), title="Gamma"),
    ]


def test_frame_columns_and_voted_flag():
    df = projects_frame(_projects(), voted_ids={"b"})
    assert list(df.columns) == ["id", "title", "owner", "votes", "created_at", "url", "voted"]
    assert df["voted"].tolist() == [False, True, False]
    assert df.loc[1, "owner"] == "Anonymous"


def test_empty_frame_keeps_columns():
    df = projects_frame([])
    assert df.empty
    assert "votes" in df.columns


def test_chart_lists_top_project_last_for_horizontal_bars():
    fig = LeaderboardBuilder(top_n=2).build(_projects(), voted_ids={"a"})
    bar = fig.data[0]
    assert list(bar.y) == ["b", "a"]
    assert list(fig.layout.yaxis.ticktext) == ["Beta", "Alpha"]
    assert list(bar.x) == [4, 7]
    assert bar.marker.color[1] == LeaderboardBuilder.COLORS["voted"]


def test_projects_sharing_a_title_get_separate_bars():
    projects = [
        make_project("a", 5, NOW, title="Todo App"),
        make_project("b", 3, NOW, title="Todo App"),
    ]
    fig = LeaderboardBuilder().build(projects)
    assert list(fig.data[0].y) == ["b", "a"]
    assert list(fig.data[0].x) == [3, 5]
    assert list(fig.layout.yaxis.ticktext) == ["Todo App", "Todo App"]
