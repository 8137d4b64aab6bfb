"""
Vote leaderboard visualization.
Uses Plotly for a horizontal bar chart of the top-ranked projects.
"""

from typing import Iterable, Optional, Sequence

import pandas as pd
import plotly.graph_objects as go

from showcase.core.models import Project
import config


def projects_frame(projects: Sequence[Project], voted_ids: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """
    Tabulate projects for charts and tables.

    Returns:
        DataFrame with columns: id, title, owner, votes, created_at, url, voted
    """
    voted = set(voted_ids or ())
    return pd.DataFrame(
        [
            {
                "id": p.id,
                "title": p.title,
                "owner": p.owner_display_name,
                "votes": p.vote_count,
                "created_at": p.created_at,
                "url": p.url,
                "voted": p.id in voted,
            }
            for p in projects
        ],
        columns=["id", "title", "owner", "votes", "created_at", "url", "voted"],
    )


class LeaderboardBuilder:
    """
    Builds a Plotly bar chart of projects ranked by votes.

    Bars for projects the current user voted for are highlighted.
    """

    COLORS = {
        "default": "#F0DFCB",
        "voted": "#10b981",
        "outline": "#020202",
    }

    def __init__(
        self,
        top_n: int = config.LEADERBOARD_TOP_N,
        height: int = config.PLOT_HEIGHT,
        width: int = config.PLOT_WIDTH
    ):
        self.top_n = top_n
        self.height = height
        self.width = width

    def build(self, projects: Sequence[Project], voted_ids: Optional[Iterable[str]] = None) -> go.Figure:
        """
        Build the leaderboard chart.

        Args:
            projects: Projects already in ranking order
            voted_ids: Ids to highlight

        Returns:
            Plotly figure, highest-voted project at the top
        """
        df = projects_frame(list(projects)[:self.top_n], voted_ids)
        # Plotly draws horizontal bars bottom-up
        df = df.iloc[::-1]

        colors = [self.COLORS["voted"] if v else self.COLORS["default"] for v in df["voted"]]
        hover = [
            f"<b>{title}</b><br>by {owner}<br>{votes} votes"
            for title, owner, votes in zip(df["title"], df["owner"], df["votes"])
        ]

        # Bars are keyed by id so projects sharing a title stay separate
        fig = go.Figure(
            go.Bar(
                x=df["votes"],
                y=df["id"],
                orientation="h",
                marker=dict(color=colors, line=dict(color=self.COLORS["outline"], width=1)),
                hovertext=hover,
                hoverinfo="text",
            )
        )
        fig.update_layout(
            height=self.height,
            width=self.width,
            margin=dict(l=10, r=10, t=10, b=10),
            xaxis_title="Votes",
            yaxis_title=None,
            plot_bgcolor="rgba(0,0,0,0)",
            paper_bgcolor="rgba(0,0,0,0)",
            showlegend=False,
        )
        fig.update_yaxes(
            type="category",
            tickmode="array",
            tickvals=df["id"].tolist(),
            ticktext=df["title"].tolist(),
        )
        fig.update_xaxes(rangemode="tozero", dtick=1 if df["votes"].max() <= 10 else None)
        return fig
