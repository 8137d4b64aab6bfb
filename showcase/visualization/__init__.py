"""Charts for Project Showcase."""

from .leaderboard import LeaderboardBuilder, projects_frame

__all__ = ["LeaderboardBuilder", "projects_frame"]
