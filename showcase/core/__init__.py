"""
Core components for Project Showcase.
"""

from .models import Comment, Project, TimeWindow, User
from .session import SessionState
from .board import ProjectBoard, RankedView
from .comments import CommentThread, DeletePolicy

__all__ = [
    "Comment",
    "Project",
    "TimeWindow",
    "User",
    "SessionState",
    "ProjectBoard",
    "RankedView",
    "CommentThread",
    "DeletePolicy",
]
