"""
CommentThread: two-level comment tree for one project.
Mutations are confirmed by the gateway first, then applied locally.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union, TYPE_CHECKING

from showcase.core.errors import (
    CommentMutationFailed,
    CommentNotFound,
    GatewayError,
    LoadFailed,
    RequiresAuthentication,
    ValidationError,
)
from showcase.core.models import Comment
from showcase.core.session import SessionState
import config

if TYPE_CHECKING:
    from showcase.gateways.base import BaseGateway

logger = logging.getLogger(__name__)


class DeletePolicy(str, Enum):
    """What happens to replies when their top-level comment is deleted."""
    ORPHAN = "orphan"      # replies stay, promoted to top level
    CASCADE = "cascade"    # replies are deleted first


def clean_text(text: str) -> str:
    text = (text or "").strip()
    if not text:
        raise ValidationError("Comment cannot be empty.")
    if len(text) > config.COMMENT_MAX_LENGTH:
        raise ValidationError(f"Comment must be at most {config.COMMENT_MAX_LENGTH} characters.")
    return text


class CommentThread:
    """
    Top-level comments (newest first), each with its replies (oldest first).

    Only one level of nesting exists: a reply's parent is always top-level.
    """

    def __init__(
        self,
        gateway: "BaseGateway",
        session: Optional[SessionState] = None,
        delete_policy: Union[DeletePolicy, str] = config.COMMENT_DELETE_POLICY,
    ):
        self.gateway = gateway
        self.session = session
        self.delete_policy = DeletePolicy(delete_policy)
        self.project_id: Optional[str] = None
        self.top_level: list[Comment] = []

    def load(self, project_id: str) -> None:
        """
        Fetch top-level comments and attach their replies.

        Raises:
            LoadFailed: If any query fails; prior state is kept
        """
        try:
            parents = self.gateway.query_comments(project_id)
            assembled = [
                replace(parent, replies=tuple(self.gateway.query_replies(parent.id)))
                for parent in parents
            ]
        except GatewayError as e:
            raise LoadFailed(f"Failed to load comments: {e.message}") from e

        self.project_id = project_id
        self.top_level = assembled
        logger.info(f"Loaded {self.count()} comments for project {project_id}")

    def count(self) -> int:
        return sum(1 + len(c.replies) for c in self.top_level)

    def find(self, comment_id: str) -> Optional[Comment]:
        try:
            top, reply = self._locate(comment_id)
        except CommentNotFound:
            return None
        parent = self.top_level[top]
        return parent if reply is None else parent.replies[reply]

    def _locate(self, comment_id: str) -> tuple[int, Optional[int]]:
        """Return (top-level index, reply index or None) for a comment id."""
        for i, parent in enumerate(self.top_level):
            if parent.id == comment_id:
                return i, None
            for j, reply in enumerate(parent.replies):
                if reply.id == comment_id:
                    return i, j
        raise CommentNotFound()

    def _author(self, author_id: Optional[str]) -> str:
        author_id = author_id or (self.session.user_id if self.session else None)
        if not author_id:
            raise RequiresAuthentication("Please sign in to comment.")
        return author_id

    # Mutations

    def add_comment(self, project_id: str, author_id: Optional[str], text: str) -> Comment:
        """Post a top-level comment and put it first in the thread."""
        author_id = self._author(author_id)
        text = clean_text(text)

        try:
            comment = self.gateway.insert_comment(author_id, project_id, text)
        except GatewayError as e:
            raise CommentMutationFailed(f"Failed to add comment: {e.message}") from e

        comment = replace(comment, replies=())
        if self.project_id in (None, project_id):
            self.project_id = project_id
            self.top_level.insert(0, comment)
        return comment

    def add_reply(self, parent_id: str, author_id: Optional[str], text: str) -> Comment:
        """Post a reply and append it to its parent's replies."""
        author_id = self._author(author_id)
        text = clean_text(text)

        top, reply = self._locate(parent_id)
        if reply is not None:
            raise ValidationError("Replies can only be added to top-level comments.")
        parent = self.top_level[top]

        try:
            comment = self.gateway.insert_comment(
                author_id, parent.project_id, text, parent_id=parent.id
            )
        except GatewayError as e:
            raise CommentMutationFailed(f"Failed to add reply: {e.message}") from e

        # Re-locate: the list may have changed while the call was out
        top, _ = self._locate(parent_id)
        parent = self.top_level[top]
        self.top_level[top] = replace(parent, replies=parent.replies + (comment,))
        return comment

    def edit_comment(self, comment_id: str, new_text: str) -> Comment:
        """Change a comment's text; the gateway decides if the caller may."""
        new_text = clean_text(new_text)
        self._locate(comment_id)

        try:
            self.gateway.update_comment(comment_id, new_text)
        except GatewayError as e:
            raise CommentMutationFailed(f"Failed to edit comment: {e.message}") from e

        edited_at = datetime.now(timezone.utc)
        top, reply = self._locate(comment_id)
        parent = self.top_level[top]
        if reply is None:
            updated = replace(parent, content=new_text, updated_at=edited_at)
            self.top_level[top] = updated
            return updated

        updated = replace(parent.replies[reply], content=new_text, updated_at=edited_at)
        replies = parent.replies[:reply] + (updated,) + parent.replies[reply + 1:]
        self.top_level[top] = replace(parent, replies=replies)
        return updated

    def delete_comment(self, comment_id: str) -> None:
        """
        Delete a comment or reply.

        Deleting a top-level comment follows the thread's delete policy for
        its replies.
        """
        top, reply = self._locate(comment_id)
        parent = self.top_level[top]

        if reply is not None:
            self._delete_remote(comment_id)
            top, reply = self._locate(comment_id)
            parent = self.top_level[top]
            self.top_level[top] = replace(
                parent, replies=parent.replies[:reply] + parent.replies[reply + 1:]
            )
            return

        if self.delete_policy == DeletePolicy.CASCADE:
            self._delete_cascade(parent)
            return

        self._delete_remote(comment_id)
        promoted = [replace(r, parent_id=None) for r in parent.replies]
        remaining = [c for c in self.top_level if c.id != comment_id] + promoted
        self.top_level = sorted(remaining, key=lambda c: c.created_at, reverse=True)

    def _delete_cascade(self, parent: Comment) -> None:
        deleted: set[str] = set()
        try:
            for reply in parent.replies:
                self._delete_remote(reply.id)
                deleted.add(reply.id)
            self._delete_remote(parent.id)
        except CommentMutationFailed:
            if deleted:
                top, _ = self._locate(parent.id)
                current = self.top_level[top]
                self.top_level[top] = replace(
                    current, replies=tuple(r for r in current.replies if r.id not in deleted)
                )
            raise
        self.top_level = [c for c in self.top_level if c.id != parent.id]

    def _delete_remote(self, comment_id: str) -> None:
        try:
            self.gateway.delete_comment(comment_id)
        except GatewayError as e:
            raise CommentMutationFailed(f"Failed to delete comment: {e.message}") from e
        logger.info(f"Deleted comment {comment_id}")
