"""
In-process gateway backend.
Keeps tables in memory and enforces the same constraints as the hosted store.
"""

import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Sequence

from showcase.core.errors import (
    AuthenticationFailed,
    ForeignKeyViolation,
    GatewayError,
    PermissionDenied,
    UniqueConstraintViolation,
)
from showcase.core.models import Comment, Project, User
from .base import BaseGateway, register_gateway
import config

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStore:
    """
    Shared tables for one or more MemoryGateway sessions.

    Rows are plain dicts shaped like the hosted tables. A single lock
    guards every read and write.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self.accounts: dict[str, dict] = {}   # email -> {"id", "password", "created_at"}
        self.users: dict[str, dict] = {}
        self.projects: dict[str, dict] = {}
        self.votes: dict[str, dict] = {}
        self.comments: dict[str, dict] = {}

    def seed_demo_data(self) -> None:
        """Populate a few users, projects, votes and comments for local runs."""
        with self.lock:
            if self.projects:
                return

            now = _now()
            people = {}
            for email in ("ada@example.com", "linus@example.com", "grace@example.com"):
                user_id = _new_id()
                self.accounts[email] = {"id": user_id, "password": "password", "created_at": now}
                self.users[user_id] = {"id": user_id, "email": email, "created_at": now}
                people[email] = user_id

            samples = [
                ("ada@example.com", "Pixel Garden", "https://pixel-garden.vercel.app",
                 "Grow a generative garden one pixel at a time.", timedelta(hours=3)),
                ("linus@example.com", "Commit Poet", "https://commit-poet.vercel.app",
                 "Turns your git log into haiku.", timedelta(days=4)),
                ("grace@example.com", "Bug Bingo", "https://bug-bingo.vercel.app",
                 "Bingo cards generated from your issue tracker.", timedelta(days=20)),
                ("ada@example.com", "Retro Radio", "https://retro-radio.vercel.app",
                 "Streams public-domain broadcasts from the 1930s.", timedelta(days=45)),
            ]
            project_ids = []
            for email, title, url, description, age in samples:
                project_id = _new_id()
                self.projects[project_id] = {
                    "id": project_id,
                    "user_id": people[email],
                    "title": title,
                    "vercel_url": url,
                    "description": description,
                    "thumbnail_url": None,
                    "media_urls": [],
                    "created_at": now - age,
                }
                project_ids.append(project_id)

            for email, index in (("linus@example.com", 0), ("grace@example.com", 0),
                                 ("ada@example.com", 1), ("ada@example.com", 2)):
                vote_id = _new_id()
                self.votes[vote_id] = {
                    "id": vote_id,
                    "user_id": people[email],
                    "project_id": project_ids[index],
                    "created_at": now,
                }

            comment_id = _new_id()
            self.comments[comment_id] = {
                "id": comment_id,
                "user_id": people["linus@example.com"],
                "project_id": project_ids[0],
                "parent_id": None,
                "content": "Love the colour palette!",
                "created_at": now - timedelta(hours=2),
                "updated_at": None,
            }
            reply_id = _new_id()
            self.comments[reply_id] = {
                "id": reply_id,
                "user_id": people["ada@example.com"],
                "project_id": project_ids[0],
                "parent_id": comment_id,
                "content": "Thanks! It's generated from the time of day.",
                "created_at": now - timedelta(hours=1),
                "updated_at": None,
            }
            logger.info(f"Seeded demo data: {len(self.projects)} projects, {len(self.users)} users")


@register_gateway("memory")
class MemoryGateway(BaseGateway):
    """
    Gateway over a MemoryStore.

    Features:
    - Unique (user, project) votes and unique project URLs
    - Foreign keys from votes/comments/projects to users and projects
    - Author/owner scoped writes, like row-level security
    - One-shot failure injection per operation for tests
    - A call log and an optional hook run before each call
    """

    def __init__(self, store: Optional[MemoryStore] = None, seed: bool = False):
        """
        Initialize the in-memory gateway.

        Args:
            store: Shared tables (defaults to a fresh, private store)
            seed: Whether to populate demo data
        """
        self.store = store or MemoryStore()
        if seed:
            self.store.seed_demo_data()
        self._session_user: Optional[User] = None
        self._failures: dict[str, list[GatewayError]] = {}
        self.calls: list[tuple] = []
        self.before_call: Optional[Callable[[str, tuple], None]] = None

    @property
    def name(self) -> str:
        return "memory"

    # Test helpers

    def fail_next(self, operation: str, error: Optional[GatewayError] = None) -> None:
        """Make the next call to `operation` raise `error` (default: GatewayError)."""
        self._failures.setdefault(operation, []).append(
            error or GatewayError(f"Injected failure for {operation}")
        )

    def calls_to(self, operation: str) -> list[tuple]:
        return [args for op, args in self.calls if op == operation]

    def _enter(self, operation: str, *args) -> None:
        self.calls.append((operation, args))
        if self.before_call:
            self.before_call(operation, args)
        queued = self._failures.get(operation)
        if queued:
            raise queued.pop(0)

    def _require_actor(self, user_id: str) -> None:
        if self._session_user is None or self._session_user.id != user_id:
            raise PermissionDenied(code=config.PG_INSUFFICIENT_PRIVILEGE)

    # Row projections

    def _project_row(self, row: dict) -> dict:
        votes = sum(1 for v in self.store.votes.values() if v["project_id"] == row["id"])
        owner = self.store.users.get(row["user_id"], {})
        return {**row, "vote_count": votes, "user_email": owner.get("email")}

    def _comment(self, row: dict) -> Comment:
        author = self.store.users.get(row["user_id"])
        return Comment.from_row({**row, "users": {"email": author["email"]} if author else None})

    # Projects

    def query_projects(self) -> list[Project]:
        self._enter("query_projects")
        with self.store.lock:
            rows = [self._project_row(r) for r in self.store.projects.values()]
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        rows.sort(key=lambda r: r["vote_count"], reverse=True)
        return [Project.from_row(r) for r in rows]

    def get_project(self, project_id: str) -> Optional[Project]:
        self._enter("get_project", project_id)
        with self.store.lock:
            row = self.store.projects.get(project_id)
            return Project.from_row(self._project_row(row)) if row else None

    def insert_project(
        self,
        owner_id: str,
        title: str,
        url: str,
        description: str,
        thumbnail_url: Optional[str] = None,
        media_urls: Sequence[str] = (),
    ) -> Project:
        self._enter("insert_project", owner_id, title, url)
        with self.store.lock:
            self._require_actor(owner_id)
            if owner_id not in self.store.users:
                raise ForeignKeyViolation(code=config.PG_FOREIGN_KEY_VIOLATION)
            if any(p["vercel_url"] == url for p in self.store.projects.values()):
                raise UniqueConstraintViolation(
                    "This URL has already been uploaded", code=config.PG_UNIQUE_VIOLATION
                )
            project_id = _new_id()
            row = {
                "id": project_id,
                "user_id": owner_id,
                "title": title,
                "vercel_url": url,
                "description": description,
                "thumbnail_url": thumbnail_url,
                "media_urls": list(media_urls),
                "created_at": _now(),
            }
            self.store.projects[project_id] = row
            return Project.from_row(self._project_row(row))

    def _owned_project(self, project_id: str, owner_id: str) -> dict:
        self._require_actor(owner_id)
        row = self.store.projects.get(project_id)
        if row is None or row["user_id"] != owner_id:
            raise PermissionDenied("Project not found or not yours")
        return row

    def update_project(self, project_id: str, owner_id: str, title: str, description: str) -> None:
        self._enter("update_project", project_id, owner_id)
        with self.store.lock:
            row = self._owned_project(project_id, owner_id)
            row["title"] = title
            row["description"] = description

    def delete_project(self, project_id: str, owner_id: str) -> None:
        self._enter("delete_project", project_id, owner_id)
        with self.store.lock:
            self._owned_project(project_id, owner_id)
            del self.store.projects[project_id]
            # ON DELETE CASCADE for votes and comments
            for table in (self.store.votes, self.store.comments):
                for row_id in [k for k, v in table.items() if v["project_id"] == project_id]:
                    del table[row_id]

    # Votes

    def query_votes_by_user(self, user_id: str) -> list[str]:
        self._enter("query_votes_by_user", user_id)
        with self.store.lock:
            return [v["project_id"] for v in self.store.votes.values() if v["user_id"] == user_id]

    def insert_vote(self, user_id: str, project_id: str) -> None:
        self._enter("insert_vote", user_id, project_id)
        with self.store.lock:
            self._require_actor(user_id)
            if user_id not in self.store.users or project_id not in self.store.projects:
                raise ForeignKeyViolation(code=config.PG_FOREIGN_KEY_VIOLATION)
            if any(v["user_id"] == user_id and v["project_id"] == project_id
                   for v in self.store.votes.values()):
                raise UniqueConstraintViolation(
                    "You have already voted for this project", code=config.PG_UNIQUE_VIOLATION
                )
            vote_id = _new_id()
            self.store.votes[vote_id] = {
                "id": vote_id,
                "user_id": user_id,
                "project_id": project_id,
                "created_at": _now(),
            }

    def delete_vote(self, user_id: str, project_id: str) -> None:
        self._enter("delete_vote", user_id, project_id)
        with self.store.lock:
            self._require_actor(user_id)
            for vote_id in [k for k, v in self.store.votes.items()
                            if v["user_id"] == user_id and v["project_id"] == project_id]:
                del self.store.votes[vote_id]

    # Comments

    def query_comments(self, project_id: str) -> list[Comment]:
        self._enter("query_comments", project_id)
        with self.store.lock:
            rows = [c for c in self.store.comments.values()
                    if c["project_id"] == project_id and c["parent_id"] is None]
            rows.sort(key=lambda c: c["created_at"], reverse=True)
            return [self._comment(r) for r in rows]

    def query_replies(self, parent_id: str) -> list[Comment]:
        self._enter("query_replies", parent_id)
        with self.store.lock:
            rows = [c for c in self.store.comments.values() if c["parent_id"] == parent_id]
            rows.sort(key=lambda c: c["created_at"])
            return [self._comment(r) for r in rows]

    def insert_comment(
        self,
        author_id: str,
        project_id: str,
        content: str,
        parent_id: Optional[str] = None,
    ) -> Comment:
        self._enter("insert_comment", author_id, project_id, parent_id)
        with self.store.lock:
            self._require_actor(author_id)
            if author_id not in self.store.users or project_id not in self.store.projects:
                raise ForeignKeyViolation(code=config.PG_FOREIGN_KEY_VIOLATION)
            if parent_id is not None and parent_id not in self.store.comments:
                raise ForeignKeyViolation(code=config.PG_FOREIGN_KEY_VIOLATION)
            comment_id = _new_id()
            row = {
                "id": comment_id,
                "user_id": author_id,
                "project_id": project_id,
                "parent_id": parent_id,
                "content": content,
                "created_at": _now(),
                "updated_at": None,
            }
            self.store.comments[comment_id] = row
            return self._comment(row)

    def _authored_comment(self, comment_id: str) -> dict:
        row = self.store.comments.get(comment_id)
        if row is None:
            raise PermissionDenied("Comment not found")
        self._require_actor(row["user_id"])
        return row

    def update_comment(self, comment_id: str, content: str) -> None:
        self._enter("update_comment", comment_id)
        with self.store.lock:
            row = self._authored_comment(comment_id)
            row["content"] = content
            row["updated_at"] = _now()

    def delete_comment(self, comment_id: str) -> None:
        self._enter("delete_comment", comment_id)
        with self.store.lock:
            self._authored_comment(comment_id)
            del self.store.comments[comment_id]
            # ON DELETE SET NULL for replies
            for row in self.store.comments.values():
                if row["parent_id"] == comment_id:
                    row["parent_id"] = None

    # Users and auth

    def ensure_user(self, user: User) -> None:
        self._enter("ensure_user", user.id)
        with self.store.lock:
            self.store.users.setdefault(
                user.id, {"id": user.id, "email": user.email, "created_at": _now()}
            )

    def sign_in(self, email: str, password: str) -> User:
        self._enter("sign_in", email)
        with self.store.lock:
            account = self.store.accounts.get(email.strip().lower())
            if account is None or account["password"] != password:
                raise AuthenticationFailed("Invalid login credentials")
            self._session_user = User(id=account["id"], email=email.strip().lower(),
                                      created_at=account["created_at"])
        return self._session_user

    def sign_up(self, email: str, password: str) -> User:
        self._enter("sign_up", email)
        email = email.strip().lower()
        with self.store.lock:
            if email in self.store.accounts:
                raise AuthenticationFailed("User already registered")
            account = {"id": _new_id(), "password": password, "created_at": _now()}
            self.store.accounts[email] = account
            self._session_user = User(id=account["id"], email=email,
                                      created_at=account["created_at"])
        return self._session_user

    def sign_out(self) -> None:
        self._enter("sign_out")
        self._session_user = None

    def current_user(self) -> Optional[User]:
        return self._session_user
