"""
Supabase gateway backend.
Reads through the projects_with_votes view; writes are scoped by row-level security.
"""

import logging
import time
from typing import Any, Callable, Optional, Sequence

from postgrest.exceptions import APIError
from supabase import ClientOptions, create_client

from showcase.core.errors import (
    AuthenticationFailed,
    ForeignKeyViolation,
    GatewayError,
    PermissionDenied,
    UniqueConstraintViolation,
)
from showcase.core.models import Comment, Project, User, parse_timestamp
from .base import BaseGateway, register_gateway
import config

logger = logging.getLogger(__name__)

COMMENT_COLUMNS = "*, users!comments_user_id_fkey(email)"


@register_gateway("supabase")
class SupabaseGateway(BaseGateway):
    """
    Gateway backed by a Supabase project.

    Features:
    - Postgres error codes mapped onto the gateway error taxonomy
    - HTTP timeout on every REST call
    - Retries with backoff for rate-limited reads
    - Owner/author writes that touch no rows reported as PermissionDenied
    """

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
        timeout: float = config.GATEWAY_TIMEOUT_SECONDS,
    ):
        """
        Initialize the Supabase gateway.

        Args:
            url: Project URL (defaults to SUPABASE_URL env var)
            key: Anon key (defaults to SUPABASE_ANON_KEY env var)
            timeout: Seconds before a REST call is abandoned
        """
        url = url or config.SUPABASE_URL
        key = key or config.SUPABASE_ANON_KEY
        if not url or not key:
            raise ValueError(
                "Supabase credentials not found. "
                "Set SUPABASE_URL and SUPABASE_ANON_KEY in .env file or pass url/key."
            )

        self.client = create_client(
            url, key, options=ClientOptions(postgrest_client_timeout=timeout)
        )

    @property
    def name(self) -> str:
        return "supabase"

    MAX_READ_RETRIES = 3
    RETRY_BASE_DELAY = 0.5

    def _execute(self, query) -> list[dict]:
        """Run a query builder and translate failures into gateway errors."""
        try:
            response = query.execute()
        except APIError as e:
            raise self._map_api_error(e) from e
        except Exception as e:
            raise GatewayError(f"Request failed: {e}") from e
        return response.data or []

    def _read(self, build_query: Callable[[], Any]) -> list[dict]:
        """
        Run an idempotent read, retrying when rate limited.

        Args:
            build_query: Callable returning a fresh query builder

        Returns:
            Rows returned by the store
        """
        for attempt in range(self.MAX_READ_RETRIES):
            try:
                return self._execute(build_query())
            except GatewayError as e:
                rate_limited = "429" in str(e) or "rate" in str(e).lower()
                if rate_limited and attempt < self.MAX_READ_RETRIES - 1:
                    delay = self.RETRY_BASE_DELAY * (2 ** attempt)
                    logger.warning(f"Rate limited. Waiting {delay}s before retry...")
                    time.sleep(delay)
                    continue
                raise

    @staticmethod
    def _map_api_error(error: APIError) -> GatewayError:
        code = getattr(error, "code", None)
        message = getattr(error, "message", None) or str(error)
        if code == config.PG_UNIQUE_VIOLATION:
            return UniqueConstraintViolation(code=code)
        if code == config.PG_FOREIGN_KEY_VIOLATION:
            return ForeignKeyViolation(code=code)
        if code == config.PG_INSUFFICIENT_PRIVILEGE:
            return PermissionDenied(code=code)
        logger.debug(f"Unmapped API error {code}: {message}")
        return GatewayError(message, code=code)

    def _expect_rows(self, rows: list[dict], what: str) -> None:
        # RLS filters rows silently instead of failing the statement
        if not rows:
            raise PermissionDenied(f"No {what} was changed. It may not exist or not be yours.")

    # Projects

    def query_projects(self) -> list[Project]:
        rows = self._read(
            lambda: self.client.table(config.TABLE_PROJECTS_VIEW)
            .select("*")
            .order("vote_count", desc=True)
            .order("created_at", desc=True)
        )
        return [Project.from_row(r) for r in rows]

    def get_project(self, project_id: str) -> Optional[Project]:
        rows = self._read(
            lambda: self.client.table(config.TABLE_PROJECTS_VIEW)
            .select("*")
            .eq("id", project_id)
            .limit(1)
        )
        return Project.from_row(rows[0]) if rows else None

    def insert_project(
        self,
        owner_id: str,
        title: str,
        url: str,
        description: str,
        thumbnail_url: Optional[str] = None,
        media_urls: Sequence[str] = (),
    ) -> Project:
        payload = {
            "user_id": owner_id,
            "title": title,
            "vercel_url": url,
            "description": description,
        }
        if thumbnail_url:
            payload["thumbnail_url"] = thumbnail_url
        if media_urls:
            payload["media_urls"] = list(media_urls)

        rows = self._execute(self.client.table(config.TABLE_PROJECTS).insert(payload))
        if not rows:
            raise GatewayError("Insert returned no project")
        return Project.from_row({**rows[0], "vote_count": 0})

    def update_project(self, project_id: str, owner_id: str, title: str, description: str) -> None:
        rows = self._execute(
            self.client.table(config.TABLE_PROJECTS)
            .update({"title": title, "description": description})
            .eq("id", project_id)
            .eq("user_id", owner_id)
        )
        self._expect_rows(rows, "project")

    def delete_project(self, project_id: str, owner_id: str) -> None:
        rows = self._execute(
            self.client.table(config.TABLE_PROJECTS)
            .delete()
            .eq("id", project_id)
            .eq("user_id", owner_id)
        )
        self._expect_rows(rows, "project")

    # Votes

    def query_votes_by_user(self, user_id: str) -> list[str]:
        rows = self._read(
            lambda: self.client.table(config.TABLE_VOTES).select("project_id").eq("user_id", user_id)
        )
        return [str(r["project_id"]) for r in rows]

    def insert_vote(self, user_id: str, project_id: str) -> None:
        self._execute(
            self.client.table(config.TABLE_VOTES).insert(
                {"user_id": user_id, "project_id": project_id}
            )
        )

    def delete_vote(self, user_id: str, project_id: str) -> None:
        self._execute(
            self.client.table(config.TABLE_VOTES)
            .delete()
            .eq("user_id", user_id)
            .eq("project_id", project_id)
        )

    # Comments

    def query_comments(self, project_id: str) -> list[Comment]:
        rows = self._read(
            lambda: self.client.table(config.TABLE_COMMENTS)
            .select(COMMENT_COLUMNS)
            .eq("project_id", project_id)
            .is_("parent_id", "null")
            .order("created_at", desc=True)
        )
        return [Comment.from_row(r) for r in rows]

    def query_replies(self, parent_id: str) -> list[Comment]:
        rows = self._read(
            lambda: self.client.table(config.TABLE_COMMENTS)
            .select(COMMENT_COLUMNS)
            .eq("parent_id", parent_id)
            .order("created_at", desc=False)
        )
        return [Comment.from_row(r) for r in rows]

    def insert_comment(
        self,
        author_id: str,
        project_id: str,
        content: str,
        parent_id: Optional[str] = None,
    ) -> Comment:
        payload = {"user_id": author_id, "project_id": project_id, "content": content}
        if parent_id is not None:
            payload["parent_id"] = parent_id

        rows = self._execute(self.client.table(config.TABLE_COMMENTS).insert(payload))
        if not rows:
            raise GatewayError("Insert returned no comment")

        # Re-read with the author join; the insert response has no embedded rows.
        # The row is already committed, so a failed re-read must not fail the insert.
        try:
            joined = self._read(
                lambda: self.client.table(config.TABLE_COMMENTS)
                .select(COMMENT_COLUMNS)
                .eq("id", rows[0]["id"])
                .limit(1)
            )
        except GatewayError as e:
            logger.warning(f"Comment {rows[0]['id']} saved but author lookup failed: {e}")
            joined = []
        return Comment.from_row(joined[0] if joined else rows[0])

    def update_comment(self, comment_id: str, content: str) -> None:
        rows = self._execute(
            self.client.table(config.TABLE_COMMENTS)
            .update({"content": content})
            .eq("id", comment_id)
        )
        self._expect_rows(rows, "comment")

    def delete_comment(self, comment_id: str) -> None:
        rows = self._execute(
            self.client.table(config.TABLE_COMMENTS).delete().eq("id", comment_id)
        )
        self._expect_rows(rows, "comment")

    # Users and auth

    def ensure_user(self, user: User) -> None:
        self._execute(
            self.client.table(config.TABLE_USERS).upsert(
                {"id": user.id, "email": user.email}, on_conflict="id"
            )
        )

    @staticmethod
    def _to_user(auth_user) -> User:
        created_at = getattr(auth_user, "created_at", None)
        return User(
            id=str(auth_user.id),
            email=auth_user.email or "",
            created_at=parse_timestamp(created_at) if created_at else None,
        )

    def sign_in(self, email: str, password: str) -> User:
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            raise AuthenticationFailed(str(e)) from e
        if not response.user:
            raise AuthenticationFailed("Login failed")
        return self._to_user(response.user)

    def sign_up(self, email: str, password: str) -> User:
        try:
            response = self.client.auth.sign_up({"email": email, "password": password})
        except Exception as e:
            raise AuthenticationFailed(str(e)) from e
        if not response.user:
            raise AuthenticationFailed("Signup failed")
        return self._to_user(response.user)

    def sign_out(self) -> None:
        try:
            self.client.auth.sign_out()
        except Exception as e:
            raise AuthenticationFailed(str(e)) from e

    def current_user(self) -> Optional[User]:
        try:
            session = self.client.auth.get_session()
        except Exception as e:
            logger.debug(f"No restorable session: {e}")
            return None
        if session and session.user:
            return self._to_user(session.user)
        return None
