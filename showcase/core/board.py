"""
ProjectBoard: the vote and ranking engine behind the gallery.
Owns the local project list and the current user's voted set, applies vote
toggles optimistically and rolls them back when the gateway rejects them.
"""

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Iterator, Optional, Sequence, Union, TYPE_CHECKING

from showcase.core.errors import (
    ForeignKeyViolation,
    GatewayError,
    LoadFailed,
    ProjectMutationFailed,
    ProjectNotFound,
    RequiresAuthentication,
    SelfVoteForbidden,
    UniqueConstraintViolation,
    ValidationError,
    VoteInProgress,
    VoteUpdateFailed,
)
from showcase.core.media import is_valid_url
from showcase.core.models import Project, TimeWindow, User
from showcase.core.session import SessionState
import config

if TYPE_CHECKING:
    from showcase.gateways.base import BaseGateway

logger = logging.getLogger(__name__)


def window_start(window: TimeWindow, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Earliest creation time admitted by a time window.

    Windows are anchored to the start of the current local calendar day.
    Returns None for TimeWindow.ALL.
    """
    if window == TimeWindow.ALL:
        return None

    now = (now or datetime.now()).astimezone()
    start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if window == TimeWindow.TODAY:
        return start_of_today
    if window == TimeWindow.WEEK:
        return start_of_today - timedelta(days=config.WINDOW_WEEK_DAYS)
    return start_of_today - timedelta(days=config.WINDOW_MONTH_DAYS)


def matches_text(project: Project, needle: str) -> bool:
    """Case-insensitive substring match on title, description and owner name."""
    needle = needle.casefold()
    haystacks = (project.title, project.description, project.owner_name or "")
    return any(needle in text.casefold() for text in haystacks)


class RankedView:
    """
    Filtered, vote-ranked view over a snapshot of the project list.

    Iteration is lazy and restartable: each pass recomputes the result from
    the snapshot taken when the view was created.
    """

    def __init__(self, projects: Sequence[Project], predicate: Callable[[Project], bool]):
        self._projects = tuple(projects)
        self._predicate = predicate

    def __iter__(self) -> Iterator[Project]:
        matches = (p for p in self._projects if self._predicate(p))
        # sorted() is stable, so equal counts keep gateway order
        return iter(sorted(matches, key=lambda p: p.vote_count, reverse=True))

    def __len__(self) -> int:
        return sum(1 for p in self._projects if self._predicate(p))

    def ids(self) -> list[str]:
        return [p.id for p in self]


class ProjectBoard:
    """
    Local projection of the project gallery.

    Responsibilities:
    - Load projects and the current user's votes
    - Derive the filtered, ranked view
    - Toggle votes optimistically with snapshot rollback
    - Submit, edit and delete the owner's projects
    """

    def __init__(self, gateway: "BaseGateway", session: SessionState):
        """
        Initialize the board.

        Args:
            gateway: Remote data store
            session: Current identity; the voted set follows its changes
        """
        self.gateway = gateway
        self.session = session

        self.projects: list[Project] = []
        self.voted: set[str] = set()
        self.filter_text: str = ""
        self.time_window: TimeWindow = TimeWindow(config.DEFAULT_TIME_WINDOW)
        self.last_error: Optional[str] = None

        self._pending: set[str] = set()
        self._loaded = False

        session.on_change(self._on_session_change)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # Loading

    def load(self) -> None:
        """
        Fetch all projects and the current user's votes.

        Raises:
            LoadFailed: If the gateway fails; prior state is kept
        """
        user_id = self.session.user_id
        try:
            projects = self.gateway.query_projects()
            voted = set(self.gateway.query_votes_by_user(user_id)) if user_id else set()
        except GatewayError as e:
            self.last_error = f"Failed to load projects: {e.message}"
            logger.error(self.last_error)
            raise LoadFailed(self.last_error) from e

        self.projects = list(projects)
        self.voted = voted
        self.last_error = None
        self._loaded = True
        logger.info(f"Loaded {len(self.projects)} projects ({len(self.voted)} voted)")

    def refresh_project(self, project_id: str) -> Project:
        """Re-read a single project and replace the local copy."""
        try:
            project = self.gateway.get_project(project_id)
        except GatewayError as e:
            raise LoadFailed(f"Failed to load project: {e.message}") from e

        if project is None:
            self.projects = [p for p in self.projects if p.id != project_id]
            raise ProjectNotFound()

        if self._index_of(project_id) is None:
            self.projects.append(project)
        else:
            self._replace(project)
        return project

    def _on_session_change(self, user: Optional[User]) -> None:
        # The voted set belongs to the previous identity
        self.voted = set()
        if user is None or not self._loaded:
            return
        try:
            self.voted = set(self.gateway.query_votes_by_user(user.id))
        except GatewayError as e:
            self.last_error = f"Failed to load your votes: {e.message}"
            logger.warning(self.last_error)

    # Filters and derived view

    def set_filter_text(self, text: str) -> None:
        self.filter_text = text or ""

    def set_time_window(self, window: Union[TimeWindow, str]) -> None:
        self.time_window = TimeWindow(window)

    def filtered_view(self, now: Optional[datetime] = None) -> RankedView:
        """
        Projects matching the time window and search text, ranked by votes.

        Args:
            now: Reference time for the window (defaults to local now)

        Returns:
            RankedView over a snapshot of the current project list
        """
        since = window_start(self.time_window, now)
        needle = self.filter_text.strip()

        def predicate(project: Project) -> bool:
            if since is not None and project.created_at < since:
                return False
            if needle and not matches_text(project, needle):
                return False
            return True

        return RankedView(self.projects, predicate)

    # Lookups

    def _index_of(self, project_id: str) -> Optional[int]:
        for i, project in enumerate(self.projects):
            if project.id == project_id:
                return i
        return None

    def _replace(self, project: Project) -> None:
        index = self._index_of(project.id)
        if index is not None:
            self.projects[index] = project

    def get(self, project_id: str) -> Project:
        index = self._index_of(project_id)
        if index is None:
            raise ProjectNotFound()
        return self.projects[index]

    def has_voted(self, project_id: str) -> bool:
        return project_id in self.voted

    def is_pending(self, project_id: str) -> bool:
        return project_id in self._pending

    def can_vote(self, project_id: str, user_id: Optional[str] = None) -> bool:
        """Whether the vote control for a project should be enabled."""
        user_id = user_id or self.session.user_id
        index = self._index_of(project_id)
        if not user_id or index is None:
            return False
        return self.projects[index].user_id != user_id and not self.is_pending(project_id)

    def owned_by(self, user_id: str) -> list[Project]:
        """The user's own projects, newest first."""
        owned = [p for p in self.projects if p.user_id == user_id]
        return sorted(owned, key=lambda p: p.created_at, reverse=True)

    def voted_projects(self) -> list[Project]:
        return [p for p in self.projects if p.id in self.voted]

    # Voting

    def toggle_vote(self, project_id: str, user_id: Optional[str] = None) -> bool:
        """
        Flip the current user's vote on a project.

        The voted set and vote count change before the gateway is called and
        are restored from the pre-toggle snapshot if the call fails.

        Args:
            project_id: Project to vote on
            user_id: Voter (defaults to the session user)

        Returns:
            True if the project is now voted, False if the vote was removed

        Raises:
            RequiresAuthentication: No voter
            SelfVoteForbidden: Voter owns the project
            ProjectNotFound: Project is not on the board
            VoteInProgress: A toggle for this project has not resolved yet
            VoteUpdateFailed: Gateway rejected the change; state was rolled back
        """
        user_id = user_id or self.session.user_id
        if not user_id:
            raise RequiresAuthentication("Please sign in to vote.")

        snapshot = self.get(project_id)
        if snapshot.user_id == user_id:
            raise SelfVoteForbidden()
        if project_id in self._pending:
            raise VoteInProgress()

        was_voted = project_id in self.voted
        delta = -1 if was_voted else 1

        # Optimistic update, visible before the remote call resolves
        self._set_vote(project_id, not was_voted)
        self._replace(replace(snapshot, vote_count=snapshot.vote_count + delta))
        self._pending.add(project_id)

        confirmed = False
        try:
            if was_voted:
                self.gateway.delete_vote(user_id, project_id)
            else:
                self.gateway.insert_vote(user_id, project_id)
            confirmed = True
        except UniqueConstraintViolation as e:
            logger.warning(f"Vote on {project_id} rolled back: {e}")
            raise VoteUpdateFailed(
                "Your vote was already recorded elsewhere. Please refresh."
            ) from e
        except GatewayError as e:
            logger.warning(f"Vote on {project_id} rolled back: {e}")
            raise VoteUpdateFailed() from e
        finally:
            self._pending.discard(project_id)
            # Non-gateway errors propagate as-is but still undo the optimistic change
            if not confirmed:
                self._set_vote(project_id, was_voted)
                self._replace(
                    replace(self._get_or(project_id, snapshot), vote_count=snapshot.vote_count)
                )

        logger.info(f"{'Removed vote from' if was_voted else 'Voted for'} {project_id}")
        return not was_voted

    def _get_or(self, project_id: str, default: Project) -> Project:
        index = self._index_of(project_id)
        return self.projects[index] if index is not None else default

    def _set_vote(self, project_id: str, voted: bool) -> None:
        if voted:
            self.voted.add(project_id)
        else:
            self.voted.discard(project_id)

    # Project submissions

    def submit_project(
        self,
        owner_id: Optional[str],
        title: str,
        url: str,
        description: str = "",
        thumbnail_url: Optional[str] = None,
        media_urls: Sequence[str] = (),
    ) -> Project:
        """
        Submit a new project, then add it to the board.

        Raises:
            RequiresAuthentication: No owner
            ValidationError: Bad title, description or URLs
            UniqueConstraintViolation: URL already submitted
            ForeignKeyViolation: Owner has no user row
            ProjectMutationFailed: Any other gateway failure
        """
        owner_id = owner_id or self.session.user_id
        if not owner_id:
            raise RequiresAuthentication("You must be logged in to upload a project.")

        title, description = validate_project_fields(title, description)
        url = (url or "").strip()
        if not is_valid_url(url):
            raise ValidationError("Please enter a valid URL.")
        thumbnail_url = (thumbnail_url or "").strip() or None
        if thumbnail_url and not is_valid_url(thumbnail_url):
            raise ValidationError("Please enter a valid thumbnail URL.")
        media = tuple(u.strip() for u in media_urls if u and u.strip())
        invalid = [u for u in media if not is_valid_url(u)]
        if invalid:
            raise ValidationError(f"Invalid media URL: {invalid[0]}")

        user = self.session.current_user
        if user is not None and user.id == owner_id:
            try:
                self.gateway.ensure_user(user)
            except GatewayError as e:
                logger.warning(f"Could not ensure user row for {owner_id}: {e}")

        try:
            project = self.gateway.insert_project(
                owner_id, title, url, description,
                thumbnail_url=thumbnail_url, media_urls=media,
            )
        except UniqueConstraintViolation as e:
            raise UniqueConstraintViolation("This URL has already been uploaded.", code=e.code) from e
        except ForeignKeyViolation as e:
            raise ForeignKeyViolation(
                "User not found in database. Please try logging out and back in.", code=e.code
            ) from e
        except GatewayError as e:
            raise ProjectMutationFailed(f"Failed to upload project: {e.message}") from e

        if project.owner_name is None and user is not None and user.id == owner_id:
            project = replace(project, owner_name=user.email)
        self.projects.append(project)
        logger.info(f"Submitted project {project.id} ({project.url})")
        return project

    def update_project(self, project_id: str, owner_id: str, title: str, description: str) -> Project:
        """Edit the owner's project title and description."""
        title, description = validate_project_fields(title, description)
        try:
            self.gateway.update_project(project_id, owner_id, title, description)
        except GatewayError as e:
            raise ProjectMutationFailed(f"Failed to update project: {e.message}") from e

        index = self._index_of(project_id)
        if index is None:
            return self.refresh_project(project_id)
        updated = replace(self.projects[index], title=title, description=description)
        self.projects[index] = updated
        return updated

    def delete_project(self, project_id: str, owner_id: str) -> None:
        try:
            self.gateway.delete_project(project_id, owner_id)
        except GatewayError as e:
            raise ProjectMutationFailed(f"Failed to delete project: {e.message}") from e

        self.projects = [p for p in self.projects if p.id != project_id]
        self.voted.discard(project_id)
        logger.info(f"Deleted project {project_id}")


def validate_project_fields(title: str, description: str) -> tuple[str, str]:
    """Trim and length-check a project's title and description."""
    title = (title or "").strip()
    description = (description or "").strip()
    if not title:
        raise ValidationError("Please enter a title.")
    if len(title) > config.TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must be at most {config.TITLE_MAX_LENGTH} characters.")
    if len(description) > config.DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Description must be at most {config.DESCRIPTION_MAX_LENGTH} characters."
        )
    return title, description
