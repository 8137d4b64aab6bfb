"""
Base class for remote data gateways.
Defines the interface every backend must implement.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from showcase.core.models import Comment, Project, User


class BaseGateway(ABC):
    """
    Abstract base class for the remote data store.

    All gateways must:
    - Return projects ordered by vote count descending, newest first on ties
    - Enforce one vote per (user, project) and unique project URLs
    - Reject votes/comments that reference a missing user or project
    - Scope comment and project writes to their author/owner
    - Raise GatewayError subclasses (never backend-specific exceptions)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this backend."""
        pass

    # Projects

    @abstractmethod
    def query_projects(self) -> list[Project]:
        """Return all projects ordered by vote count descending."""
        pass

    @abstractmethod
    def get_project(self, project_id: str) -> Optional[Project]:
        pass

    @abstractmethod
    def insert_project(
        self,
        owner_id: str,
        title: str,
        url: str,
        description: str,
        thumbnail_url: Optional[str] = None,
        media_urls: Sequence[str] = (),
    ) -> Project:
        """
        Insert a project row.

        Raises:
            UniqueConstraintViolation: If the URL was already submitted
            ForeignKeyViolation: If the owner has no user row
        """
        pass

    @abstractmethod
    def update_project(self, project_id: str, owner_id: str, title: str, description: str) -> None:
        pass

    @abstractmethod
    def delete_project(self, project_id: str, owner_id: str) -> None:
        pass

    # Votes

    @abstractmethod
    def query_votes_by_user(self, user_id: str) -> list[str]:
        """Return the ids of every project the user has voted for."""
        pass

    @abstractmethod
    def insert_vote(self, user_id: str, project_id: str) -> None:
        """
        Insert a vote row.

        Raises:
            UniqueConstraintViolation: If the pair already has a vote
        """
        pass

    @abstractmethod
    def delete_vote(self, user_id: str, project_id: str) -> None:
        pass

    # Comments

    @abstractmethod
    def query_comments(self, project_id: str) -> list[Comment]:
        """Return top-level comments for a project, newest first."""
        pass

    @abstractmethod
    def query_replies(self, parent_id: str) -> list[Comment]:
        """Return replies to a comment, oldest first."""
        pass

    @abstractmethod
    def insert_comment(
        self,
        author_id: str,
        project_id: str,
        content: str,
        parent_id: Optional[str] = None,
    ) -> Comment:
        pass

    @abstractmethod
    def update_comment(self, comment_id: str, content: str) -> None:
        pass

    @abstractmethod
    def delete_comment(self, comment_id: str) -> None:
        pass

    # Users and auth

    @abstractmethod
    def ensure_user(self, user: User) -> None:
        """Make sure the user has a row in the users table."""
        pass

    @abstractmethod
    def sign_in(self, email: str, password: str) -> User:
        pass

    @abstractmethod
    def sign_up(self, email: str, password: str) -> User:
        pass

    @abstractmethod
    def sign_out(self) -> None:
        pass

    @abstractmethod
    def current_user(self) -> Optional[User]:
        """Return the user of the restored session, if any."""
        pass


# Registry for available gateways
_GATEWAY_REGISTRY: dict[str, type[BaseGateway]] = {}


def register_gateway(name: str):
    """
    Decorator to register a gateway class.

    Usage:
        @register_gateway("supabase")
        class SupabaseGateway(BaseGateway):
            ...

    Raises:
        TypeError: If class doesn't inherit from BaseGateway
        ValueError: If name is already registered
    """
    def decorator(cls: type[BaseGateway]):
        if not issubclass(cls, BaseGateway):
            raise TypeError(f"{cls.__name__} must inherit from BaseGateway")
        if name in _GATEWAY_REGISTRY:
            raise ValueError(
                f"Gateway '{name}' already registered by {_GATEWAY_REGISTRY[name].__name__}"
            )
        _GATEWAY_REGISTRY[name] = cls
        return cls
    return decorator


def get_gateway(name: str, **kwargs) -> BaseGateway:
    """
    Get a gateway instance by name.

    Args:
        name: Registered gateway name
        **kwargs: Arguments passed to gateway constructor

    Returns:
        Gateway instance

    Raises:
        ValueError: If gateway name not found
    """
    if name not in _GATEWAY_REGISTRY:
        available = list(_GATEWAY_REGISTRY.keys())
        raise ValueError(f"Unknown gateway '{name}'. Available: {available}")

    return _GATEWAY_REGISTRY[name](**kwargs)


def list_gateways() -> list[str]:
    """Return list of registered gateway names."""
    return list(_GATEWAY_REGISTRY.keys())
