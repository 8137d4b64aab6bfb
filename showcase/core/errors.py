"""
Error taxonomy for Project Showcase.
Every error carries a user-facing message; none of them is fatal.
"""

from typing import Optional


class ShowcaseError(Exception):
    """Base class for all recoverable application errors."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class RequiresAuthentication(ShowcaseError):
    """Action attempted without a signed-in user."""

    default_message = "Please sign in to continue."


class AuthenticationFailed(ShowcaseError):
    """Sign in, sign up or sign out was rejected."""

    default_message = "Authentication failed."


class SelfVoteForbidden(ShowcaseError):
    """Owners cannot vote on their own projects."""

    default_message = "You can't vote on your own project."


class VoteInProgress(ShowcaseError):
    """A toggle for the same project has not resolved yet."""

    default_message = "Your previous vote is still being saved."


class ProjectNotFound(ShowcaseError, LookupError):
    default_message = "Project not found."


class CommentNotFound(ShowcaseError, LookupError):
    default_message = "Comment not found."


class ValidationError(ShowcaseError, ValueError):
    """User input failed a local precondition."""

    default_message = "Invalid input."


class LoadFailed(ShowcaseError):
    default_message = "Failed to load data. Please refresh."


class VoteUpdateFailed(ShowcaseError):
    default_message = "Failed to update vote. Please try again."


class CommentMutationFailed(ShowcaseError):
    default_message = "Failed to update comments. Please try again."


class ProjectMutationFailed(ShowcaseError):
    default_message = "Failed to save project. Please try again."


# Gateway errors

class GatewayError(ShowcaseError):
    """The remote data store rejected a call or could not be reached."""

    default_message = "The server could not complete the request."

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class UniqueConstraintViolation(GatewayError):
    """Duplicate vote for a (user, project) pair or duplicate project URL."""

    default_message = "That entry already exists."


class ForeignKeyViolation(GatewayError):
    """A referenced user or project does not exist."""

    default_message = "A referenced record is missing. Please sign out and back in, then retry."


class PermissionDenied(GatewayError):
    """Row-level authorization rejected the write."""

    default_message = "You don't have permission to do that."
