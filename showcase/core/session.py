"""
SessionState: the signed-in identity, shared by every component.
Wraps gateway authentication and notifies subscribers on change.
"""

import logging
from typing import Callable, Optional, TYPE_CHECKING

from showcase.core.errors import GatewayError, ValidationError
from showcase.core.models import User

if TYPE_CHECKING:
    from showcase.gateways.base import BaseGateway

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class SessionState:
    """
    Holds the current user and exposes subscribe-for-changes semantics.

    Engines receive this object explicitly instead of reading ambient state,
    so they can be driven by tests without a live auth provider.
    """

    def __init__(self, gateway: "BaseGateway", user: Optional[User] = None):
        self.gateway = gateway
        self._user = user
        self._listeners: list[Callable[[Optional[User]], None]] = []

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    @property
    def user_id(self) -> Optional[str]:
        return self._user.id if self._user else None

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def on_change(self, callback: Callable[[Optional[User]], None]) -> Callable[[], None]:
        """
        Subscribe to identity changes.

        Returns:
            Callable that removes the subscription
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _set_user(self, user: Optional[User]) -> None:
        previous = self._user
        self._user = user
        if previous != user:
            for callback in list(self._listeners):
                callback(user)

    def restore(self) -> Optional[User]:
        """Pick up a session the gateway already holds."""
        self._set_user(self.gateway.current_user())
        return self._user

    def sign_in(self, email: str, password: str) -> User:
        email = self._check_credentials(email, password)
        user = self.gateway.sign_in(email, password)
        self._ensure_user_row(user)
        logger.info(f"Signed in {user.email}")
        self._set_user(user)
        return user

    def sign_up(self, email: str, password: str) -> User:
        email = self._check_credentials(email, password)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        user = self.gateway.sign_up(email, password)
        self._ensure_user_row(user)
        logger.info(f"Signed up {user.email}")
        self._set_user(user)
        return user

    def sign_out(self) -> None:
        try:
            self.gateway.sign_out()
        finally:
            self._set_user(None)

    def _check_credentials(self, email: str, password: str) -> str:
        email = (email or "").strip()
        if "@" not in email:
            raise ValidationError("Please enter a valid email address.")
        if not password:
            raise ValidationError("Please enter a password.")
        return email

    def _ensure_user_row(self, user: User) -> None:
        try:
            self.gateway.ensure_user(user)
        except GatewayError as e:
            # A database trigger may create the row instead
            logger.warning(f"Could not ensure user row for {user.id}: {e}")
