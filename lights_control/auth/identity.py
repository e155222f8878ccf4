"""Identity objects produced by a login attempt."""

from typing import Any

import structlog

from .authenticator import Authenticator
from .models import (
    ROLES_CLAIM,
    Authenticated,
    AuthResult,
    Credentials,
    Rejected,
    StoreUnavailable,
)

logger = structlog.get_logger()

INVALID_LOGIN_MESSAGE = "Incorrect username or password."
UNAVAILABLE_MESSAGE = "Login is temporarily unavailable. Please try again later."


class SessionState:
    """Key/value claims attached to one authenticated session."""

    def __init__(self) -> None:
        self._claims: dict[str, Any] = {}

    def set_claim(self, key: str, value: Any) -> None:
        self._claims[key] = value

    def get_claim(self, key: str, default: Any = None) -> Any:
        return self._claims.get(key, default)

    def has_claim(self, key: str) -> bool:
        return key in self._claims

    def clear(self) -> None:
        self._claims.clear()

    @property
    def claims(self) -> dict[str, Any]:
        return dict(self._claims)


class UserIdentity:
    """One login attempt for a username/password pair.

    Session claims and the user id are only set after the authenticator
    reports success.
    """

    def __init__(self, credentials: Credentials, authenticator: Authenticator):
        self.credentials = credentials
        self.authenticator = authenticator
        self.state = SessionState()
        self.result: AuthResult | None = None
        self._id: Any = None

    @property
    def username(self) -> str:
        return self.credentials.username

    def authenticate(self) -> bool:
        """Run the authenticator and apply the role claim on success."""
        self.result = self.authenticator.authenticate(self.credentials)
        if isinstance(self.result, Authenticated):
            self._id = self.result.user_id
            self.state.set_claim(ROLES_CLAIM, self.result.role_id)
            return True
        return False

    def get_id(self) -> Any:
        return self._id


class WebUser:
    """The user attached to a web session."""

    def __init__(self) -> None:
        self.state = SessionState()
        self._id: Any = None
        self.name: str | None = None

    @property
    def is_guest(self) -> bool:
        return self._id is None

    @property
    def roles(self) -> Any:
        return self.state.get_claim(ROLES_CLAIM)

    def get_id(self) -> Any:
        return self._id

    def login(self, identity: UserIdentity) -> bool:
        """Log in an identity that has already authenticated.

        Returns:
            False if the identity has no id, True otherwise
        """
        if identity.get_id() is None:
            logger.warning(
                "Refusing login for unauthenticated identity",
                username=identity.username,
            )
            return False

        self.state.clear()
        self._id = identity.get_id()
        self.name = identity.username
        for key, value in identity.state.claims.items():
            self.state.set_claim(key, value)

        logger.info("User logged in", username=self.name, user_id=self._id)
        return True

    def logout(self) -> None:
        if not self.is_guest:
            logger.info("User logged out", username=self.name, user_id=self._id)
        self.state.clear()
        self._id = None
        self.name = None

    def check_access(self, role_id: Any) -> bool:
        """Check the user's single role against role_id."""
        if self.is_guest:
            return False
        return bool(self.roles == role_id)


def login_error_message(result: AuthResult) -> str | None:
    """Return the message to show for a login result, or None on success.

    Both rejection reasons get the same text so the form does not reveal
    which usernames exist.
    """
    if isinstance(result, Rejected):
        return INVALID_LOGIN_MESSAGE
    if isinstance(result, StoreUnavailable):
        return UNAVAILABLE_MESSAGE
    return None
