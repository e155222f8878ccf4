"""Authentication models and types."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

ROLES_CLAIM = "roles"


@dataclass(frozen=True)
class Credentials:
    """Username and password as presented by the caller."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class UserRecord:
    """User row as returned by a user store."""

    user_id: Any
    stored_username: str
    stored_password: str = field(repr=False)
    role_id: Any = None


class RejectReason(Enum):
    USERNAME_INVALID = "username_invalid"
    PASSWORD_INVALID = "password_invalid"


@dataclass(frozen=True)
class Authenticated:
    """Credentials matched a stored user."""

    user_id: Any
    role_id: Any


@dataclass(frozen=True)
class Rejected:
    """Credentials did not match."""

    reason: RejectReason


@dataclass(frozen=True)
class StoreUnavailable:
    """The user lookup itself failed, so no decision could be made."""

    error: str


AuthResult = Authenticated | Rejected | StoreUnavailable


class UserStore(Protocol):
    """Protocol for user persistence backends."""

    def find_by_username(self, username: str) -> UserRecord | None:
        """Return the record whose login equals username, or None.

        Raises:
            UserStoreError: if the lookup could not be performed
        """
        ...
