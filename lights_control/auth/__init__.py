from .authenticator import Authenticator
from .identity import SessionState, UserIdentity, WebUser, login_error_message
from .models import (
    ROLES_CLAIM,
    Authenticated,
    AuthResult,
    Credentials,
    Rejected,
    RejectReason,
    StoreUnavailable,
    UserRecord,
    UserStore,
)
from .sessions import SessionStore
from .stores import InMemoryUserStore, SqliteUserStore

__all__ = [
    "ROLES_CLAIM",
    "AuthResult",
    "Authenticated",
    "Authenticator",
    "Credentials",
    "InMemoryUserStore",
    "RejectReason",
    "Rejected",
    "SessionState",
    "SessionStore",
    "SqliteUserStore",
    "StoreUnavailable",
    "UserIdentity",
    "UserRecord",
    "UserStore",
    "WebUser",
    "login_error_message",
]
