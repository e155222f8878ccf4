"""Username/password authentication against a user store."""

import structlog

from ..errors import UserStoreError
from .models import (
    Authenticated,
    AuthResult,
    Credentials,
    Rejected,
    RejectReason,
    StoreUnavailable,
    UserStore,
)

logger = structlog.get_logger()


class Authenticator:
    """Decides whether a presented credential pair belongs to a known user.

    The authenticator holds no state besides its store, so one instance can
    serve concurrent login requests. It never writes session state; callers
    apply the role claim after inspecting the returned result.
    """

    def __init__(self, store: UserStore):
        self.store = store

    def authenticate(self, credentials: Credentials) -> AuthResult:
        """Authenticate a credential pair.

        Args:
            credentials: username and password as presented

        Returns:
            Authenticated with the record's user and role ids, Rejected with the
            reason, or StoreUnavailable if the lookup failed
        """
        try:
            record = self.store.find_by_username(credentials.username)
        except (UserStoreError, OSError) as e:
            logger.error(
                "User lookup failed",
                error=str(e),
                error_type=type(e.__cause__ or e).__name__,
            )
            return StoreUnavailable(error=str(e))

        if record is None:
            # Attempted usernames only go to debug output
            logger.debug("Unknown username", username=credentials.username)
            logger.warning(
                "Authentication rejected",
                reason=RejectReason.USERNAME_INVALID.value,
            )
            return Rejected(RejectReason.USERNAME_INVALID)

        # Passwords are stored in plaintext; compare exactly as stored.
        if record.stored_password != credentials.password:
            logger.warning(
                "Authentication rejected",
                username=credentials.username,
                reason=RejectReason.PASSWORD_INVALID.value,
            )
            return Rejected(RejectReason.PASSWORD_INVALID)

        logger.info(
            "Authentication successful",
            username=credentials.username,
            user_id=record.user_id,
        )
        return Authenticated(user_id=record.user_id, role_id=record.role_id)
