"""Exceptions raised by Lights Control components."""


class LightsControlError(Exception):
    """Base class for all Lights Control errors."""


class UserStoreError(LightsControlError):
    """The user store could not complete a lookup."""
