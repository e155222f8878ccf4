"""Authentication and session-claim layer for the Lights Control panel."""

__version__ = "0.1.0"
