"""Badminton club session, waitlist, wallet and settlement server."""

__version__ = "0.1.0"
