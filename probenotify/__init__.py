"""Notification channels for monitoring probe results."""

__version__ = "0.1.0"