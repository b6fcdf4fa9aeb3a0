"""Automatic voice moderation for watched members."""

__version__ = "0.1.0"
