"""Utility helpers for the SFTP session package."""

from .booleans import to_boolean

__all__ = ["to_boolean"]
