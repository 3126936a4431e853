"""Exceptions that abort a run before any selection is made."""

from __future__ import annotations


class InvalidListInputError(ValueError):
    """A file list has an unsupported extension or a malformed shape."""


class InvalidConfigError(ValueError):
    """A configuration value is out of range or of the wrong type."""
