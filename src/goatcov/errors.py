"""Exceptions raised while building coverage reports.

Every error is fatal for the report being built: a partial report would
produce misleading totals, so nothing in the core catches these.
"""

from __future__ import annotations


class GoatcovError(Exception):
    """Base exception for goatcov errors."""


class ProfileParseError(GoatcovError):
    """Raised when a coverage profile is unreadable or malformed."""


class FileResolutionError(GoatcovError):
    """Raised when a profile references a file not found under the source root."""


class SourceParseError(GoatcovError):
    """Raised when a Go source file cannot be parsed."""


class ConfigError(GoatcovError):
    """Raised for an unreadable or invalid configuration file."""
