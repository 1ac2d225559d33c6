from __future__ import annotations


class DevxError(Exception):
    """Base class for devx errors."""


class CommandError(DevxError):
    """Raised when an external command cannot be spawned or exits non-zero."""


class ToolNotFoundError(DevxError):
    """Raised when a required executable is not available on PATH."""


class PromptAbortedError(DevxError):
    """Raised when the user cancels an interactive prompt."""


class ValidationError(DevxError):
    """Raised when a config, target, tag, or input fails validation."""


class NotFoundError(DevxError):
    """Raised when a requested release, asset, or file cannot be found."""


class ReleaseError(DevxError):
    """Raised when the GitHub Releases API returns an unexpected response."""
