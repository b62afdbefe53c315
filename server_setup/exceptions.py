"""
Exception types for server-setup-suite.
"""

from enum import Enum


class SetupError(Exception):
    """Base class for all setup errors."""


class PrereqKind(Enum):
    NOT_PRIVILEGED = "not_privileged"
    MISSING_HOST_TOOL = "missing_host_tool"
    MISSING_DIALOG_TOOL = "missing_dialog_tool"


class PrereqError(SetupError):
    """Raised when the host does not meet a prerequisite."""

    def __init__(self, kind: PrereqKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class CatalogError(SetupError):
    """Raised when a catalog file is missing or invalid."""


class UserCancelled(SetupError):
    """Raised when the user backs out of the selection screen."""


class EmptySelection(SetupError):
    """Raised when the user confirms without choosing any service."""


class DeploymentError(SetupError):
    """Raised by the delegate wrapper when an installer cannot run."""
