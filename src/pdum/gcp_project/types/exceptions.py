"""Custom exceptions for pdum.gcp_project."""

from __future__ import annotations


class ProjectError(Exception):
    """Base class for every failure raised while reconciling a project."""


class ProjectAPIError(ProjectError):
    """A remote API call failed; the original ``HttpError`` is chained as ``__cause__``."""


class ProjectNotFoundError(ProjectError, FileNotFoundError):
    """Raised when a project that must exist cannot be found remotely."""


class OperationError(ProjectError):
    """A long-running operation finished with an error.

    Attributes
    ----------
    code : str
        Error code reported by the operation (``"Unknown"`` when absent).
    message : str
        Error message reported by the operation.
    """

    def __init__(self, activity: str, code: str, message: str):
        self.activity = activity
        self.code = code
        self.message = message
        super().__init__(f"Error waiting for {activity}: {code}: {message}")

class OperationTimeoutError(ProjectError, TimeoutError):
    """A long-running operation did not finish within its timeout."""

class BillingAccountParseError(ProjectError, ValueError):
    """The billing account name returned by the API has an unexpected format."""

class BillingAccountTimeoutError(ProjectError, TimeoutError):
    """The billing account never read back as the requested value."""

    def __init__(self, desired: str, observed: str):
        self.desired = desired
        self.observed = observed
        super().__init__(
            "Timed out waiting for billing account to return correct value. "
            f"Waiting for {desired!r}, got {observed!r}."
        )

class NetworkDeletionError(ProjectError):
    """Deleting a compute network or one of its firewall rules failed."""

class StateMigrationError(ProjectError):
    """A persisted project state could not be upgraded to the current schema."""

class ConfigError(ProjectError):
    """Invalid settings file or environment override."""

__all__ = [
    "BillingAccountParseError",
    "BillingAccountTimeoutError",
    "ConfigError",
    "NetworkDeletionError",
    "OperationError",
    "OperationTimeoutError",
    "ProjectAPIError",
    "ProjectError",
    "ProjectNotFoundError",
    "StateMigrationError",
]
