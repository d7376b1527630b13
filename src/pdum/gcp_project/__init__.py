"""Lifecycle management for Google Cloud projects"""

from pdum.gcp_project.api import CloudAPI, GoogleCloudAPI, is_not_found
from pdum.gcp_project.config import Settings, load_settings
from pdum.gcp_project.migrate import migrate_state
from pdum.gcp_project.network import force_delete_compute_network
from pdum.gcp_project.operations import wait_for_operation
from pdum.gcp_project.reconciler import ProjectReconciler
from pdum.gcp_project.types import (
    BillingAccountParseError,
    BillingAccountTimeoutError,
    ChangeSet,
    ConfigError,
    NetworkDeletionError,
    OperationError,
    OperationTimeoutError,
    ProjectAPIError,
    ProjectError,
    ProjectNotFoundError,
    ProjectRecord,
    StateMigrationError,
)

__version__ = "0.1.0-alpha"


__all__ = [
    "__version__",
    "CloudAPI",
    "GoogleCloudAPI",
    "ProjectReconciler",
    "ProjectRecord",
    "ChangeSet",
    "Settings",
    "load_settings",
    "migrate_state",
    "force_delete_compute_network",
    "wait_for_operation",
    "is_not_found",
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
