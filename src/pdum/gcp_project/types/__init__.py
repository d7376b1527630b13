"""Public exports for pdum.gcp_project types."""

from __future__ import annotations

from .billing_account import billing_info_body, parse_billing_account_name
from .change_set import MUTABLE_FIELDS, ChangeSet
from .constants import ACTIVE_STATE, COMPUTE_API, DEFAULT_NETWORK, STATE_SCHEMA_VERSION
from .exceptions import (
    BillingAccountParseError,
    BillingAccountTimeoutError,
    ConfigError,
    NetworkDeletionError,
    OperationError,
    OperationTimeoutError,
    ProjectAPIError,
    ProjectError,
    ProjectNotFoundError,
    StateMigrationError,
)
from .record import ProjectRecord, normalize_folder_id

__all__ = [
    "ACTIVE_STATE",
    "COMPUTE_API",
    "DEFAULT_NETWORK",
    "MUTABLE_FIELDS",
    "STATE_SCHEMA_VERSION",
    "BillingAccountParseError",
    "BillingAccountTimeoutError",
    "ChangeSet",
    "ConfigError",
    "NetworkDeletionError",
    "OperationError",
    "OperationTimeoutError",
    "ProjectAPIError",
    "ProjectError",
    "ProjectNotFoundError",
    "ProjectRecord",
    "StateMigrationError",
    "billing_info_body",
    "normalize_folder_id",
    "parse_billing_account_name",
]
