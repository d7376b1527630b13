"""Shared constants for pdum.gcp_project types."""

from __future__ import annotations

ACTIVE_STATE = "ACTIVE"

BILLING_ACCOUNT_PREFIX = "billingAccounts/"
FOLDER_PREFIX = "folders/"
PROJECT_PREFIX = "projects/"

PARENT_TYPE_ORGANIZATION = "organization"
PARENT_TYPE_FOLDER = "folder"

COMPUTE_API = "compute.googleapis.com"
DEFAULT_NETWORK = "default"
COMPUTE_NETWORK_LINK = "https://www.googleapis.com/compute/v1/projects/{project_id}/global/networks/{network}"

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

STATE_SCHEMA_VERSION = 1

__all__ = [
    "ACTIVE_STATE",
    "BILLING_ACCOUNT_PREFIX",
    "CLOUD_PLATFORM_SCOPE",
    "COMPUTE_API",
    "COMPUTE_NETWORK_LINK",
    "DEFAULT_NETWORK",
    "FOLDER_PREFIX",
    "PARENT_TYPE_FOLDER",
    "PARENT_TYPE_ORGANIZATION",
    "PROJECT_PREFIX",
    "STATE_SCHEMA_VERSION",
]
