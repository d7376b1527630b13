"""Internal helpers to construct Google API service clients.

These helpers centralize `googleapiclient.discovery.build` usage to keep
options consistent across the codebase. They are intentionally private; the
public API surface remains in `api.py` and `reconciler.py`.
"""

from __future__ import annotations

from google.auth.credentials import Credentials
from googleapiclient import discovery


def crm_v1(credentials: Credentials):
    """Cloud Resource Manager v1 service client."""
    return discovery.build("cloudresourcemanager", "v1", credentials=credentials, cache_discovery=False)


def cloud_billing(credentials: Credentials):
    """Cloud Billing v1 service client."""
    return discovery.build("cloudbilling", "v1", credentials=credentials, cache_discovery=False)


def compute_v1(credentials: Credentials):
    """Compute Engine v1 service client."""
    return discovery.build("compute", "v1", credentials=credentials, cache_discovery=False)


def service_usage(credentials: Credentials):
    """Service Usage v1 service client."""
    return discovery.build("serviceusage", "v1", credentials=credentials, cache_discovery=False)
