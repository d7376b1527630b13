"""Remote API surface used by the project reconciler.

`CloudAPI` lists every remote call the reconciler makes, across Cloud
Resource Manager, Cloud Billing, Service Usage and Compute Engine. The
reconciler receives an instance explicitly, which keeps credentials out of
global state and lets tests substitute an in-memory implementation.

`GoogleCloudAPI` is the real implementation on top of the discovery-based
``googleapiclient`` clients. Remote failures propagate as
`googleapiclient.errors.HttpError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from google.auth.credentials import Credentials
from googleapiclient.errors import HttpError

from pdum.gcp_project._clients import cloud_billing, compute_v1, crm_v1, service_usage
from pdum.gcp_project.config import Settings
from pdum.gcp_project.operations import wait_for_operation
from pdum.gcp_project.types.constants import PROJECT_PREFIX


def is_not_found(error: Exception) -> bool:
    """Return True if ``error`` is an HTTP 404 from a Google API."""
    return isinstance(error, HttpError) and getattr(error.resp, "status", None) == 404


class CloudAPI(ABC):
    """Remote calls needed to manage a project."""

    # Cloud Resource Manager v1

    @abstractmethod
    def create_project(self, body: dict) -> dict:
        """Start creating a project; returns the long-running operation."""

    @abstractmethod
    def get_project(self, project_id: str) -> dict:
        """Return the project resource (``projectNumber``, ``name``, ``labels``, ``parent``, ``lifecycleState``)."""

    @abstractmethod
    def update_project(self, project_id: str, body: dict) -> dict:
        """Replace the project with ``body``; returns the updated project."""

    @abstractmethod
    def delete_project(self, project_id: str) -> dict:
        """Request deletion of a project."""

    @abstractmethod
    def wait_resource_manager_operation(self, operation: dict, activity: str) -> dict:
        """Block until a Resource Manager operation finishes."""

    # Cloud Billing v1

    @abstractmethod
    def get_billing_info(self, project_id: str) -> dict:
        """Return the project's billing info (``billingAccountName`` may be absent or empty)."""

    @abstractmethod
    def update_billing_info(self, project_id: str, body: dict) -> dict:
        """Link (or, with an empty body, unlink) a billing account."""

    # Service Usage v1

    @abstractmethod
    def enable_service(self, project_id: str, service: str) -> dict:
        """Start enabling ``service`` on the project; returns the long-running operation."""

    @abstractmethod
    def wait_service_operation(self, operation: dict, activity: str) -> dict:
        """Block until a Service Usage operation finishes."""

    # Compute Engine v1

    @abstractmethod
    def list_firewalls(self, project_id: str, *, filter: str, page_token: Optional[str] = None) -> dict:
        """Return one page of firewall rules (``items`` and optional ``nextPageToken``)."""

    @abstractmethod
    def delete_firewall(self, project_id: str, firewall: str) -> dict:
        """Start deleting a firewall rule; returns the global operation."""

    @abstractmethod
    def delete_network(self, project_id: str, network: str) -> dict:
        """Start deleting a network; returns the global operation."""

    @abstractmethod
    def wait_compute_operation(self, project_id: str, operation: dict, activity: str) -> dict:
        """Block until a Compute global operation finishes."""


class GoogleCloudAPI(CloudAPI):
    """`CloudAPI` backed by the Google discovery clients.

    Parameters
    ----------
    credentials : Credentials
        Credentials used for every call.
    settings : Settings, optional
        Operation timeout and polling interval. Defaults to ``Settings()``.
    """

    def __init__(self, credentials: Credentials, settings: Optional[Settings] = None):
        self._credentials = credentials
        self._settings = settings or Settings()
        self._services: dict[str, object] = {}

    def _service(self, name: str):
        if name not in self._services:
            builder = {
                "crm": crm_v1,
                "billing": cloud_billing,
                "compute": compute_v1,
                "serviceusage": service_usage,
            }[name]
            self._services[name] = builder(self._credentials)
        return self._services[name]

    def _wait(self, operation: dict, refresh, activity: str) -> dict:
        return wait_for_operation(
            operation,
            refresh,
            activity=activity,
            timeout=self._settings.operation_timeout,
            polling_interval=self._settings.polling_interval,
        )

    def create_project(self, body: dict) -> dict:
        return self._service("crm").projects().create(body=body).execute()

    def get_project(self, project_id: str) -> dict:
        return self._service("crm").projects().get(projectId=project_id).execute()

    def update_project(self, project_id: str, body: dict) -> dict:
        return self._service("crm").projects().update(projectId=project_id, body=body).execute()

    def delete_project(self, project_id: str) -> dict:
        return self._service("crm").projects().delete(projectId=project_id).execute()

    def wait_resource_manager_operation(self, operation: dict, activity: str) -> dict:
        crm = self._service("crm")
        return self._wait(operation, lambda op: crm.operations().get(name=op["name"]).execute(), activity)

    def get_billing_info(self, project_id: str) -> dict:
        return self._service("billing").projects().getBillingInfo(name=f"{PROJECT_PREFIX}{project_id}").execute()

    def update_billing_info(self, project_id: str, body: dict) -> dict:
        return (
            self._service("billing")
            .projects()
            .updateBillingInfo(name=f"{PROJECT_PREFIX}{project_id}", body=body)
            .execute()
        )

    def enable_service(self, project_id: str, service: str) -> dict:
        name = f"{PROJECT_PREFIX}{project_id}/services/{service}"
        return self._service("serviceusage").services().enable(name=name, body={}).execute()

    def wait_service_operation(self, operation: dict, activity: str) -> dict:
        usage = self._service("serviceusage")
        return self._wait(operation, lambda op: usage.operations().get(name=op["name"]).execute(), activity)

    def list_firewalls(self, project_id: str, *, filter: str, page_token: Optional[str] = None) -> dict:
        kwargs = {"project": project_id, "filter": filter}
        if page_token:
            kwargs["pageToken"] = page_token
        return self._service("compute").firewalls().list(**kwargs).execute()

    def delete_firewall(self, project_id: str, firewall: str) -> dict:
        return self._service("compute").firewalls().delete(project=project_id, firewall=firewall).execute()

    def delete_network(self, project_id: str, network: str) -> dict:
        return self._service("compute").networks().delete(project=project_id, network=network).execute()

    def wait_compute_operation(self, project_id: str, operation: dict, activity: str) -> dict:
        compute = self._service("compute")
        return self._wait(
            operation,
            lambda op: compute.globalOperations().get(project=project_id, operation=op["name"]).execute(),
            activity,
        )


__all__ = ["CloudAPI", "GoogleCloudAPI", "is_not_found"]
