"""Shared fixtures: an in-memory CloudAPI that records every call."""

import httplib2
import pytest
from googleapiclient.errors import HttpError

from pdum.gcp_project.api import CloudAPI
from pdum.gcp_project.config import Settings
from pdum.gcp_project.reconciler import ProjectReconciler


def http_error(status: int, message: str = "boom") -> HttpError:
    """Build an HttpError as returned by googleapiclient."""
    resp = httplib2.Response({"status": status})
    content = ('{"error": {"code": %d, "message": "%s"}}' % (status, message)).encode("utf-8")
    return HttpError(resp, content, uri="https://example.googleapis.com")


class FakeCloudAPI(CloudAPI):
    """CloudAPI double backed by dictionaries.

    ``failures`` maps a method name to the exception that method raises.
    ``billing_lag`` is how many billing reads still return the previous
    billing account after an update; a large value never converges.
    ``firewall_pages`` is the list of firewall name pages returned by
    ``list_firewalls``.
    """

    def __init__(self):
        self.projects: dict[str, dict] = {}
        self.billing: dict[str, str] = {}
        self.calls: list[tuple] = []
        self.failures: dict[str, Exception] = {}
        self.billing_lag = 0
        self.firewall_pages: list[list[str]] = []
        self._pending_billing: dict[str, str] = {}
        self._next_number = 123456789012

    def _call(self, method: str, *args):
        self.calls.append((method,) + args)
        if method in self.failures:
            raise self.failures[method]

    def calls_to(self, method: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == method]

    def add_project(self, project_id: str, **fields) -> dict:
        project = {
            "projectId": project_id,
            "projectNumber": str(self._next_number),
            "name": fields.pop("name", project_id),
            "lifecycleState": fields.pop("lifecycleState", "ACTIVE"),
        }
        self._next_number += 1
        project.update(fields)
        self.projects[project_id] = project
        return project

    # Resource Manager

    def create_project(self, body):
        self._call("create_project", body)
        fields = {k: v for k, v in body.items() if k != "projectId"}
        self.add_project(body["projectId"], **fields)
        return {"name": f"operations/cp.{body['projectId']}", "done": False}

    def get_project(self, project_id):
        self._call("get_project", project_id)
        if project_id not in self.projects:
            raise http_error(404, f"Project {project_id} not found")
        return dict(self.projects[project_id])

    def update_project(self, project_id, body):
        self._call("update_project", project_id, dict(body))
        self.projects[project_id] = dict(body)
        return dict(body)

    def delete_project(self, project_id):
        self._call("delete_project", project_id)
        self.projects[project_id]["lifecycleState"] = "DELETE_REQUESTED"
        return {}

    def wait_resource_manager_operation(self, operation, activity):
        self._call("wait_resource_manager_operation", operation["name"], activity)
        return dict(operation, done=True)

    # Billing

    def get_billing_info(self, project_id):
        self._call("get_billing_info", project_id)
        if project_id in self._pending_billing:
            if self.billing_lag > 0:
                self.billing_lag -= 1
            else:
                self.billing[project_id] = self._pending_billing.pop(project_id)
        info = {"name": f"projects/{project_id}/billingInfo", "projectId": project_id}
        if self.billing.get(project_id):
            info["billingAccountName"] = self.billing[project_id]
            info["billingEnabled"] = True
        return info

    def update_billing_info(self, project_id, body):
        self._call("update_billing_info", project_id, dict(body))
        self._pending_billing[project_id] = body.get("billingAccountName", "")
        return dict(body)

    # Service Usage

    def enable_service(self, project_id, service):
        self._call("enable_service", project_id, service)
        return {"name": f"operations/acf.{service}", "done": False}

    def wait_service_operation(self, operation, activity):
        self._call("wait_service_operation", operation["name"], activity)
        return dict(operation, done=True)

    # Compute

    def list_firewalls(self, project_id, *, filter, page_token=None):
        self._call("list_firewalls", project_id, filter, page_token)
        index = int(page_token.split("-")[1]) if page_token else 0
        if not self.firewall_pages:
            return {}
        page = {"items": [{"name": name} for name in self.firewall_pages[index]]}
        if index + 1 < len(self.firewall_pages):
            page["nextPageToken"] = f"page-{index + 1}"
        return page

    def delete_firewall(self, project_id, firewall):
        self._call("delete_firewall", project_id, firewall)
        return {"name": f"operation-fw-{firewall}", "status": "RUNNING"}

    def delete_network(self, project_id, network):
        self._call("delete_network", project_id, network)
        return {"name": f"operation-net-{network}", "status": "RUNNING"}

    def wait_compute_operation(self, project_id, operation, activity):
        self._call("wait_compute_operation", project_id, operation["name"], activity)
        return dict(operation, status="DONE")


@pytest.fixture
def api():
    return FakeCloudAPI()


@pytest.fixture
def settings():
    return Settings(billing_poll_interval=0.0, polling_interval=0.0)


@pytest.fixture
def reconciler(api, settings):
    return ProjectReconciler(api, settings=settings)
