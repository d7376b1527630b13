"""Tests for ProjectReconciler.create."""

import pytest

from conftest import http_error
from pdum.gcp_project.types import (
    NetworkDeletionError,
    OperationError,
    ProjectAPIError,
    ProjectRecord,
)


def test_create_minimal(api, reconciler):
    record = ProjectRecord(project_id="p1-abcdef", name="Test")

    reconciler.create(record)

    assert api.calls_to("create_project") == [("create_project", {"projectId": "p1-abcdef", "name": "Test"})]
    assert record.id == "p1-abcdef"
    assert record.number == api.projects["p1-abcdef"]["projectNumber"]
    assert record.lifecycle_state == "ACTIVE"
    assert record.billing_account == ""
    assert not api.calls_to("enable_service")
    assert not api.calls_to("list_firewalls")


def test_create_body_with_folder_parent_and_labels(api, reconciler):
    record = ProjectRecord(project_id="p1-abcdef", name="Test", folder_id="folders/555", labels={"env": "dev"})

    reconciler.create(record)

    body = api.calls_to("create_project")[0][1]
    assert body["parent"] == {"type": "folder", "id": "555"}
    assert body["labels"] == {"env": "dev"}
    assert record.folder_id == "555"
    assert record.org_id == ""


def test_create_without_default_network(api, reconciler):
    """Create p1 with auto_create_network=False: the default network and its rules are removed."""
    api.firewall_pages = [["default-allow-ssh", "default-allow-rdp"], ["default-allow-icmp"]]
    record = ProjectRecord(project_id="p1-abcdef", name="Test", auto_create_network=False)

    reconciler.create(record)

    names = [c[0] for c in api.calls]
    assert names[:2] == ["create_project", "wait_resource_manager_operation"]
    assert names.index("get_project") < names.index("enable_service") < names.index("list_firewalls")
    assert api.calls_to("enable_service") == [("enable_service", "p1-abcdef", "compute.googleapis.com")]
    assert [c[2] for c in api.calls_to("delete_firewall")] == [
        "default-allow-ssh",
        "default-allow-rdp",
        "default-allow-icmp",
    ]
    assert len(api.calls_to("list_firewalls")) == 2
    assert names[-2:] == ["delete_network", "wait_compute_operation"]
    assert record.id == "p1-abcdef"
    assert record.name == "Test"
    assert record.number
    assert record.auto_create_network is False


def test_create_links_billing_account_before_reading(api, reconciler):
    record = ProjectRecord(project_id="p1-abcdef", name="Test", billing_account="0123-4567-89AB")

    reconciler.create(record)

    assert api.calls_to("update_billing_info") == [
        ("update_billing_info", "p1-abcdef", {"billingAccountName": "billingAccounts/0123-4567-89AB"})
    ]
    assert record.billing_account == "0123-4567-89AB"


def test_create_p1_without_default_network(api, reconciler):
    """Short ids go straight to the API; Resource Manager decides what is valid."""
    api.firewall_pages = [["default-allow-ssh"]]
    record = ProjectRecord(project_id="p1", name="Test", auto_create_network=False)

    reconciler.create(record)

    assert api.calls_to("create_project") == [("create_project", {"projectId": "p1", "name": "Test"})]
    assert api.calls_to("enable_service") == [("enable_service", "p1", "compute.googleapis.com")]
    assert api.calls_to("delete_firewall") == [("delete_firewall", "p1", "default-allow-ssh")]
    assert api.calls_to("delete_network") == [("delete_network", "p1", "default")]
    assert record.id == "p1"
    assert record.name == "Test"
    assert record.number
    assert record.auto_create_network is False


def test_rejected_project_id_surfaces_api_error(api, reconciler):
    api.failures["create_project"] = http_error(400, "invalid project id")
    record = ProjectRecord(project_id="Bad_Id", name="Test")

    with pytest.raises(ProjectAPIError, match=r"Error creating project Bad_Id \(Test\)"):
        reconciler.create(record)
    assert record.id == ""


def test_submission_failure_leaves_id_unset(api, reconciler):
    api.failures["create_project"] = http_error(409, "already exists")
    record = ProjectRecord(project_id="p1-abcdef", name="Test")

    with pytest.raises(ProjectAPIError, match=r"Error creating project p1-abcdef \(Test\)"):
        reconciler.create(record)
    assert record.id == ""


def test_wait_failure_clears_id(api, reconciler):
    api.failures["wait_resource_manager_operation"] = OperationError("project to create", "6", "quota exceeded")
    record = ProjectRecord(project_id="p1-abcdef", name="Test")

    with pytest.raises(OperationError, match="quota exceeded"):
        reconciler.create(record)
    assert record.id == ""
    assert not api.calls_to("get_project")


def test_billing_failure_keeps_created_project(api, reconciler):
    api.failures["update_billing_info"] = http_error(403, "permission denied")
    record = ProjectRecord(project_id="p1-abcdef", name="Test", billing_account="0123-4567-89AB")

    with pytest.raises(ProjectAPIError, match="Error setting billing account"):
        reconciler.create(record)
    assert record.id == "p1-abcdef"
    assert record.billing_account == ""
    assert not api.calls_to("delete_project")


def test_enable_compute_failure_message(api, reconciler):
    api.failures["enable_service"] = http_error(403, "denied")
    record = ProjectRecord(project_id="p1-abcdef", name="Test", auto_create_network=False)

    with pytest.raises(ProjectAPIError, match="Error enabling the Compute Engine API"):
        reconciler.create(record)
    assert record.id == "p1-abcdef"


def test_network_deletion_failure_message(api, reconciler):
    api.failures["delete_network"] = http_error(400, "in use")
    record = ProjectRecord(project_id="p1-abcdef", name="Test", auto_create_network=False)

    with pytest.raises(NetworkDeletionError, match="Error deleting default network in project p1-abcdef"):
        reconciler.create(record)
