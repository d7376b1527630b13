"""Live tests against real GCP projects.

These tests interact with real GCP APIs using Application Default Credentials (ADC).
They are skipped in CI by default but can be run locally for manual testing.

They create and delete a real project, so they need an organization or folder
and a billing account:

    PDUM_GCP_MANUAL_TESTS=1 \\
    PDUM_GCP_TEST_FOLDER=folders/123456789 \\
    PDUM_GCP_TEST_BILLING=012345-567890-ABCDEF \\
    uv run pytest tests/test_live.py -v
"""

import os
import random

import pytest

from pdum.gcp_project import ChangeSet, GoogleCloudAPI, ProjectReconciler, ProjectRecord, load_settings

# Skip these tests in CI unless PDUM_GCP_MANUAL_TESTS environment variable is set
manual_test = pytest.mark.skipif(
    not os.getenv("PDUM_GCP_MANUAL_TESTS"),
    reason="Manual test - requires GCP credentials. Set PDUM_GCP_MANUAL_TESTS=1 to run.",
)


@pytest.fixture
def live_reconciler():
    settings = load_settings()
    return ProjectReconciler(GoogleCloudAPI(settings.credentials(), settings), settings=settings)


@manual_test
def test_project_lifecycle(live_reconciler):
    """Create a project without its default network, relabel it, then delete it."""
    project_id = f"pdum-test-{random.randint(0, 99999):05d}"
    record = ProjectRecord(
        project_id=project_id,
        name="pdum live test",
        folder_id=os.getenv("PDUM_GCP_TEST_FOLDER", ""),
        billing_account=os.getenv("PDUM_GCP_TEST_BILLING", ""),
        labels={"purpose": "test"},
        auto_create_network=False,
    )

    live_reconciler.create(record)
    try:
        assert record.id == project_id
        assert record.number.isdigit()
        print(f"\n✓ Created project {project_id} ({record.number})")

        record.labels = {"purpose": "test", "stage": "updated"}
        live_reconciler.update(record, ChangeSet.of(["labels"]))
        live_reconciler.read(record)
        assert record.labels["stage"] == "updated"
        print("✓ Labels updated")
    finally:
        live_reconciler.delete(record)
        print(f"✓ Deleted project {project_id}")

    assert record.id == ""
