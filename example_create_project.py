#!/usr/bin/env python3
"""Example script demonstrating a project lifecycle.

This script creates a project without the default network, links a billing
account, relabels it, and finally deletes it.

Usage:
    python example_create_project.py my-project-12345 folders/123456789 012345-567890-ABCDEF

Note: This requires the Cloud Resource Manager, Cloud Billing, Service Usage and
Compute Engine APIs to be enabled on your quota project, and permission to
create projects in the folder.
"""

import logging
import sys

from pdum.gcp_project import ChangeSet, GoogleCloudAPI, ProjectReconciler, ProjectRecord, load_settings


def main():
    """Create, update and delete one project."""
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(2)
    project_id, folder_id, billing_account = sys.argv[1:]

    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    settings = load_settings()
    reconciler = ProjectReconciler(GoogleCloudAPI(settings.credentials(), settings), settings=settings)

    record = ProjectRecord(
        project_id=project_id,
        name="Example project",
        folder_id=folder_id,
        billing_account=billing_account,
        auto_create_network=False,
    )
    reconciler.create(record)
    print(f"\n  Project: {record.id}")
    print(f"  Number: {record.number}")
    print(f"  Parent folder: {record.folder_id}")
    print(f"  💰 Billing: {record.billing_account or 'none'}")

    record.labels = {"example": "true"}
    reconciler.update(record, ChangeSet.of(["labels"]))
    reconciler.read(record)
    print(f"  Labels: {record.labels}")

    reconciler.delete(record)
    print(f"\n  Deleted {project_id}")


if __name__ == "__main__":
    main()
