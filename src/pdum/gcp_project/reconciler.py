"""Create, read, update, delete and import GCP projects.

`ProjectReconciler` turns a `ProjectRecord` into the sequence of Resource
Manager, Cloud Billing, Service Usage and Compute calls that make the remote
project match it, then reads the remote project back into the record. It
keeps no state between calls: everything it learns is written to the record
it was given.

Example:
    >>> from pdum.gcp_project import GoogleCloudAPI, ProjectReconciler, ProjectRecord, load_settings
    >>> settings = load_settings()
    >>> reconciler = ProjectReconciler(GoogleCloudAPI(settings.credentials(), settings), settings=settings)
    >>> record = ProjectRecord(project_id="my-project-12345", name="My Project", auto_create_network=False)
    >>> reconciler.create(record)
    >>> record.number
    '123456789012'
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

import backoff
from googleapiclient.errors import HttpError

from pdum.gcp_project.api import CloudAPI, is_not_found
from pdum.gcp_project.config import Settings
from pdum.gcp_project.network import force_delete_compute_network
from pdum.gcp_project.types.billing_account import billing_info_body, parse_billing_account_name
from pdum.gcp_project.types.change_set import ChangeSet
from pdum.gcp_project.types.constants import (
    ACTIVE_STATE,
    COMPUTE_API,
    DEFAULT_NETWORK,
    PARENT_TYPE_FOLDER,
    PARENT_TYPE_ORGANIZATION,
    PROJECT_PREFIX,
)
from pdum.gcp_project.types.exceptions import (
    BillingAccountTimeoutError,
    NetworkDeletionError,
    ProjectAPIError,
    ProjectError,
    ProjectNotFoundError,
)
from pdum.gcp_project.types.record import ProjectRecord

logger = logging.getLogger(__name__)


class ProjectReconciler:
    """Lifecycle operations for a single GCP project.

    Parameters
    ----------
    api : CloudAPI
        Remote API used for every call.
    settings : Settings, optional
        Billing poll attempts and interval. Defaults to ``Settings()``.
    """

    def __init__(self, api: CloudAPI, *, settings: Optional[Settings] = None):
        self.api = api
        self.settings = settings or Settings()

    def create(self, record: ProjectRecord) -> None:
        """Create the project described by ``record``.

        The record's ``id`` is set as soon as the create request is accepted,
        and cleared again if the create operation fails. A billing account is
        linked once the project exists. With ``auto_create_network=False`` the
        Compute Engine API is enabled and the ``default`` network deleted.

        Raises
        ------
        ProjectAPIError
            If a remote call fails.
        OperationError, OperationTimeoutError
            If the create operation fails or does not finish.
        BillingAccountTimeoutError
            If the billing account is not visible after linking.
        ProjectNotFoundError
            If the project disappears while the billing account is linked.
        NetworkDeletionError
            If the default network cannot be deleted.
        """
        project_id = record.project_id

        body: dict = {"projectId": project_id, "name": record.name}
        parent = record.remote_parent()
        if parent is not None:
            body["parent"] = parent
        if record.labels:
            body["labels"] = dict(record.labels)

        logger.debug("Creating new project %r", project_id)
        try:
            operation = self.api.create_project(body)
        except HttpError as e:
            raise ProjectAPIError(f"Error creating project {project_id} ({record.name}): {e}") from e

        record.id = project_id

        try:
            self.api.wait_resource_manager_operation(operation, "project to create")
        except HttpError as e:
            record.clear()
            raise ProjectAPIError(f"Error waiting for project {project_id} to create: {e}") from e
        except ProjectError:
            # The project was never created
            record.clear()
            raise

        if record.billing_account:
            self._update_billing_account(record)

        self.read(record)

        # There is no "don't create the default network" option at creation
        # time, only deleting it afterwards.
        if not record.auto_create_network:
            try:
                operation = self.api.enable_service(project_id, COMPUTE_API)
                self.api.wait_service_operation(operation, f"{COMPUTE_API} to enable")
            except (HttpError, ProjectError) as e:
                raise ProjectAPIError(
                    f"Error enabling the Compute Engine API required to delete the default network: {e}"
                ) from e

            try:
                force_delete_compute_network(self.api, project_id, DEFAULT_NETWORK)
            except NetworkDeletionError as e:
                raise NetworkDeletionError(f"Error deleting default network in project {project_id}: {e}") from e

    def read(self, record: ProjectRecord) -> None:
        """Refresh ``record`` from the remote project.

        A project that is gone (HTTP 404) or not ``ACTIVE`` (for example
        ``DELETE_REQUESTED``) is not an error: the record is cleared so the
        host drops it.

        Raises
        ------
        ProjectAPIError
            If the project or its billing info cannot be read.
        BillingAccountParseError
            If the billing account name has an unexpected prefix.
        """
        project_id = record.id
        if not project_id:
            raise ProjectError("Cannot read a project record without an id")

        try:
            project = self.api.get_project(project_id)
        except HttpError as e:
            if is_not_found(e):
                logger.warning("Removing Project %r because it's gone", project_id)
                record.clear()
                return
            raise ProjectAPIError(f"Error reading Project {project_id!r}: {e}") from e

        lifecycle_state = project.get("lifecycleState", "")
        record.lifecycle_state = lifecycle_state
        if lifecycle_state != ACTIVE_STATE:
            logger.warning(
                "Removing project %r because its state is %r (requires %r).",
                project_id,
                lifecycle_state,
                ACTIVE_STATE,
            )
            record.clear()
            return

        record.project_id = project_id
        record.number = str(project.get("projectNumber", ""))
        record.name = project.get("name", "")
        record.labels = dict(project.get("labels") or {})

        parent = project.get("parent") or {}
        if parent.get("type") == PARENT_TYPE_ORGANIZATION:
            record.org_id = parent.get("id", "")
            record.folder_id = ""
        elif parent.get("type") == PARENT_TYPE_FOLDER:
            record.folder_id = parent.get("id", "")
            record.org_id = ""

        try:
            billing_info = self.api.get_billing_info(project_id)
        except HttpError as e:
            raise ProjectAPIError(
                f"Error reading billing account for project '{PROJECT_PREFIX}{project_id}': {e}"
            ) from e
        record.billing_account = parse_billing_account_name(
            billing_info.get("billingAccountName") or "", project_id=project_id
        )

    def update(self, record: ProjectRecord, changes: ChangeSet) -> None:
        """Apply the changed fields of ``record`` to the remote project.

        The Resource Manager v1 API only accepts whole projects, so the
        current project is fetched first and each changed field group (name,
        parent, labels) is sent as its own full update, in that order.
        Billing goes through the Cloud Billing API between parent and labels.
        A failure stops the sequence; earlier updates are not undone.

        Raises
        ------
        ProjectNotFoundError
            If the project no longer exists.
        ProjectAPIError
            If a remote call fails.
        BillingAccountTimeoutError
            If a billing account change is not visible in time.
        """
        project_id = record.id
        desired = replace(record, labels=dict(record.labels))

        try:
            project = self.api.get_project(project_id)
        except HttpError as e:
            if is_not_found(e):
                raise ProjectNotFoundError(f"Project {project_id!r} does not exist.") from e
            raise ProjectAPIError(f"Error checking project {project_id!r}: {e}") from e

        if changes.has_change("name"):
            project["name"] = desired.name
            project = self._update_project(project_id, project, desired.name)

        if changes.has_change("org_id") or changes.has_change("folder_id"):
            parent = desired.remote_parent()
            if parent is not None:
                project["parent"] = parent
            project = self._update_project(project_id, project, desired.name)

        if changes.has_change("billing_account"):
            self._update_billing_account(record)

        if changes.has_change("labels"):
            project["labels"] = dict(desired.labels)
            project = self._update_project(project_id, project, desired.name)
            record.labels = dict(desired.labels)

    def delete(self, record: ProjectRecord) -> None:
        """Delete the project, or only forget it when ``skip_delete`` is set."""
        if not record.exists:
            logger.debug("Project %r is not tracked; nothing to delete", record.project_id)
        elif not record.skip_delete:
            project_id = record.id
            try:
                self.api.delete_project(project_id)
            except HttpError as e:
                raise ProjectAPIError(f"Error deleting project {project_id!r}: {e}") from e
        else:
            logger.debug("skip_delete is set; leaving project %r in place", record.id)
        record.clear()

    def import_state(self, record: ProjectRecord) -> ProjectRecord:
        """Prepare a record for adopting an existing project.

        ``auto_create_network`` is always set to True. Its real value cannot
        be read back from the API, and True is the default, so an imported
        project shows no spurious change. Follow with `read` to populate the
        remaining fields.
        """
        if not record.id:
            record.id = record.project_id
        record.auto_create_network = True
        return record

    def _update_project(self, project_id: str, project: dict, display_name: str) -> dict:
        try:
            return self.api.update_project(project_id, project)
        except HttpError as e:
            raise ProjectAPIError(f"Error updating project {display_name!r}: {e}") from e

    def _update_billing_account(self, record: ProjectRecord) -> None:
        """Link ``record.billing_account`` (or unlink when empty) and wait until it reads back."""
        project_id = record.id
        desired = record.billing_account

        try:
            self.api.update_billing_info(project_id, billing_info_body(desired))
        except HttpError as e:
            record.billing_account = ""
            raise ProjectAPIError(
                f"Error setting billing account {desired!r} for project '{PROJECT_PREFIX}{project_id}': {e}"
            ) from e

        # Billing changes are eventually consistent
        @backoff.on_predicate(
            backoff.constant,
            predicate=lambda observed: observed != desired,
            max_tries=self.settings.billing_poll_attempts,
            interval=self.settings.billing_poll_interval,
            jitter=None,
            logger=logger,
            backoff_log_level=logging.DEBUG,
            giveup_log_level=logging.WARNING,
        )
        def observe() -> str:
            self.read(record)
            if not record.exists:
                raise ProjectNotFoundError(
                    f"Project {project_id!r} disappeared while waiting for billing account {desired!r}"
                )
            return record.billing_account

        observed = observe()
        if observed != desired:
            raise BillingAccountTimeoutError(desired, observed)


__all__ = ["ProjectReconciler"]
