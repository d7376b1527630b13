"""Deleting a compute network together with its firewall rules."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from googleapiclient.errors import HttpError

from pdum.gcp_project.types.constants import COMPUTE_NETWORK_LINK
from pdum.gcp_project.types.exceptions import NetworkDeletionError, OperationError, OperationTimeoutError

if TYPE_CHECKING:
    from pdum.gcp_project.api import CloudAPI

logger = logging.getLogger(__name__)


def network_link(project_id: str, network: str) -> str:
    """Return the self link of a global network."""
    return COMPUTE_NETWORK_LINK.format(project_id=project_id, network=network)


def force_delete_compute_network(api: "CloudAPI", project_id: str, network: str) -> None:
    """Delete a network after deleting every firewall rule attached to it.

    A network cannot be deleted while firewall rules reference it. Rules are
    listed page by page and deleted one at a time, each deletion awaited
    before the next starts. The first failure aborts the whole sequence.

    Args:
        api: Remote API to call
        project_id: The project owning the network
        network: Network name, e.g. ``"default"``

    Raises:
        NetworkDeletionError: If listing, deleting or waiting fails at any step
    """
    filter_expr = f"network eq {network_link(project_id, network)}"

    page_token = None
    while True:
        try:
            page = api.list_firewalls(project_id, filter=filter_expr, page_token=page_token)
        except HttpError as e:
            raise NetworkDeletionError(f"Error listing firewall rules in project {project_id}: {e}") from e

        items = page.get("items", [])
        logger.debug("Found %d firewall rules in %r network", len(items), network)

        for firewall in items:
            name = firewall["name"]
            try:
                op = api.delete_firewall(project_id, name)
                api.wait_compute_operation(project_id, op, f"firewall {name} to delete")
            except (HttpError, OperationError, OperationTimeoutError) as e:
                raise NetworkDeletionError(f"Error deleting firewall {name!r}: {e}") from e

        page_token = page.get("nextPageToken")
        if not page_token:
            break

    try:
        op = api.delete_network(project_id, network)
        api.wait_compute_operation(project_id, op, f"network {network} to delete")
    except (HttpError, OperationError, OperationTimeoutError) as e:
        raise NetworkDeletionError(f"Error deleting network {network!r}: {e}") from e

    logger.debug("Deleted network %r in project %s", network, project_id)


__all__ = ["force_delete_compute_network", "network_link"]
