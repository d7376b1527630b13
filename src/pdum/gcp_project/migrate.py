"""Upgrading persisted project state to the current schema version."""

from __future__ import annotations

import copy
import logging
from typing import Any

from pdum.gcp_project.types.constants import STATE_SCHEMA_VERSION
from pdum.gcp_project.types.exceptions import StateMigrationError

logger = logging.getLogger(__name__)

# Attributes that were dropped from the schema (IAM policy moved to its own resource)
_REMOVED_ATTRIBUTES = ("policy_data", "policy_etag")


def migrate_state(state: dict[str, Any]) -> dict[str, Any]:
    """Return ``state`` upgraded to `STATE_SCHEMA_VERSION`.

    A state without ``schema_version`` is treated as version 0. The input is
    not modified.

    Raises:
        StateMigrationError: If the version is unknown or newer than supported
    """
    migrated = copy.deepcopy(state)
    version = migrated.get("schema_version", 0)
    if not isinstance(version, int) or isinstance(version, bool):
        raise StateMigrationError(f"Invalid schema_version: {version!r}")
    if version > STATE_SCHEMA_VERSION:
        raise StateMigrationError(
            f"State schema version {version} is newer than the supported version {STATE_SCHEMA_VERSION}"
        )

    while version < STATE_SCHEMA_VERSION:
        step = _MIGRATIONS.get(version)
        if step is None:
            raise StateMigrationError(f"Unexpected schema version: {version}")
        logger.debug("Migrating project state %r from v%d", migrated.get("id", ""), version)
        migrated = step(migrated)
        version += 1
        migrated["schema_version"] = version

    return migrated


def _v0_to_v1(state: dict[str, Any]) -> dict[str, Any]:
    """Projects recorded before deletion was supported must never be deleted remotely."""
    attributes = state.setdefault("attributes", {})
    attributes["skip_delete"] = True
    attributes["project_id"] = state.get("id", "")
    for name in _REMOVED_ATTRIBUTES:
        attributes.pop(name, None)
    return state


_MIGRATIONS = {0: _v0_to_v1}


__all__ = ["migrate_state"]
