"""Project record: the desired and observed state of one GCP project."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Optional

from .constants import FOLDER_PREFIX, PARENT_TYPE_FOLDER, PARENT_TYPE_ORGANIZATION, STATE_SCHEMA_VERSION


@dataclass
class ProjectRecord:
    """Information about a managed GCP project.

    Attributes
    ----------
    project_id : str
        Configured project id. Set once at creation and never changed.
    name : str
        Human-friendly display name.
    org_id : str
        Numeric organization id of the parent, or ``""``.
    folder_id : str
        Folder id of the parent (``"123"`` or ``"folders/123"``), or ``""``.
    billing_account : str
        Billing account id without the ``billingAccounts/`` prefix; ``""`` means unlinked.
    labels : dict[str, str]
        Project labels.
    auto_create_network : bool
        Keep the ``default`` network created with the project. Only used at
        creation time; never read back from the API.
    skip_delete : bool
        Forget the project on delete instead of deleting it remotely.
    id : str
        State identifier. Empty when the project does not exist (never created,
        deleted, or no longer ``ACTIVE``).
    number : str
        Project number assigned by GCP, as a decimal string.
    lifecycle_state : str
        Last observed lifecycle state.
    """

    project_id: str
    name: str = ""
    org_id: str = ""
    folder_id: str = ""
    billing_account: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    auto_create_network: bool = True
    skip_delete: bool = False
    id: str = ""
    number: str = ""
    lifecycle_state: str = ""

    @property
    def exists(self) -> bool:
        return bool(self.id)

    def clear(self) -> None:
        """Mark the record as absent so the host drops it."""
        self.id = ""

    def remote_parent(self) -> Optional[dict[str, str]]:
        """Return the Resource Manager v1 ``parent`` for this record.

        The organization is used when ``org_id`` is set; the folder only when
        ``org_id`` is empty. ``None`` means no parent was configured.
        """
        if self.org_id:
            return {"type": PARENT_TYPE_ORGANIZATION, "id": self.org_id}
        if self.folder_id:
            return {"type": PARENT_TYPE_FOLDER, "id": normalize_folder_id(self.folder_id)}
        return None

    def to_state(self) -> dict[str, Any]:
        """Serialize to the persisted state layout (current schema version)."""
        attributes = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "id"}
        attributes["labels"] = dict(self.labels)
        return {"schema_version": STATE_SCHEMA_VERSION, "id": self.id, "attributes": attributes}

    @classmethod
    def from_state(cls, state: dict[str, Any]) -> "ProjectRecord":
        """Build a record from a persisted state already at the current schema version."""
        attributes = dict(state.get("attributes", {}))
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(attributes) - known)
        if unknown:
            raise ValueError(f"Unknown project attributes: {', '.join(unknown)}")

        for flag in ("auto_create_network", "skip_delete"):
            if flag in attributes:
                attributes[flag] = _as_bool(attributes[flag])
        attributes["labels"] = {str(k): str(v) for k, v in (attributes.get("labels") or {}).items()}
        attributes["id"] = state.get("id", "") or ""
        return cls(**attributes)


def normalize_folder_id(folder_id: str) -> str:
    """Strip an optional ``folders/`` prefix from a folder id."""
    if folder_id.startswith(FOLDER_PREFIX):
        return folder_id[len(FOLDER_PREFIX) :]
    return folder_id


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ValueError(f"Expected a boolean, got {value!r}")


__all__ = ["ProjectRecord", "normalize_folder_id"]
