"""Explicit set of changed record fields handed to an update."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from .record import ProjectRecord

MUTABLE_FIELDS: tuple[str, ...] = ("name", "org_id", "folder_id", "billing_account", "labels")


@dataclass(frozen=True)
class ChangeSet:
    """Names of the mutable fields whose desired value differs from the current state."""

    changed: frozenset[str] = frozenset()

    def __post_init__(self):
        unknown = set(self.changed) - set(MUTABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated in place: {', '.join(sorted(unknown))}")

    @classmethod
    def of(cls, names: Iterable[str]) -> "ChangeSet":
        return cls(frozenset(names))

    @classmethod
    def between(cls, current: "ProjectRecord", desired: "ProjectRecord") -> "ChangeSet":
        """Diff two records over the mutable fields.

        ``folder_id`` values are compared after stripping ``folders/`` so that
        both spellings of the same folder are not reported as a change.
        """
        from .record import normalize_folder_id

        changed = set()
        for f in fields(desired):
            if f.name not in MUTABLE_FIELDS:
                continue
            old, new = getattr(current, f.name), getattr(desired, f.name)
            if f.name == "folder_id":
                old, new = normalize_folder_id(old), normalize_folder_id(new)
            if old != new:
                changed.add(f.name)
        return cls(frozenset(changed))

    def has_change(self, name: str) -> bool:
        return name in self.changed

    def __bool__(self) -> bool:
        return bool(self.changed)


__all__ = ["ChangeSet", "MUTABLE_FIELDS"]
