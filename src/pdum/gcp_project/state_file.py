"""Reading and writing project records as YAML files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from pdum.gcp_project.migrate import migrate_state
from pdum.gcp_project.types.exceptions import ProjectError
from pdum.gcp_project.types.record import ProjectRecord


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ProjectError(f"Could not read {path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise ProjectError(f"Could not parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ProjectError(f"{path} must contain a mapping")
    return data


def load_desired(path: Path) -> ProjectRecord:
    """Load a desired project configuration.

    The file is a flat mapping of record attributes, e.g.::

        project_id: my-project-12345
        name: My Project
        folder_id: folders/123456789
        billing_account: 012345-567890-ABCDEF
        auto_create_network: false
        labels:
          team: data
    """
    data = _read_yaml(Path(path))
    if "id" in data:
        raise ProjectError(f"{path}: 'id' is assigned by GCP and cannot be configured")
    try:
        return ProjectRecord.from_state({"attributes": data})
    except (TypeError, ValueError) as e:
        raise ProjectError(f"Invalid project configuration in {path}: {e}") from e


def load_record(path: Path) -> ProjectRecord:
    """Load a persisted project state, upgrading older schema versions."""
    state = migrate_state(_read_yaml(Path(path)))
    try:
        return ProjectRecord.from_state(state)
    except (TypeError, ValueError) as e:
        raise ProjectError(f"Invalid project state in {path}: {e}") from e


def save_record(path: Path, record: ProjectRecord) -> Path:
    """Persist ``record``, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(record.to_state(), f, default_flow_style=False, sort_keys=False)
    return path


__all__ = ["load_desired", "load_record", "save_record"]
