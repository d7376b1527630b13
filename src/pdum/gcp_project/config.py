"""Settings for pdum_gcp_project.

Settings are read from a YAML file, by default
``~/.config/gcloud/pdum_gcp_project/config.yaml`` (override the location with
``PDUM_GCP_PROJECT_CONFIG``). Any field can then be overridden from the
environment as ``PDUM_GCP_PROJECT_<FIELD>``, e.g.
``PDUM_GCP_PROJECT_OPERATION_TIMEOUT=600``.

Example config file::

    credentials_file: ~/.config/gcloud/pdum_gcp/work/admin.json
    operation_timeout: 240
    polling_interval: 5
    billing_poll_attempts: 3
    billing_poll_interval: 3
    log_level: INFO
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import google.auth
import yaml
from google.auth.credentials import Credentials
from google.oauth2 import service_account

from pdum.gcp_project.types.constants import CLOUD_PLATFORM_SCOPE
from pdum.gcp_project.types.exceptions import ConfigError

ENV_PREFIX = "PDUM_GCP_PROJECT_"
CONFIG_PATH_ENV = f"{ENV_PREFIX}CONFIG"


@dataclass(frozen=True)
class Settings:
    """Runtime settings shared by every reconciler call.

    Attributes
    ----------
    credentials_file : str, optional
        Service account key file. When unset, Application Default Credentials are used.
    operation_timeout : float
        Seconds to wait for a long-running operation.
    polling_interval : float
        Seconds between long-running operation polls.
    billing_poll_attempts : int
        Reads performed while waiting for a billing account change to show up.
    billing_poll_interval : float
        Seconds between those reads.
    log_level : str
        Log level used by the command line.
    """

    credentials_file: Optional[str] = None
    operation_timeout: float = 240.0
    polling_interval: float = 5.0
    billing_poll_attempts: int = 3
    billing_poll_interval: float = 3.0
    log_level: str = "INFO"

    def __post_init__(self):
        if self.operation_timeout <= 0:
            raise ConfigError("operation_timeout must be positive")
        if self.polling_interval < 0 or self.billing_poll_interval < 0:
            raise ConfigError("polling intervals must not be negative")
        if self.billing_poll_attempts < 1:
            raise ConfigError("billing_poll_attempts must be at least 1")

    def credentials(self) -> Credentials:
        """Return credentials from ``credentials_file`` or Application Default Credentials."""
        if self.credentials_file:
            path = Path(self.credentials_file).expanduser()
            if not path.exists():
                raise ConfigError(f"Credentials file not found: {path}")
            return service_account.Credentials.from_service_account_file(str(path), scopes=[CLOUD_PLATFORM_SCOPE])
        credentials, _ = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
        return credentials


def default_config_path() -> Path:
    """Get the default settings file location."""
    override = os.getenv(CONFIG_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "gcloud" / "pdum_gcp_project" / "config.yaml"


def load_settings(path: Optional[Path] = None, *, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Load settings from a YAML file and environment overrides.

    Args:
        path: Settings file. Defaults to `default_config_path()`; a missing file means defaults.
        environ: Environment mapping, defaults to ``os.environ``.

    Returns:
        The merged Settings

    Raises:
        ConfigError: If the file is not a mapping, has unknown keys, or a value has the wrong type
    """
    environ = os.environ if environ is None else environ
    path = default_config_path() if path is None else Path(path)

    values: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Could not parse settings file {path}: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping")
        values.update(loaded)

    for f in fields(Settings):
        env_value = environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if env_value is not None:
            values[f.name] = env_value

    return _build_settings(values, source=str(path))


def _build_settings(values: Mapping[str, Any], *, source: str) -> Settings:
    known = {f.name: f for f in fields(Settings)}
    unknown = sorted(set(values) - set(known))
    if unknown:
        raise ConfigError(f"Unknown settings in {source}: {', '.join(unknown)}")

    converted: dict[str, Any] = {}
    for name, value in values.items():
        converter = {"billing_poll_attempts": int, "log_level": lambda v: str(v).upper()}.get(name)
        if converter is None:
            converter = str if name == "credentials_file" else float
        if value is None:
            converted[name] = None if name == "credentials_file" else known[name].default
            continue
        try:
            converted[name] = converter(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value for {name} in {source}: {value!r}") from e

    return replace(Settings(), **converted)


__all__ = ["Settings", "default_config_path", "load_settings"]
