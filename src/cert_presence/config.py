"""Configuration models — resource declarations and runtime settings.

A configuration document is a JSON object listing certificate resource
declarations using the resource parameter names::

    {
      "resources": [
        {
          "Thumbprint": "9988776655443322111000AAABBBCCCDDDEEEFFF",
          "Path": "certs/site0.cer",
          "Location": "LocalMachine",
          "Store": "My",
          "Ensure": "Present"
        }
      ]
    }

Relative ``Path`` values are resolved against the document's directory.
"""
from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cert_presence.certificates.address import StoreLocation, validate_store_name
from cert_presence.certificates.thumbprint import normalize_thumbprint, validate_thumbprint
from cert_presence.errors import InvalidArgumentError
from cert_presence.resource.state import DesiredState, Presence
from cert_presence.resource.validation import validate_certificate_path

DEFAULT_STORE_ROOT = Path.home() / ".cert-presence" / "stores"


class CertificateResourceConfig(BaseModel):
    """One certificate resource declaration."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    thumbprint: str = Field(alias="Thumbprint")
    path: Path = Field(alias="Path")
    location: StoreLocation = Field(alias="Location")
    store: str = Field(alias="Store")
    ensure: Presence = Field(default=Presence.PRESENT, alias="Ensure")

    @field_validator("thumbprint")
    @classmethod
    def _check_thumbprint(cls, value: str) -> str:
        value = normalize_thumbprint(value)
        if not validate_thumbprint(value):
            raise ValueError(f"invalid thumbprint {value!r}")
        return value

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: Path) -> Path:
        if not validate_certificate_path(value):
            raise ValueError(f"invalid certificate path {str(value)!r}")
        return value

    @field_validator("store")
    @classmethod
    def _check_store(cls, value: str) -> str:
        if not validate_store_name(value):
            raise ValueError(f"invalid store name {value!r}")
        return value

    def to_desired_state(self, base_dir: Path | None = None) -> DesiredState:
        """Convert to a DesiredState, resolving a relative path against *base_dir*."""
        path = self.path
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        return DesiredState.from_parameters(
            thumbprint=self.thumbprint,
            path=path,
            location=self.location,
            store=self.store,
            ensure=self.ensure,
        )


class ConfigurationDocument(BaseModel):
    """A list of certificate resource declarations."""

    resources: list[CertificateResourceConfig] = Field(default_factory=list)


def load_configuration(path: Path) -> tuple[ConfigurationDocument, list[DesiredState]]:
    """Load a JSON configuration document and its desired states.

    Raises
    ------
    InvalidArgumentError
        If the file cannot be read or fails validation.
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        document = ConfigurationDocument.model_validate(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise InvalidArgumentError("invalid_configuration", path=path, reason=exc) from exc
    base_dir = Path(path).resolve().parent
    return document, [r.to_desired_state(base_dir) for r in document.resources]


class Settings(BaseModel):
    """Runtime settings shared by the CLI and library callers.

    Parameters
    ----------
    store_root:
        Base directory of the filesystem certificate store.
    culture:
        Message catalogue culture.
    log_level:
        Logging level name.
    audit_log:
        Optional JSONL audit log path.
    """

    store_root: Path = DEFAULT_STORE_ROOT
    culture: str = "en-US"
    log_level: str = "WARNING"
    audit_log: Path | None = None

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"invalid log level {value!r}")
        return value

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``CERT_PRESENCE_*`` environment variables."""
        values: dict[str, object] = {}
        for field_name in ("store_root", "culture", "log_level", "audit_log"):
            env_value = os.environ.get(f"CERT_PRESENCE_{field_name.upper()}")
            if env_value:
                values[field_name] = env_value
        return cls(**values)
