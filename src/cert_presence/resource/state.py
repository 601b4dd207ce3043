"""Desired and observed state records for the certificate resource.

Both records are immutable values built fresh for every operation. Only
their ``presence`` fields take part in the convergence comparison; the
source path is an action parameter, not a state attribute.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from cert_presence.certificates.address import StoreAddress, StoreLocation
from cert_presence.certificates.stored_cert import StoredCertificate
from cert_presence.errors import InvalidArgumentError


class Presence(str, Enum):
    """Whether a certificate should be (or is) in the store."""

    PRESENT = "Present"
    ABSENT = "Absent"


def parse_presence(value: str | Presence) -> Presence:
    """Coerce *value* to a Presence, matching names case-insensitively."""
    if isinstance(value, Presence):
        return value
    for presence in Presence:
        if isinstance(value, str) and value.lower() == presence.value.lower():
            return presence
    raise InvalidArgumentError(
        "invalid_presence",
        presence=value,
        presences=", ".join(p.value for p in Presence),
    )


@dataclass(frozen=True)
class DesiredState:
    """The declared state of one certificate.

    Parameters
    ----------
    thumbprint:
        Hex thumbprint identifying the certificate.
    path:
        Certificate file imported when *presence* is ``Present``.
    address:
        Store the certificate should (or should not) be in.
    presence:
        Desired presence. Defaults to ``Present``.
    """

    thumbprint: str
    path: Path
    address: StoreAddress
    presence: Presence = Presence.PRESENT

    @classmethod
    def from_parameters(
        cls,
        thumbprint: str,
        path: str | Path,
        location: str | StoreLocation,
        store: str,
        ensure: str | Presence = Presence.PRESENT,
    ) -> "DesiredState":
        """Build a DesiredState from flat resource parameters."""
        return cls(
            thumbprint=thumbprint,
            path=Path(path),
            address=StoreAddress(location=location, store_name=store),
            presence=parse_presence(ensure),
        )


@dataclass(frozen=True)
class ObservedState:
    """The actual state of a certificate as probed from its store.

    ``thumbprint``, ``path`` and ``address`` are echoed from the request;
    ``presence`` and ``certificate`` come from the store probe.
    """

    thumbprint: str
    path: Path
    address: StoreAddress
    presence: Presence
    certificate: StoredCertificate | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialize using the resource parameter names."""
        return {
            "Thumbprint": self.thumbprint,
            "Path": str(self.path),
            "Location": self.address.location.value,
            "Store": self.address.store_name,
            "Ensure": self.presence.value,
            "Certificate": self.certificate.to_dict() if self.certificate else None,
        }
