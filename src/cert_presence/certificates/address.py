"""Certificate store addressing.

A store is addressed by a (location, store name) pair. The pair resolves
deterministically to a store path of the form ``Cert:\\<Location>\\<Store>``,
which is what the import primitive consumes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from cert_presence.errors import InvalidArgumentError

STORE_PATH_PREFIX = "Cert:"

_FORBIDDEN_STORE_CHARS = frozenset('\\/:*?"<>|\x00')


class StoreLocation(str, Enum):
    """Scope under which a certificate store is addressed.

    CURRENT_USER  — per-user stores.
    LOCAL_MACHINE — machine-wide stores.
    """

    CURRENT_USER = "CurrentUser"
    LOCAL_MACHINE = "LocalMachine"


def parse_location(value: str | StoreLocation) -> StoreLocation:
    """Coerce *value* to a StoreLocation, matching names case-insensitively.

    Raises
    ------
    InvalidArgumentError
        If *value* does not name a known location.
    """
    if isinstance(value, StoreLocation):
        return value
    for location in StoreLocation:
        if isinstance(value, str) and value.lower() == location.value.lower():
            return location
    raise InvalidArgumentError(
        "invalid_location",
        location=value,
        locations=", ".join(loc.value for loc in StoreLocation),
    )


def validate_store_name(value: str) -> bool:
    """Return True if *value* can name a store container."""
    if not isinstance(value, str) or not value.strip():
        return False
    if value in (".", ".."):
        return False
    return not any(ch in _FORBIDDEN_STORE_CHARS for ch in value)


@dataclass(frozen=True)
class StoreAddress:
    """A logical certificate container on the host.

    Parameters
    ----------
    location:
        Store location scope.
    store_name:
        Name of the store within the location, e.g. ``"My"`` or ``"Root"``.
    """

    location: StoreLocation
    store_name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "location", parse_location(self.location))
        if not validate_store_name(self.store_name):
            raise InvalidArgumentError("invalid_store_name", store=self.store_name)

    @property
    def store_path(self) -> str:
        return resolve_store_path(self.location, self.store_name)

    def __str__(self) -> str:
        return self.store_path


def resolve_store_path(location: StoreLocation | str, store_name: str) -> str:
    """Return the store path string for a (location, store name) pair.

    Example
    -------
    >>> resolve_store_path(StoreLocation.LOCAL_MACHINE, "My")
    'Cert:\\\\LocalMachine\\\\My'
    """
    resolved = parse_location(location)
    return f"{STORE_PATH_PREFIX}\\{resolved.value}\\{store_name}"


def parse_store_path(store_path: str) -> StoreAddress:
    """Inverse of :func:`resolve_store_path`.

    Accepts either path separator and matches the ``Cert:`` prefix and the
    location case-insensitively.

    Raises
    ------
    InvalidArgumentError
        If *store_path* is not of the form ``Cert:\\<Location>\\<Store>``.
    """
    parts = store_path.replace("/", "\\").split("\\")
    if len(parts) != 3 or parts[0].lower() != STORE_PATH_PREFIX.lower():
        raise InvalidArgumentError("invalid_store_path", store_path=store_path)
    try:
        return StoreAddress(location=parse_location(parts[1]), store_name=parts[2])
    except InvalidArgumentError as exc:
        raise InvalidArgumentError("invalid_store_path", store_path=store_path) from exc
