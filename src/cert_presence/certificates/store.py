"""Certificate storage — abstract interface plus in-memory and filesystem stores.

CertStore defines the narrow contract the reconciliation core relies on:
find, import, and remove, all scoped to a :class:`StoreAddress`.
Concrete backends only implement container enumeration and single-entry
insert/delete; identity matching and store-path handling live here so
every backend behaves identically.

FilesystemCertStore persists certificates as DER files under a
configurable base directory, organized as ``<Location>/<Store>/<SHA1>.cer``.
"""
from __future__ import annotations

import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from cert_presence.certificates.address import (
    StoreAddress,
    StoreLocation,
    parse_store_path,
    validate_store_name,
)
from cert_presence.certificates.stored_cert import StoredCertificate, load_certificate_file
from cert_presence.certificates.thumbprint import normalize_thumbprint, thumbprint_matches
from cert_presence.errors import CryptoError, StoreAccessError
from cert_presence.messages import get_message

logger = logging.getLogger(__name__)

STANDARD_STORE_NAMES: tuple[str, ...] = (
    "AuthRoot",
    "CA",
    "Disallowed",
    "My",
    "Root",
    "TrustedPeople",
    "TrustedPublisher",
)


class CertStore(ABC):
    """Abstract base class for certificate store backends."""

    # ------------------------------------------------------------------
    # Backend interface
    # ------------------------------------------------------------------

    @abstractmethod
    def list_stores(self, location: StoreLocation) -> list[str]:
        """Return the names of all stores that exist under *location*."""

    @abstractmethod
    def create_store(self, address: StoreAddress) -> None:
        """Create an empty store at *address* (no-op if it already exists)."""

    @abstractmethod
    def _entries(self, location: StoreLocation, store_name: str) -> list[StoredCertificate]:
        """Return all certificates in an existing store."""

    @abstractmethod
    def _insert(
        self, location: StoreLocation, store_name: str, cert: StoredCertificate
    ) -> None:
        """Add *cert* to an existing store, replacing an entry with the same thumbprint."""

    @abstractmethod
    def _delete(self, location: StoreLocation, store_name: str, thumbprint: str) -> None:
        """Delete the entry keyed by SHA-1 *thumbprint* from an existing store."""

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def list_certificates(self, address: StoreAddress) -> list[StoredCertificate]:
        """Return all certificates in the store, sorted by thumbprint.

        Raises
        ------
        StoreAccessError
            If the store does not exist.
        """
        store_name = self._open(address)
        return sorted(
            self._entries(address.location, store_name), key=lambda c: c.thumbprint
        )

    def find(self, thumbprint: str, address: StoreAddress) -> StoredCertificate | None:
        """Return the certificate identified by *thumbprint*, or None.

        Not finding the certificate is a normal outcome.

        Raises
        ------
        StoreAccessError
            If the store itself cannot be opened.
        """
        store_name = self._open(address)
        wanted = normalize_thumbprint(thumbprint)
        for cert in self._entries(address.location, store_name):
            if cert.thumbprint == wanted:
                return cert
            if thumbprint_matches(cert.load_x509(), thumbprint):
                return cert
        return None

    def exists(self, thumbprint: str, address: StoreAddress) -> bool:
        """Return True if a certificate with *thumbprint* is in the store."""
        return self.find(thumbprint, address) is not None

    def import_certificate(self, store_path: str, source_path: Path) -> StoredCertificate:
        """Parse the certificate file at *source_path* and add it to the store.

        Importing a certificate that is already present is a no-op at the
        store level.

        Parameters
        ----------
        store_path:
            Store path as produced by ``resolve_store_path``.
        source_path:
            PEM or DER certificate file.

        Raises
        ------
        InvalidArgumentError
            If *store_path* is malformed.
        StoreAccessError
            If the store does not exist.
        CryptoError
            If the file cannot be parsed or the entry cannot be written.
        """
        address = parse_store_path(store_path)
        store_name = self._open(address)
        cert = StoredCertificate.from_x509(load_certificate_file(Path(source_path)))
        try:
            self._insert(address.location, store_name, cert)
        except OSError as exc:
            raise CryptoError(
                get_message(
                    "certificate_write_failed",
                    thumbprint=cert.thumbprint,
                    store_path=store_path,
                    reason=exc,
                ),
                path=str(source_path),
            ) from exc
        logger.debug("Stored certificate %s in %s", cert.thumbprint, store_path)
        return cert

    def remove(self, thumbprint: str, address: StoreAddress) -> bool:
        """Remove the certificate identified by *thumbprint*.

        Returns
        -------
        bool
            True if a certificate was removed, False if none matched.

        Raises
        ------
        StoreAccessError
            If the store does not exist or the entry cannot be deleted.
        """
        cert = self.find(thumbprint, address)
        if cert is None:
            return False
        store_name = self._open(address)
        try:
            self._delete(address.location, store_name, cert.thumbprint)
        except OSError as exc:
            raise StoreAccessError(address.store_path, str(exc)) from exc
        return True

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _open(self, address: StoreAddress) -> str:
        """Return the existing store's canonical name; store names are case-insensitive."""
        for name in self.list_stores(address.location):
            if name.lower() == address.store_name.lower():
                return name
        raise StoreAccessError(address.store_path)


class InMemoryCertStore(CertStore):
    """Dictionary-backed certificate store.

    Useful for tests and dry runs. Records every thumbprint inserted or
    deleted in :attr:`imported` and :attr:`removed`.

    Parameters
    ----------
    store_names:
        Stores to create under every location.
    """

    def __init__(self, store_names: tuple[str, ...] = STANDARD_STORE_NAMES) -> None:
        self._stores: dict[StoreLocation, dict[str, dict[str, StoredCertificate]]] = {
            location: {name: {} for name in store_names} for location in StoreLocation
        }
        self._lock = threading.Lock()
        self.imported: list[str] = []
        self.removed: list[str] = []

    def list_stores(self, location: StoreLocation) -> list[str]:
        with self._lock:
            return sorted(self._stores[location])

    def create_store(self, address: StoreAddress) -> None:
        with self._lock:
            existing = {n.lower() for n in self._stores[address.location]}
            if address.store_name.lower() not in existing:
                self._stores[address.location][address.store_name] = {}

    def add(self, address: StoreAddress, cert: StoredCertificate) -> None:
        """Seed the store with *cert* without recording an import."""
        store_name = self._open(address)
        with self._lock:
            self._stores[address.location][store_name][cert.thumbprint] = cert

    def _entries(self, location: StoreLocation, store_name: str) -> list[StoredCertificate]:
        with self._lock:
            return list(self._stores[location][store_name].values())

    def _insert(
        self, location: StoreLocation, store_name: str, cert: StoredCertificate
    ) -> None:
        with self._lock:
            self._stores[location][store_name][cert.thumbprint] = cert
            self.imported.append(cert.thumbprint)

    def _delete(self, location: StoreLocation, store_name: str, thumbprint: str) -> None:
        with self._lock:
            del self._stores[location][store_name][thumbprint]
            self.removed.append(thumbprint)


class FilesystemCertStore(CertStore):
    """Filesystem-backed certificate store.

    Each store is a directory ``<base_dir>/<Location>/<Store>`` holding one
    DER ``.cer`` file per certificate, written as ``<SHA1 thumbprint>.cer``.
    Entries are identified by content, so files placed under any other
    name are found and removed as well. The standard store names always
    exist; their directories are created on the first write.

    Parameters
    ----------
    base_dir:
        Root directory for all stores.
    """

    CERT_SUFFIX = ".cer"

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = Path(base_dir)
        self._lock = threading.Lock()

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    # ------------------------------------------------------------------
    # CertStore interface
    # ------------------------------------------------------------------

    def list_stores(self, location: StoreLocation) -> list[str]:
        names = {name.lower(): name for name in STANDARD_STORE_NAMES}
        location_dir = self._base_dir / location.value
        try:
            if location_dir.is_dir():
                for d in location_dir.iterdir():
                    if d.is_dir() and validate_store_name(d.name):
                        names[d.name.lower()] = d.name
        except OSError as exc:
            raise StoreAccessError(f"Cert:\\{location.value}", str(exc)) from exc
        return sorted(names.values())

    def create_store(self, address: StoreAddress) -> None:
        try:
            store_name = self._open(address)
        except StoreAccessError:
            store_name = address.store_name
        self._store_dir(address.location, store_name).mkdir(parents=True, exist_ok=True)

    def _entries(self, location: StoreLocation, store_name: str) -> list[StoredCertificate]:
        return [cert for _, cert in self._entry_files(location, store_name)]

    def _insert(
        self, location: StoreLocation, store_name: str, cert: StoredCertificate
    ) -> None:
        store_dir = self._store_dir(location, store_name)
        target = store_dir / f"{cert.thumbprint}{self.CERT_SUFFIX}"
        with self._lock:
            store_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=store_dir, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(cert.der_bytes)
                os.replace(tmp_name, target)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    def _delete(self, location: StoreLocation, store_name: str, thumbprint: str) -> None:
        """Unlink every file in the store holding the certificate *thumbprint*.

        Raises
        ------
        FileNotFoundError
            If no file holds the certificate.
        """
        with self._lock:
            matched = [
                cert_file
                for cert_file, cert in self._entry_files(location, store_name)
                if cert.thumbprint == thumbprint
            ]
            if not matched:
                raise FileNotFoundError(
                    f"no entry for {thumbprint} in {self._store_dir(location, store_name)}"
                )
            for cert_file in matched:
                cert_file.unlink()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _store_dir(self, location: StoreLocation, store_name: str) -> Path:
        """Return the directory path for a store."""
        return self._base_dir / location.value / store_name

    def _entry_files(
        self, location: StoreLocation, store_name: str
    ) -> list[tuple[Path, StoredCertificate]]:
        """Return ``(file, certificate)`` pairs for every readable entry."""
        store_dir = self._store_dir(location, store_name)
        if not store_dir.is_dir():
            return []
        try:
            files = sorted(store_dir.glob(f"*{self.CERT_SUFFIX}"))
        except OSError as exc:
            raise StoreAccessError(f"Cert:\\{location.value}\\{store_name}", str(exc)) from exc
        entries: list[tuple[Path, StoredCertificate]] = []
        for cert_file in files:
            try:
                entries.append((cert_file, StoredCertificate.from_file(cert_file)))
            except CryptoError:
                logger.warning("Skipping unreadable store entry %s", cert_file)
        return entries
