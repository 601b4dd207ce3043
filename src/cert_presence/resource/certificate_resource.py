"""CertificateResource — declarative presence of one certificate in a store.

The resource exposes three operations over a :class:`DesiredState`:

- :meth:`CertificateResource.read` probes the store and returns the
  observed state.
- :meth:`CertificateResource.test` compares desired and observed presence.
- :meth:`CertificateResource.apply` imports or removes the certificate.

``apply`` always acts; callers run ``test`` first and only ``apply`` on
divergence. Both actions are idempotent at the store level, so a
redundant ``apply`` is harmless and re-running ``test`` verifies it.
"""
from __future__ import annotations

import logging
from pathlib import Path

from cert_presence.certificates.address import StoreLocation, resolve_store_path
from cert_presence.certificates.store import CertStore
from cert_presence.certificates.thumbprint import normalize_thumbprint, thumbprint_matches
from cert_presence.messages import get_message
from cert_presence.middleware.audit import ResourceAuditLogger
from cert_presence.resource.state import DesiredState, ObservedState, Presence
from cert_presence.resource.validation import check_parameters, check_source

logger = logging.getLogger(__name__)


def _log(level: int, key: str, **params: object) -> None:
    """Log a catalogue message, formatting it only when *level* is enabled."""
    if logger.isEnabledFor(level):
        logger.log(level, get_message(key, **params))


def read_state(desired: DesiredState, store: CertStore) -> ObservedState:
    """Probe *store* for the desired certificate and return the observed state.

    Raises
    ------
    InvalidArgumentError
        If the parameters are malformed, or presence is ``Present`` and the
        source file is missing. Checked before the store is touched.
    StoreAccessError
        If the addressed store cannot be opened.
    """
    check_parameters(desired)
    check_source(desired)

    store_path = desired.address.store_path
    _log(logging.DEBUG, "getting_state", thumbprint=desired.thumbprint, store_path=store_path)
    cert = store.find(desired.thumbprint, desired.address)
    if cert is None:
        _log(
            logging.DEBUG,
            "certificate_not_found",
            thumbprint=desired.thumbprint,
            store_path=store_path,
        )
    else:
        _log(
            logging.DEBUG,
            "certificate_found",
            thumbprint=desired.thumbprint,
            store_path=store_path,
        )

    return ObservedState(
        thumbprint=desired.thumbprint,
        path=desired.path,
        address=desired.address,
        presence=Presence.PRESENT if cert is not None else Presence.ABSENT,
        certificate=cert,
    )


def compare_state(desired: DesiredState, observed: ObservedState) -> bool:
    """Return True if *observed* satisfies *desired*.

    Only presence is compared. A certificate with the requested thumbprint
    counts as converged regardless of which file it was imported from.
    """
    return desired.presence == observed.presence


class CertificateResource:
    """Reconciles the presence of a single certificate in a store.

    Parameters
    ----------
    store:
        Certificate store backend to inspect and modify.
    audit_logger:
        Optional audit logger receiving one event per corrective action.
    actor_id:
        Identity recorded on audit events.
    """

    def __init__(
        self,
        store: CertStore,
        audit_logger: ResourceAuditLogger | None = None,
        actor_id: str = "system",
    ) -> None:
        self._store = store
        self._audit_logger = audit_logger
        self._actor_id = actor_id

    @property
    def store(self) -> CertStore:
        return self._store

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def read(self, desired: DesiredState) -> ObservedState:
        """Return the observed state for *desired*. See :func:`read_state`."""
        return read_state(desired, self._store)

    def test(self, desired: DesiredState) -> bool:
        """Return True if the store already satisfies *desired*."""
        observed = self.read(desired)
        in_sync = compare_state(desired, observed)
        params = {
            "thumbprint": desired.thumbprint,
            "store_path": desired.address.store_path,
            "actual": observed.presence.value,
            "desired": desired.presence.value,
        }
        if in_sync:
            _log(logging.DEBUG, "state_in_sync", **params)
        else:
            _log(logging.INFO, "state_mismatch", **params)
        return in_sync

    def apply(self, desired: DesiredState) -> None:
        """Import or remove the certificate according to ``desired.presence``.

        Raises
        ------
        InvalidArgumentError
            If the parameters are malformed or the source file is missing.
        StoreAccessError
            If the addressed store cannot be opened.
        CryptoError
            If the certificate file cannot be parsed or written.
        """
        check_parameters(desired)
        if desired.presence is Presence.PRESENT:
            self._import(desired)
        else:
            self._remove(desired)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _import(self, desired: DesiredState) -> None:
        check_source(desired)
        store_path = resolve_store_path(desired.address.location, desired.address.store_name)
        _log(logging.INFO, "importing_certificate", path=desired.path, store_path=store_path)

        cert = self._store.import_certificate(store_path, desired.path)

        if not thumbprint_matches(cert.load_x509(), desired.thumbprint):
            _log(
                logging.WARNING,
                "thumbprint_mismatch",
                path=desired.path,
                actual=cert.thumbprint,
                thumbprint=desired.thumbprint,
            )
        _log(
            logging.INFO, "certificate_imported", thumbprint=cert.thumbprint, store_path=store_path
        )
        if self._audit_logger is not None:
            self._audit_logger.log_import(
                thumbprint=cert.thumbprint,
                store_path=store_path,
                source_path=str(desired.path),
                actor_id=self._actor_id,
            )

    def _remove(self, desired: DesiredState) -> None:
        store_path = desired.address.store_path
        _log(
            logging.INFO,
            "removing_certificate",
            thumbprint=desired.thumbprint,
            store_path=store_path,
        )

        removed = self._store.remove(desired.thumbprint, desired.address)

        key = "certificate_removed" if removed else "certificate_already_absent"
        _log(logging.INFO, key, thumbprint=desired.thumbprint, store_path=store_path)
        if self._audit_logger is not None:
            self._audit_logger.log_removal(
                thumbprint=normalize_thumbprint(desired.thumbprint),
                store_path=store_path,
                removed=removed,
                actor_id=self._actor_id,
            )


# ------------------------------------------------------------------
# Flat-parameter entry points
# ------------------------------------------------------------------


def get_target_resource(
    store: CertStore,
    thumbprint: str,
    path: str | Path,
    location: str | StoreLocation,
    store_name: str,
    ensure: str | Presence = Presence.PRESENT,
) -> dict[str, object]:
    """Return the observed state for flat parameters as a dictionary."""
    desired = DesiredState.from_parameters(thumbprint, path, location, store_name, ensure)
    return CertificateResource(store).read(desired).to_dict()


def test_target_resource(
    store: CertStore,
    thumbprint: str,
    path: str | Path,
    location: str | StoreLocation,
    store_name: str,
    ensure: str | Presence = Presence.PRESENT,
) -> bool:
    """Return True if the store satisfies the flat parameters."""
    desired = DesiredState.from_parameters(thumbprint, path, location, store_name, ensure)
    return CertificateResource(store).test(desired)


# Not collected by pytest despite the name.
test_target_resource.__test__ = False  # type: ignore[attr-defined]


def set_target_resource(
    store: CertStore,
    thumbprint: str,
    path: str | Path,
    location: str | StoreLocation,
    store_name: str,
    ensure: str | Presence = Presence.PRESENT,
) -> None:
    """Import or remove the certificate described by flat parameters."""
    desired = DesiredState.from_parameters(thumbprint, path, location, store_name, ensure)
    CertificateResource(store).apply(desired)
