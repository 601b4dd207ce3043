"""cert-presence — declarative presence of X.509 certificates in certificate stores.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import cert_presence
>>> cert_presence.__version__
'0.1.0'

Quick start
-----------
::

    from pathlib import Path

    from cert_presence import CertificateResource, DesiredState, FilesystemCertStore

    store = FilesystemCertStore(base_dir=Path("/var/lib/cert-presence"))
    resource = CertificateResource(store)
    desired = DesiredState.from_parameters(
        thumbprint="9988776655443322111000AAABBBCCCDDDEEEFFF",
        path="certs/site0.cer",
        location="LocalMachine",
        store="My",
    )
    if not resource.test(desired):
        resource.apply(desired)
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------
from cert_presence.errors import (
    CertificateResourceError,
    CryptoError,
    InvalidArgumentError,
    StoreAccessError,
)

# ------------------------------------------------------------------
# Certificate stores
# ------------------------------------------------------------------
from cert_presence.certificates.address import (
    StoreAddress,
    StoreLocation,
    parse_store_path,
    resolve_store_path,
)
from cert_presence.certificates.store import CertStore, FilesystemCertStore, InMemoryCertStore
from cert_presence.certificates.stored_cert import StoredCertificate
from cert_presence.certificates.thumbprint import compute_thumbprint, validate_thumbprint

# ------------------------------------------------------------------
# Resource
# ------------------------------------------------------------------
from cert_presence.resource.certificate_resource import CertificateResource
from cert_presence.resource.state import DesiredState, ObservedState, Presence
from cert_presence.resource.validation import validate_certificate_path

# ------------------------------------------------------------------
# Audit and configuration
# ------------------------------------------------------------------
from cert_presence.middleware.audit import AuditEvent, ResourceAuditLogger
from cert_presence.config import CertificateResourceConfig, Settings, load_configuration

__all__ = [
    # version
    "__version__",
    # errors
    "CertificateResourceError",
    "CryptoError",
    "InvalidArgumentError",
    "StoreAccessError",
    # stores
    "CertStore",
    "FilesystemCertStore",
    "InMemoryCertStore",
    "StoreAddress",
    "StoreLocation",
    "StoredCertificate",
    "compute_thumbprint",
    "parse_store_path",
    "resolve_store_path",
    "validate_thumbprint",
    # resource
    "CertificateResource",
    "DesiredState",
    "ObservedState",
    "Presence",
    "validate_certificate_path",
    # audit / config
    "AuditEvent",
    "CertificateResourceConfig",
    "ResourceAuditLogger",
    "Settings",
    "load_configuration",
]
