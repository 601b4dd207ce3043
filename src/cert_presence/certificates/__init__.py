"""Certificate store access.

Provides store addressing, thumbprint handling, certificate file parsing,
and the store backends the resource reconciles against.
"""
from __future__ import annotations

from cert_presence.certificates.address import (
    StoreAddress,
    StoreLocation,
    parse_location,
    parse_store_path,
    resolve_store_path,
    validate_store_name,
)
from cert_presence.certificates.store import (
    STANDARD_STORE_NAMES,
    CertStore,
    FilesystemCertStore,
    InMemoryCertStore,
)
from cert_presence.certificates.stored_cert import StoredCertificate, load_certificate_file
from cert_presence.certificates.thumbprint import (
    compute_thumbprint,
    normalize_thumbprint,
    thumbprint_matches,
    validate_thumbprint,
)

__all__ = [
    "CertStore",
    "FilesystemCertStore",
    "InMemoryCertStore",
    "STANDARD_STORE_NAMES",
    "StoreAddress",
    "StoreLocation",
    "StoredCertificate",
    "compute_thumbprint",
    "load_certificate_file",
    "normalize_thumbprint",
    "parse_location",
    "parse_store_path",
    "resolve_store_path",
    "thumbprint_matches",
    "validate_store_name",
    "validate_thumbprint",
]
