"""Thumbprint validation and computation.

A thumbprint is the hex-encoded digest of a certificate's DER encoding.
Stores key certificates by their SHA-1 thumbprint, but a caller may
identify a certificate by any supported digest; the digest algorithm is
implied by the thumbprint length.
"""
from __future__ import annotations

import re

from cryptography import x509
from cryptography.hazmat.primitives import hashes

# Hex length -> digest algorithm.
THUMBPRINT_ALGORITHMS: dict[int, type[hashes.HashAlgorithm]] = {
    32: hashes.MD5,
    40: hashes.SHA1,
    64: hashes.SHA256,
    96: hashes.SHA384,
    128: hashes.SHA512,
}

_HEX_RE = re.compile(r"^[0-9A-Fa-f]+$")


def validate_thumbprint(value: str) -> bool:
    """Return True if *value* is a hex digest of a supported length."""
    if not isinstance(value, str):
        return False
    return len(value) in THUMBPRINT_ALGORITHMS and bool(_HEX_RE.match(value))


def normalize_thumbprint(value: str) -> str:
    """Return the canonical (upper-case) form of a thumbprint."""
    return value.strip().upper()


def supported_lengths() -> list[int]:
    return sorted(THUMBPRINT_ALGORITHMS)


def compute_thumbprint(
    cert: x509.Certificate,
    algorithm: hashes.HashAlgorithm | None = None,
) -> str:
    """Return the upper-case hex thumbprint of *cert*.

    Parameters
    ----------
    cert:
        Parsed X.509 certificate.
    algorithm:
        Digest to use. Defaults to SHA-1, the store's native key.
    """
    digest = cert.fingerprint(algorithm or hashes.SHA1())
    return digest.hex().upper()


def thumbprint_matches(cert: x509.Certificate, thumbprint: str) -> bool:
    """Return True if *thumbprint* identifies *cert*.

    Comparison is exact and case-insensitive, using the digest algorithm
    implied by the thumbprint length. Unsupported lengths never match.
    """
    thumbprint = normalize_thumbprint(thumbprint)
    algorithm_cls = THUMBPRINT_ALGORITHMS.get(len(thumbprint))
    if algorithm_cls is None:
        return False
    return compute_thumbprint(cert, algorithm_cls()) == thumbprint
