"""Stored certificate dataclass and certificate file parsing.

A StoredCertificate is the metadata a store reports for one entry: its
thumbprint, subject, issuer, validity window, and the DER bytes. Files
are accepted in PEM or DER encoding.
"""
from __future__ import annotations

import datetime
from dataclasses import dataclass
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from cert_presence.certificates.thumbprint import compute_thumbprint
from cert_presence.errors import CryptoError
from cert_presence.messages import get_message

_PEM_MARKER = b"-----BEGIN CERTIFICATE-----"


@dataclass(frozen=True)
class StoredCertificate:
    """Represents one X.509 certificate held in a store.

    Parameters
    ----------
    thumbprint:
        Upper-case SHA-1 thumbprint (the store key).
    subject:
        RFC 4514 subject string.
    issuer:
        RFC 4514 issuer string.
    serial_number:
        Certificate serial number.
    not_before:
        Validity start (UTC).
    not_after:
        Validity end (UTC).
    der_bytes:
        DER encoding of the certificate.
    """

    thumbprint: str
    subject: str
    issuer: str
    serial_number: int
    not_before: datetime.datetime
    not_after: datetime.datetime
    der_bytes: bytes

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def from_x509(cls, cert: x509.Certificate) -> "StoredCertificate":
        """Build a StoredCertificate from a parsed certificate."""
        return cls(
            thumbprint=compute_thumbprint(cert),
            subject=cert.subject.rfc4514_string(),
            issuer=cert.issuer.rfc4514_string(),
            serial_number=cert.serial_number,
            not_before=cert.not_valid_before_utc,
            not_after=cert.not_valid_after_utc,
            der_bytes=cert.public_bytes(serialization.Encoding.DER),
        )

    @classmethod
    def from_file(cls, path: Path) -> "StoredCertificate":
        """Parse a certificate file. See :func:`load_certificate_file`."""
        return cls.from_x509(load_certificate_file(path))

    # ------------------------------------------------------------------
    # Convenience
    # ------------------------------------------------------------------

    def load_x509(self) -> x509.Certificate:
        """Parse and return the X.509 certificate object."""
        return x509.load_der_x509_certificate(self.der_bytes)

    def to_dict(self) -> dict[str, object]:
        """Serialize metadata (without the DER bytes) to a plain dictionary."""
        return {
            "thumbprint": self.thumbprint,
            "subject": self.subject,
            "issuer": self.issuer,
            "serial_number": self.serial_number,
            "not_before": self.not_before.isoformat(),
            "not_after": self.not_after.isoformat(),
        }


def load_certificate_file(path: Path) -> x509.Certificate:
    """Read and parse a PEM- or DER-encoded certificate file.

    Raises
    ------
    CryptoError
        If the file cannot be read or does not contain a certificate.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise CryptoError(
            get_message("certificate_parse_failed", path=path, reason=exc.strerror),
            path=str(path),
        ) from exc

    try:
        if _PEM_MARKER in data:
            return x509.load_pem_x509_certificate(data)
        return x509.load_der_x509_certificate(data)
    except ValueError as exc:
        raise CryptoError(
            get_message("certificate_parse_failed", path=path, reason=exc),
            path=str(path),
        ) from exc
