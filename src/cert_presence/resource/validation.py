"""Precondition checks run at the start of every resource operation."""
from __future__ import annotations

from pathlib import Path

from cert_presence.certificates.thumbprint import supported_lengths, validate_thumbprint
from cert_presence.errors import InvalidArgumentError
from cert_presence.resource.state import DesiredState, Presence

CERTIFICATE_EXTENSIONS: tuple[str, ...] = (".cer", ".crt", ".der", ".pem")


def validate_certificate_path(path: str | Path) -> bool:
    """Return True if *path* is shaped like a certificate file path.

    Only the shape is checked; the file need not exist.
    """
    text = str(path)
    if not text.strip() or "\x00" in text:
        return False
    return Path(text).suffix.lower() in CERTIFICATE_EXTENSIONS


def file_exists(path: str | Path) -> bool:
    return Path(path).is_file()


def check_parameters(desired: DesiredState) -> None:
    """Raise InvalidArgumentError if the thumbprint or path is malformed."""
    if not validate_thumbprint(desired.thumbprint):
        raise InvalidArgumentError(
            "invalid_thumbprint",
            thumbprint=desired.thumbprint,
            lengths=", ".join(str(n) for n in supported_lengths()),
        )
    if not validate_certificate_path(desired.path):
        raise InvalidArgumentError(
            "invalid_path",
            path=desired.path,
            extensions=", ".join(CERTIFICATE_EXTENSIONS),
        )


def check_source(desired: DesiredState) -> None:
    """Raise InvalidArgumentError if a ``Present`` request has no source file.

    A missing file is irrelevant when the certificate should be absent.
    """
    if desired.presence is Presence.PRESENT and not file_exists(desired.path):
        raise InvalidArgumentError("source_missing", path=desired.path)
