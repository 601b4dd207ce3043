"""Error taxonomy for certificate resource operations.

All conditions are fatal for the current operation. A certificate that is
missing during removal is not an error and has no exception class.
"""
from __future__ import annotations

from cert_presence.messages import get_message


class CertificateResourceError(Exception):
    """Base class for all certificate resource failures."""


class InvalidArgumentError(CertificateResourceError, ValueError):
    """Raised for a malformed parameter or a missing source file.

    Parameters
    ----------
    message_key:
        Key into the message catalogue.
    **params:
        Values embedded in the message (thumbprint, path, store, ...).
    """

    def __init__(self, message_key: str, **params: object) -> None:
        self.message_key = message_key
        self.params = params
        super().__init__(get_message(message_key, **params))


class StoreAccessError(CertificateResourceError):
    """Raised when a certificate store cannot be opened or enumerated."""

    def __init__(self, store_path: str, reason: str = "") -> None:
        self.store_path = store_path
        self.reason = reason
        message = get_message("store_not_found", store_path=store_path)
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)


class CryptoError(CertificateResourceError):
    """Raised when a certificate file cannot be parsed or inserted into a store."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(message)
