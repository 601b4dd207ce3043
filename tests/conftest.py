"""Shared fixtures: self-signed certificate files on disk."""
from __future__ import annotations

import datetime
from pathlib import Path
from typing import Callable, Iterator

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from cert_presence.messages import set_culture

CertFileFactory = Callable[..., Path]


def generate_certificate(common_name: str) -> x509.Certificate:
    """Return a fresh self-signed certificate for *common_name*."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime.now(datetime.timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + datetime.timedelta(days=30))
        .sign(key, hashes.SHA256())
    )


@pytest.fixture()
def make_cert_file(tmp_path: Path) -> CertFileFactory:
    """Factory writing a new self-signed certificate to ``tmp_path``.

    Returns the path of the written file. ``encoding`` is ``"pem"`` or ``"der"``.
    """

    def _make(
        common_name: str = "test.example.com",
        filename: str | None = None,
        encoding: str = "pem",
    ) -> Path:
        cert = generate_certificate(common_name)
        fmt = serialization.Encoding.PEM if encoding == "pem" else serialization.Encoding.DER
        target = tmp_path / (filename or f"{common_name}.cer")
        target.write_bytes(cert.public_bytes(fmt))
        return target

    return _make


@pytest.fixture()
def cert_file(make_cert_file: CertFileFactory) -> Path:
    return make_cert_file("site0.example.com")


@pytest.fixture()
def other_cert_file(make_cert_file: CertFileFactory) -> Path:
    return make_cert_file("site1.example.com")


def sha1_thumbprint(path: Path) -> str:
    """Return the upper-case SHA-1 thumbprint of the certificate at *path*."""
    data = path.read_bytes()
    if data.startswith(b"-----BEGIN"):
        cert = x509.load_pem_x509_certificate(data)
    else:
        cert = x509.load_der_x509_certificate(data)
    return cert.fingerprint(hashes.SHA1()).hex().upper()


@pytest.fixture()
def thumbprint_of() -> Callable[[Path], str]:
    return sha1_thumbprint


@pytest.fixture(autouse=True)
def reset_culture() -> Iterator[None]:
    """Clear any culture selected by a CLI invocation after each test."""
    yield
    set_culture(None)
