#!/usr/bin/env python3
"""Example: Quickstart

Ensures a certificate file is present in the LocalMachine\\My store of a
filesystem-backed certificate store, then removes it again.

Usage:
    python examples/01_quickstart.py path/to/cert.cer [store-root]

Requirements:
    pip install cert-presence
"""
from __future__ import annotations

import logging
import sys
import tempfile
from pathlib import Path

import cert_presence
from cert_presence import (
    CertificateResource,
    DesiredState,
    FilesystemCertStore,
    Presence,
    ResourceAuditLogger,
    StoredCertificate,
)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    print(f"cert-presence version: {cert_presence.__version__}")

    cert_path = Path(sys.argv[1])
    store_root = Path(sys.argv[2]) if len(sys.argv) > 2 else Path(tempfile.mkdtemp())

    # Step 1: Work out the thumbprint of the file we want in the store
    thumbprint = StoredCertificate.from_file(cert_path).thumbprint
    print(f"Thumbprint: {thumbprint}")

    # Step 2: Declare the desired state
    desired = DesiredState.from_parameters(
        thumbprint=thumbprint,
        path=cert_path,
        location="LocalMachine",
        store="My",
    )

    # Step 3: Test, then apply only on divergence
    audit = ResourceAuditLogger()
    resource = CertificateResource(FilesystemCertStore(base_dir=store_root), audit_logger=audit)
    if not resource.test(desired):
        resource.apply(desired)
    print(f"In desired state: {resource.test(desired)}")

    # Step 4: Declare the certificate absent and converge again
    absent = DesiredState(
        thumbprint=desired.thumbprint,
        path=desired.path,
        address=desired.address,
        presence=Presence.ABSENT,
    )
    if not resource.test(absent):
        resource.apply(absent)
    print(f"Removed: {resource.test(absent)}")

    for line in audit.drain_buffer():
        print(f"audit: {line}")

    print("\nQuickstart complete.")


if __name__ == "__main__":
    main()
