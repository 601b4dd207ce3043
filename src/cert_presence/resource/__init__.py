"""Declarative certificate presence resource.

Reads, tests, and applies the desired presence of one certificate in a
certificate store.
"""
from __future__ import annotations

from cert_presence.resource.certificate_resource import (
    CertificateResource,
    compare_state,
    get_target_resource,
    read_state,
    set_target_resource,
    test_target_resource,
)
from cert_presence.resource.state import DesiredState, ObservedState, Presence, parse_presence
from cert_presence.resource.validation import (
    check_parameters,
    check_source,
    file_exists,
    validate_certificate_path,
)

__all__ = [
    "CertificateResource",
    "DesiredState",
    "ObservedState",
    "Presence",
    "check_parameters",
    "check_source",
    "compare_state",
    "file_exists",
    "get_target_resource",
    "parse_presence",
    "read_state",
    "set_target_resource",
    "test_target_resource",
    "validate_certificate_path",
]
