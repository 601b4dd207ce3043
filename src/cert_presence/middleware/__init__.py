"""Resource middleware — audit logging of store changes."""
from __future__ import annotations

from cert_presence.middleware.audit import AuditEvent, ResourceAuditLogger

__all__ = [
    "AuditEvent",
    "ResourceAuditLogger",
]
