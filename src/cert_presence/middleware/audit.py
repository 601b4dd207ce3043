"""ResourceAuditLogger — JSONL audit trail for certificate store changes.

Every corrective action taken by the certificate resource (import or
removal) is appended as a single JSON line to the configured log file.
Read-only operations are not audited.

If no file path is configured the logger emits to an in-memory buffer
that can be drained via :meth:`drain_buffer`.
"""
from __future__ import annotations

import datetime
import json
import threading
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class AuditEvent:
    """A single auditable store change.

    Parameters
    ----------
    event_type:
        Short snake_case string identifying the event
        (e.g. "certificate_imported").
    thumbprint:
        Thumbprint of the certificate involved.
    store_path:
        Store the change was applied to.
    actor_id:
        The user or system that triggered the change. Defaults to "system".
    details:
        Arbitrary key-value metadata about the event.
    timestamp:
        UTC datetime of the event. Defaults to now.
    """

    event_type: str
    thumbprint: str
    store_path: str
    actor_id: str = "system"
    details: dict[str, object] = field(default_factory=dict)
    timestamp: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dictionary suitable for JSON encoding."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type,
            "thumbprint": self.thumbprint,
            "store_path": self.store_path,
            "actor_id": self.actor_id,
            "details": self.details,
        }


class ResourceAuditLogger:
    """Append-only JSONL audit logger for store changes.

    Thread-safe. Each call to :meth:`log` appends one JSON line to the
    configured file path (or to the in-memory buffer if no path is set).

    Parameters
    ----------
    log_path:
        Path to the JSONL log file. Parent directories are created
        automatically. If None, events are buffered in memory only.
    """

    def __init__(self, log_path: Path | None = None) -> None:
        self._log_path = log_path
        self._buffer: list[str] = []
        self._lock = threading.Lock()

        if log_path is not None:
            log_path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, event: AuditEvent) -> None:
        """Append an audit event to the log."""
        line = json.dumps(event.to_dict(), separators=(",", ":"), default=str)
        with self._lock:
            if self._log_path is not None:
                with self._log_path.open("a", encoding="utf-8") as fh:
                    fh.write(line + "\n")
            else:
                self._buffer.append(line)

    def log_import(
        self, thumbprint: str, store_path: str, source_path: str, actor_id: str = "system"
    ) -> None:
        """Log a certificate_imported event."""
        self.log(
            AuditEvent(
                event_type="certificate_imported",
                thumbprint=thumbprint,
                store_path=store_path,
                actor_id=actor_id,
                details={"source_path": source_path},
            )
        )

    def log_removal(
        self, thumbprint: str, store_path: str, removed: bool, actor_id: str = "system"
    ) -> None:
        """Log a certificate_removed event (``removed`` is False for a no-op)."""
        self.log(
            AuditEvent(
                event_type="certificate_removed",
                thumbprint=thumbprint,
                store_path=store_path,
                actor_id=actor_id,
                details={"removed": removed},
            )
        )

    # ------------------------------------------------------------------
    # Buffer access
    # ------------------------------------------------------------------

    def drain_buffer(self) -> list[str]:
        """Return and clear the in-memory event buffer, oldest first."""
        with self._lock:
            events = list(self._buffer)
            self._buffer.clear()
        return events

    def read_log(self, tail: int | None = None) -> list[dict[str, object]]:
        """Read events from the log file (or the buffer when no file is set).

        Parameters
        ----------
        tail:
            If provided, return only the last *tail* events.
        """
        if self._log_path is None or not self._log_path.exists():
            with self._lock:
                lines = list(self._buffer)
        else:
            with self._lock:
                lines = self._log_path.read_text(encoding="utf-8").splitlines()

        parsed: list[dict[str, object]] = []
        for line in lines:
            stripped = line.strip()
            if not stripped:
                continue
            try:
                parsed.append(json.loads(stripped))
            except json.JSONDecodeError:
                continue

        if tail is not None:
            return parsed[-tail:]
        return parsed
