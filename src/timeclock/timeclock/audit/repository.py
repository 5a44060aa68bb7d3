from __future__ import annotations

from typing import Protocol

from .model import AuditEntry


class AuditLogRepository(Protocol):
    """Sink for one entry per successful state-changing call."""

    def record(self, entry: AuditEntry) -> None:
        raise NotImplementedError
