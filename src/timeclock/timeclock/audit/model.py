from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AuditEntry:
    user_id: int
    action: str
    entity_type: str
    entity_id: str
    created_at: datetime
