from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import Schedule


class ScheduleRepository(Protocol):
    """Read side of the scheduling collaborator (published assignments only)."""

    def get_for_user_and_date(self, *, user_id: int, work_date: date) -> Optional[Schedule]:
        raise NotImplementedError
