from __future__ import annotations

from typing import Protocol

from .model import PayrollLineItem


class PayrollRepository(Protocol):
    def upsert(self, item: PayrollLineItem) -> int:
        """Create or replace the record keyed by (user, period_start, period_end).

        Returns payroll_id.
        """

        raise NotImplementedError
