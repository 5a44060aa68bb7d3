from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Sequence

from ...employees.model import Employee
from ..model import PayrollLineItem, WorkedDay


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(
        self,
        employee: Employee,
        days: Sequence[WorkedDay],
        *,
        period_start: date,
        period_end: date,
    ) -> PayrollLineItem:
        raise NotImplementedError
