from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..common.validators import require_non_negative
from ..core.enums import EmploymentType


@dataclass(frozen=True)
class Employee:
    """Domain entity: the pay-relevant view of an employee.

    Note: Plain data object (no DB access code). Hourly employees carry
    hourly_rate, salaried employees carry monthly_salary.
    """

    user_id: int
    full_name: str
    employee_code: str
    employment_type: EmploymentType
    hourly_rate: Optional[Decimal] = None
    monthly_salary: Optional[Decimal] = None

    def __post_init__(self) -> None:
        require_non_negative(self.hourly_rate, "hourly_rate")
        require_non_negative(self.monthly_salary, "monthly_salary")

    @property
    def is_salaried(self) -> bool:
        return self.employment_type == EmploymentType.SALARIED and self.monthly_salary is not None
