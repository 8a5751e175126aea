from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def hourly_rate(self, base_salary: Decimal) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def regular_pay(self, working_hours: Decimal, rate: Decimal) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def overtime_pay(self, overtime_hours: Decimal, rate: Decimal) -> Decimal:
        raise NotImplementedError
