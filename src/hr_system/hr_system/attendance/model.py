from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per employee per calendar day."""

    attendance_id: int
    employee_id: int
    work_date: date
    check_in_time: datetime
    standard_check_in: datetime
    check_out_time: Optional[datetime]
    late_minutes: int = 0
    working_hours: Decimal = Decimal(0)
    overtime_hours: Decimal = Decimal(0)
    status: AttendanceStatus = AttendanceStatus.PRESENT
    note: Optional[str] = None

    @property
    def is_late(self) -> bool:
        return self.late_minutes > 0

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time is not None
