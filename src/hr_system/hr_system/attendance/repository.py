from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        standard_check_in: datetime,
        late_minutes: int,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> int:
        """Insert the day's record.

        Must raise AlreadyCheckedIn when (employee_id, work_date) exists; the
        storage uniqueness constraint decides, not a prior read.
        """

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        working_hours: Decimal,
        overtime_hours: Decimal,
        note: Optional[str] = None,
    ) -> bool:
        """Set the check-out fields only if not set yet; False otherwise."""

        raise NotImplementedError

    def find_in_range(self, employee_id: int, from_date: date, to_date: date) -> Sequence[AttendanceRecord]:
        """Inclusive on both bounds, ordered by date ascending."""

        raise NotImplementedError

    def list_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[int]] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_for_employee(self, employee_id: int) -> int:
        raise NotImplementedError
