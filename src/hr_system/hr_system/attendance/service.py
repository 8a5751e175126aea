from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Protocol, Sequence

from ..accounts.model import Principal
from ..common.datetime_utils import at_time, now_local, require_period
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import Role
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    AuthorizationError,
    EmployeeNotFound,
    NoCheckInFound,
    ValidationError,
)
from ..core.policy import AttendancePolicy
from ..employees.repository import EmployeeRepository
from ..overtime.model import OvertimeRequest
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class ApprovedOvertimeLookup(Protocol):
    def find_approved(self, employee_id: int, work_date: date) -> Optional[OvertimeRequest]:
        raise NotImplementedError


class AttendanceService:
    """Attendance ledger: one record per employee per day.

    NotStarted -> CheckedIn (check_in) -> CheckedOut (check_out); no way back.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        overtime: ApprovedOvertimeLookup,
        *,
        policy: AttendancePolicy | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._overtime = overtime
        self._policy = policy or AttendancePolicy()
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock

    @staticmethod
    def _authorize_self(employee_id: int, principal: Optional[Principal]) -> None:
        if principal is None:
            return
        if principal.role != Role.EMPLOYEE or principal.employee_id != int(employee_id):
            raise AuthorizationError("Chỉ nhân viên mới được tự chấm công cho chính mình")

    def _require_active_employee(self, employee_id: int) -> None:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise EmployeeNotFound("Không tìm thấy nhân viên")
        if not employee.is_active:
            raise ValidationError("Nhân viên đã ngừng hoạt động")

    def check_in(
        self,
        employee_id: int,
        *,
        now: datetime | None = None,
        principal: Optional[Principal] = None,
    ) -> AttendanceRecord:
        self._authorize_self(employee_id, principal)
        now = now or self._clock()
        today = now.date()

        self._require_active_employee(employee_id)

        if self._attendance.get_for_employee_and_date(int(employee_id), today):
            raise AlreadyCheckedIn("Đã check-in hôm nay")

        standard_check_in = at_time(today, self._policy.standard_check_in)
        strategy = self._factory.for_checkin(now=now, standard_check_in=standard_check_in)
        decision = strategy.decide_checkin(now=now, standard_check_in=standard_check_in)

        # the unique key on (employee_id, work_date) still rejects a concurrent duplicate here
        self._attendance.create_checkin(
            employee_id=int(employee_id),
            work_date=today,
            check_in_time=now,
            standard_check_in=standard_check_in,
            late_minutes=decision.late_minutes,
            status=decision.status,
            note=decision.note,
        )
        record = self._attendance.get_for_employee_and_date(int(employee_id), today)
        logger.info(
            "checked in",
            extra={"employee_id": int(employee_id), "work_date": today, "late_minutes": decision.late_minutes},
        )
        return record

    def check_out(
        self,
        employee_id: int,
        *,
        now: datetime | None = None,
        principal: Optional[Principal] = None,
    ) -> AttendanceRecord:
        self._authorize_self(employee_id, principal)
        now = now or self._clock()
        today = now.date()

        record = self._attendance.get_for_employee_and_date(int(employee_id), today)
        if not record:
            raise NoCheckInFound("Chưa check-in hôm nay")
        if record.check_out_time is not None:
            raise AlreadyCheckedOut("Đã check-out hôm nay")

        approved = self._overtime.find_approved(int(employee_id), today)
        strategy = self._factory.for_checkout(approved_overtime=approved)
        decision = strategy.decide_checkout(
            check_in=record.check_in_time,
            now=now,
            standard_daily_hours=self._policy.standard_daily_hours,
        )

        updated = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            working_hours=decision.working_hours,
            overtime_hours=decision.overtime_hours,
            note=decision.note,
        )
        if not updated:
            raise AlreadyCheckedOut("Đã check-out hôm nay")

        logger.info(
            "checked out",
            extra={
                "employee_id": int(employee_id),
                "work_date": today,
                "working_hours": str(decision.working_hours),
                "overtime_hours": str(decision.overtime_hours),
                "overtime_request_id": approved.request_id if approved else None,
            },
        )
        return self._attendance.get_for_employee_and_date(int(employee_id), today)

    def find_in_range(self, employee_id: int, from_date: date, to_date: date) -> Sequence[AttendanceRecord]:
        require_period(from_date, to_date)
        return self._attendance.find_in_range(int(employee_id), from_date, to_date)

    def get_today_record(self, employee_id: int, today: date | None = None) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(int(employee_id), today or self._clock().date())

    def history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_employee(int(employee_id), int(limit))
