from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..accounts.model import Principal
from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import iter_days, now_local, require_period
from ..common.validators import require_enum, require_non_empty
from ..core.enums import AttendanceStatus, LeaveType, RequestStatus, Role
from ..core.exceptions import AuthorizationError, RequestAlreadyDecided, RequestNotFound, ValidationError
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave register.

    Approval never rewrites attendance: summaries ask `approved_leave_days` /
    `status_for_day` when they classify a day.
    """

    def __init__(self, leaves: LeaveRepository, *, clock: Callable[[], datetime] = now_local):
        self._leaves = leaves
        self._clock = clock

    def create(
        self,
        employee_id: int,
        start_date: date,
        end_date: date,
        leave_type,
        reason: str,
        *,
        principal: Optional[Principal] = None,
    ) -> LeaveRequest:
        if principal is not None and not principal.is_admin and principal.employee_id != int(employee_id):
            raise AuthorizationError("Chỉ được gửi yêu cầu cho chính mình")

        if end_date < start_date:
            raise ValidationError("Ngày kết thúc phải >= ngày bắt đầu")
        reason = require_non_empty(reason, "Lý do")
        kind = require_enum(LeaveType, leave_type, "Loại nghỉ phép")

        request_id = self._leaves.create(
            employee_id=int(employee_id),
            start_date=start_date,
            end_date=end_date,
            leave_type=kind,
            reason=reason,
        )
        logger.info(
            "leave requested",
            extra={"request_id": request_id, "employee_id": int(employee_id), "start": start_date, "end": end_date},
        )
        return self._get(request_id)

    def approve(
        self,
        request_id: int,
        approver_id: int,
        *,
        current_role: Role,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        return self._decide(request_id, approver_id, RequestStatus.APPROVED, current_role=current_role, now=now)

    def reject(
        self,
        request_id: int,
        approver_id: int,
        *,
        current_role: Role,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        return self._decide(request_id, approver_id, RequestStatus.REJECTED, current_role=current_role, now=now)

    def list_for_employee(self, employee_id: int, *, limit: int = 200) -> Sequence[LeaveRequest]:
        return self._leaves.list(employee_id=int(employee_id), limit=limit)

    def list_pending(self, *, current_role: Role, limit: int = 500) -> Sequence[LeaveRequest]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Bạn không có quyền")
        return self._leaves.list(status=RequestStatus.PENDING, limit=limit)

    def approved_leave_days(self, employee_id: int, start: date, end: date) -> set[date]:
        return self.approved_leave_days_by_employee([employee_id], start, end).get(int(employee_id), set())

    def approved_leave_days_by_employee(
        self,
        employee_ids: Optional[Sequence[int]],
        start: date,
        end: date,
    ) -> dict[int, set[date]]:
        """Days inside [start, end] covered by an approved leave, per employee."""
        require_period(start, end)
        out: dict[int, set[date]] = {}
        requests = self._leaves.list_overlapping(
            start_date=start,
            end_date=end,
            status=RequestStatus.APPROVED,
            employee_ids=[int(i) for i in employee_ids] if employee_ids is not None else None,
        )
        for req in requests:
            days = out.setdefault(req.employee_id, set())
            days.update(iter_days(max(req.start_date, start), min(req.end_date, end)))
        return out

    def status_for_day(
        self,
        employee_id: int,
        day: date,
        record: Optional[AttendanceRecord] = None,
    ) -> AttendanceStatus:
        if record is not None:
            return record.status
        if day in self.approved_leave_days(employee_id, day, day):
            return AttendanceStatus.LEAVE
        return AttendanceStatus.ABSENT

    def _get(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get_by_id(int(request_id))
        if not req:
            raise RequestNotFound("Không tìm thấy yêu cầu nghỉ phép")
        return req

    def _decide(
        self,
        request_id: int,
        approver_id: int,
        status: RequestStatus,
        *,
        current_role: Role,
        now: Optional[datetime],
    ) -> LeaveRequest:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Bạn không có quyền")

        req = self._get(request_id)
        if req.status != RequestStatus.PENDING:
            raise RequestAlreadyDecided("Yêu cầu đã được xử lý")

        decided = self._leaves.set_decision(
            request_id=req.request_id,
            status=status,
            approver_id=int(approver_id),
            decided_at=now or self._clock(),
        )
        if not decided:
            raise RequestAlreadyDecided("Yêu cầu đã được xử lý")

        logger.info(
            "leave decided",
            extra={"request_id": req.request_id, "status": status.value, "approver_id": int(approver_id)},
        )
        return self._get(request_id)
