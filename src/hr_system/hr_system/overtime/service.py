from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Callable, Optional, Sequence

from ..accounts.model import Principal
from ..common.datetime_utils import at_time, now_local
from ..common.rates import to_decimal
from ..common.validators import optional_text
from ..core.enums import RequestStatus, Role
from ..core.exceptions import (
    AlreadyApproved,
    AuthorizationError,
    InvalidHours,
    PastDateNotAllowed,
    RequestAlreadyDecided,
    RequestNotFound,
)
from .model import OvertimeRequest
from .repository import OvertimeRepository

logger = logging.getLogger(__name__)


class OvertimeService:
    """Overtime approval gate.

    Approved requests are the only source of payable overtime: the attendance
    ledger asks `find_approved` for the cap at check-out.
    """

    def __init__(self, requests: OvertimeRepository, *, clock: Callable[[], datetime] = now_local):
        self._requests = requests
        self._clock = clock

    def request(
        self,
        employee_id: int,
        work_date: date,
        requested_hours,
        reason: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
        principal: Optional[Principal] = None,
    ) -> OvertimeRequest:
        if principal is not None and not principal.is_admin and principal.employee_id != int(employee_id):
            raise AuthorizationError("Chỉ được gửi yêu cầu cho chính mình")

        now = now or self._clock()
        # the work date starts at midnight; any later submission counts as past
        if at_time(work_date, time.min) < now:
            raise PastDateNotAllowed("Không thể tạo yêu cầu cho ngày trong quá khứ")

        try:
            hours = to_decimal(requested_hours)
        except ArithmeticError:
            raise InvalidHours()
        if not hours.is_finite() or hours <= 0:
            raise InvalidHours("Số giờ làm thêm phải lớn hơn 0")

        request_id = self._requests.create(
            employee_id=int(employee_id),
            work_date=work_date,
            requested_hours=hours,
            reason=optional_text(reason),
        )
        logger.info(
            "overtime requested",
            extra={"request_id": request_id, "employee_id": int(employee_id), "work_date": work_date, "hours": str(hours)},
        )
        return self._get(request_id)

    def approve(
        self,
        request_id: int,
        approver_id: int,
        *,
        current_role: Role,
        now: Optional[datetime] = None,
    ) -> OvertimeRequest:
        return self._decide(request_id, approver_id, RequestStatus.APPROVED, current_role=current_role, now=now)

    def reject(
        self,
        request_id: int,
        approver_id: int,
        *,
        current_role: Role,
        now: Optional[datetime] = None,
    ) -> OvertimeRequest:
        return self._decide(request_id, approver_id, RequestStatus.REJECTED, current_role=current_role, now=now)

    def find_approved(self, employee_id: int, work_date: date) -> Optional[OvertimeRequest]:
        return self._requests.find_approved(int(employee_id), work_date)

    def list_for_employee(self, employee_id: int, *, limit: int = 200) -> Sequence[OvertimeRequest]:
        return self._requests.list(employee_id=int(employee_id), limit=limit)

    def list_pending(self, *, current_role: Role, limit: int = 500) -> Sequence[OvertimeRequest]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Bạn không có quyền")
        return self._requests.list(status=RequestStatus.PENDING, limit=limit)

    def _get(self, request_id: int) -> OvertimeRequest:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise RequestNotFound("Không tìm thấy yêu cầu")
        return req

    @staticmethod
    def _ensure_pending(req: OvertimeRequest) -> None:
        if req.status == RequestStatus.APPROVED:
            raise AlreadyApproved("Yêu cầu đã được phê duyệt")
        if req.status != RequestStatus.PENDING:
            raise RequestAlreadyDecided("Yêu cầu đã được xử lý")

    def _decide(
        self,
        request_id: int,
        approver_id: int,
        status: RequestStatus,
        *,
        current_role: Role,
        now: Optional[datetime],
    ) -> OvertimeRequest:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Chỉ Admin mới được duyệt yêu cầu làm thêm giờ")

        req = self._get(request_id)
        self._ensure_pending(req)

        decided = self._requests.set_decision(
            request_id=req.request_id,
            status=status,
            approver_id=int(approver_id),
            decided_at=now or self._clock(),
        )
        if not decided:
            # lost a race with another decision
            self._ensure_pending(self._get(request_id))
            raise RequestAlreadyDecided("Yêu cầu đã được xử lý")

        logger.info(
            "overtime decided",
            extra={"request_id": req.request_id, "status": status.value, "approver_id": int(approver_id)},
        )
        return self._get(request_id)
