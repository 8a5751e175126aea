from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import OvertimeRequest


class OvertimeRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        work_date: date,
        requested_hours: Decimal,
        reason: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[OvertimeRequest]:
        raise NotImplementedError

    def set_decision(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        approver_id: int,
        decided_at: datetime,
        expected_status: RequestStatus = RequestStatus.PENDING,
    ) -> bool:
        """Compare-and-set: only applies while the request is in `expected_status`."""

        raise NotImplementedError

    def find_approved(self, employee_id: int, work_date: date) -> Optional[OvertimeRequest]:
        raise NotImplementedError

    def list(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[OvertimeRequest]:
        raise NotImplementedError
