from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class OvertimeRequest:
    request_id: int
    employee_id: int
    work_date: date
    requested_hours: Decimal
    reason: Optional[str]
    status: RequestStatus
    created_at: datetime
    approver_id: Optional[int] = None
    approved_at: Optional[datetime] = None
