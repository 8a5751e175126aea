from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Employee, NewEmployee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_account_id(self, account_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list(
        self,
        *,
        dept_id: Optional[int] = None,
        search: Optional[str] = None,
        active_only: bool = False,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, *, account_id: int, data: NewEmployee) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, changes: Mapping[str, Any]) -> bool:
        """Apply a partial update; keys are Employee field names."""

        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError

    def count_by_department(self) -> dict[int, int]:
        raise NotImplementedError
