from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Department


class DepartmentRepository(Protocol):
    def get_by_id(self, dept_id: int) -> Optional[Department]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Department]:
        raise NotImplementedError

    def list_all(self, *, active_only: bool = False) -> Sequence[Department]:
        raise NotImplementedError

    def create(self, *, name: str, description: Optional[str], manager_id: Optional[int]) -> int:
        raise NotImplementedError

    def update(self, dept_id: int, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, dept_id: int) -> bool:
        raise NotImplementedError

    def adjust_employee_count(self, dept_id: int, delta: int) -> bool:
        """Add `delta` to the cached counter; only called inside a transaction."""

        raise NotImplementedError

    def set_employee_count(self, dept_id: int, count: int) -> bool:
        raise NotImplementedError
