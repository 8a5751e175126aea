from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Department:
    dept_id: int
    name: str
    description: Optional[str] = None
    manager_id: Optional[int] = None
    is_active: bool = True
    employee_count: int = 0
