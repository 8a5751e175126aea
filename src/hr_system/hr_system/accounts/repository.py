from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import Account


class AccountRepository(Protocol):
    """Repository interface for accounts.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, account_id: int) -> Optional[Account]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def create(self, *, email: str, password_hash: str, role: Role) -> int:
        raise NotImplementedError

    def delete_by_id(self, account_id: int) -> bool:
        raise NotImplementedError

    def set_active(self, account_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def update_password(self, account_id: int, password_hash: str) -> bool:
        raise NotImplementedError
