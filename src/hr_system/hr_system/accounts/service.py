from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import Principal
from .repository import AccountRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate an account (login) and manage its password."""

    def __init__(self, accounts: AccountRepository, employees: EmployeeRepository):
        self._accounts = accounts
        self._employees = employees

    @staticmethod
    def _verify(password_hash: str, password: str) -> bool:
        try:
            return check_password_hash(password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            return False

    def authenticate(self, email: str, password: str) -> Principal:
        email = (email or "").strip().lower()
        account = self._accounts.get_by_email(email)
        if not account or not account.is_active or not self._verify(account.password_hash, password):
            logger.info("login rejected", extra={"email": email})
            raise AuthenticationError("Sai email hoặc mật khẩu")

        employee = self._employees.get_by_account_id(account.account_id)
        if account.role == Role.EMPLOYEE and (employee is None or not employee.is_active):
            raise AuthenticationError("Tài khoản chưa gắn với nhân viên đang hoạt động")

        logger.info("login ok", extra={"account_id": account.account_id, "role": account.role.value})
        return Principal(
            account_id=account.account_id,
            role=account.role,
            employee_id=employee.employee_id if employee else None,
        )

    def change_password(self, account_id: int, current_password: str, new_password: str) -> None:
        require_non_empty(current_password, "Mật khẩu hiện tại")
        require_min_length(new_password, "Mật khẩu mới", MIN_PASSWORD_LENGTH)

        account = self._accounts.get_by_id(int(account_id))
        if not account or not self._verify(account.password_hash, current_password):
            raise AuthenticationError("Mật khẩu hiện tại không đúng")
        if current_password == new_password:
            raise ValidationError("Mật khẩu mới phải khác mật khẩu hiện tại")

        self._accounts.update_password(account.account_id, generate_password_hash(new_password))
        logger.info("password changed", extra={"account_id": account.account_id})
