from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..accounts.model import Principal
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, ValidationError
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

SESSION_KEY = "principal"


def serialize(value: Any) -> Any:
    """JSON-friendly view of dataclasses, Decimals, dates and enums."""
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return {k: serialize(v) for k, v in asdict(value).items()}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [serialize(v) for v in value]
    return value


def ok(payload: Any = None, status: int = 200):
    return jsonify(serialize(payload) if payload is not None else {"ok": True}), status


def current_principal() -> Optional[Principal]:
    data = session.get(SESSION_KEY)
    if not data:
        return None
    return Principal.from_session(data)


def require_principal() -> Principal:
    principal = current_principal()
    if principal is None:
        raise AuthenticationError("Vui lòng đăng nhập để tiếp tục")
    return principal


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        require_principal()
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if require_principal().role != Role.ADMIN:
            raise AuthorizationError("Bạn không có quyền")
        return view(*args, **kwargs)

    return wrapper


def employee_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        principal = require_principal()
        if principal.role != Role.EMPLOYEE or principal.employee_id is None:
            raise AuthorizationError("Chỉ nhân viên mới thực hiện được thao tác này")
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Dữ liệu gửi lên phải là JSON object")
    return body


def date_arg(name: str, default: Optional[date] = None) -> date:
    raw = request.args.get(name)
    if not raw:
        if default is None:
            raise ValidationError(f"Thiếu tham số {name}")
        return default
    return parse_iso_date(raw)


def int_arg(name: str, default: Optional[int] = None) -> Optional[int]:
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Tham số {name} không hợp lệ")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return jsonify({"error": {"code": exc.code, "message": exc.message}}), exc.http_status

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": {"code": exc.name.lower().replace(" ", "_"), "message": exc.description}}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("unhandled error", extra={"path": request.path, "method": request.method})
        return jsonify({"error": {"code": "internal_error", "message": "Lỗi hệ thống"}}), 500
