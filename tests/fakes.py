"""In-memory implementations of the repository protocols."""

from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterator, Mapping

from src.hr_system.hr_system.accounts.model import Account
from src.hr_system.hr_system.activity.model import ActivityLog, ActorActivity
from src.hr_system.hr_system.attendance.model import AttendanceRecord
from src.hr_system.hr_system.core.enums import AttendanceStatus, RequestStatus, Role
from src.hr_system.hr_system.core.exceptions import AlreadyCheckedIn, ValidationError
from src.hr_system.hr_system.departments.model import Department
from src.hr_system.hr_system.employees.model import Employee, NewEmployee
from src.hr_system.hr_system.leaves.model import LeaveRequest
from src.hr_system.hr_system.overtime.model import OvertimeRequest

CREATED_AT = datetime(2026, 1, 1, 9, 0, 0)


class _Seq:
    def __init__(self):
        self._next = 0

    def next(self) -> int:
        self._next += 1
        return self._next


class InMemoryAccounts:
    def __init__(self):
        self.rows: dict[int, Account] = {}
        self._ids = _Seq()
        self.fail_delete = False

    def get_by_id(self, account_id):
        return self.rows.get(int(account_id))

    def get_by_email(self, email):
        return next((a for a in self.rows.values() if a.email == email), None)

    def create(self, *, email, password_hash, role):
        if self.get_by_email(email):
            raise ValidationError("Email đã tồn tại")
        account_id = self._ids.next()
        self.rows[account_id] = Account(account_id=account_id, email=email, password_hash=password_hash, role=role)
        return account_id

    def delete_by_id(self, account_id):
        if self.fail_delete:
            return False
        return self.rows.pop(int(account_id), None) is not None

    def set_active(self, account_id, *, is_active):
        acc = self.rows.get(int(account_id))
        if not acc:
            return False
        self.rows[acc.account_id] = replace(acc, is_active=is_active)
        return True

    def update_password(self, account_id, password_hash):
        acc = self.rows.get(int(account_id))
        if not acc:
            return False
        self.rows[acc.account_id] = replace(acc, password_hash=password_hash)
        return True


class InMemoryEmployees:
    def __init__(self):
        self.rows: dict[int, Employee] = {}
        self._ids = _Seq()

    def get_by_id(self, employee_id):
        return self.rows.get(int(employee_id))

    def get_by_account_id(self, account_id):
        return next((e for e in self.rows.values() if e.account_id == int(account_id)), None)

    def list(self, *, dept_id=None, search=None, active_only=False, employee_ids=None):
        out = sorted(self.rows.values(), key=lambda e: e.employee_id)
        if dept_id is not None:
            out = [e for e in out if e.dept_id == int(dept_id)]
        if search:
            out = [e for e in out if search.lower() in e.full_name.lower()]
        if active_only:
            out = [e for e in out if e.is_active]
        if employee_ids is not None:
            wanted = {int(i) for i in employee_ids}
            out = [e for e in out if e.employee_id in wanted]
        return out

    def create(self, *, account_id, data: NewEmployee):
        employee_id = self._ids.next()
        self.rows[employee_id] = Employee(employee_id=employee_id, account_id=int(account_id), **vars(data))
        return employee_id

    def update(self, employee_id, changes: Mapping[str, Any]):
        emp = self.rows.get(int(employee_id))
        if not emp:
            return False
        self.rows[emp.employee_id] = replace(emp, **dict(changes))
        return True

    def delete_by_id(self, employee_id):
        return self.rows.pop(int(employee_id), None) is not None

    def count_by_department(self):
        counts: dict[int, int] = {}
        for e in self.rows.values():
            counts[e.dept_id] = counts.get(e.dept_id, 0) + 1
        return counts

    def add(self, **fields) -> Employee:
        """Test helper: insert a fully specified employee."""
        employee_id = fields.pop("employee_id", None) or self._ids.next()
        defaults = dict(
            account_id=1000 + employee_id,
            full_name=f"Employee {employee_id}",
            date_of_birth=date(1990, 1, 1),
            dept_id=1,
            position="Engineer",
            base_salary=Decimal("17600000"),
            start_date=date(2020, 1, 1),
        )
        defaults.update(fields)
        emp = Employee(employee_id=employee_id, **defaults)
        self.rows[employee_id] = emp
        return emp


class InMemoryDepartments:
    def __init__(self):
        self.rows: dict[int, Department] = {}
        self._ids = _Seq()

    def get_by_id(self, dept_id):
        return self.rows.get(int(dept_id))

    def get_by_name(self, name):
        return next((d for d in self.rows.values() if d.name == name), None)

    def list_all(self, *, active_only=False):
        out = sorted(self.rows.values(), key=lambda d: d.name)
        return [d for d in out if d.is_active] if active_only else out

    def create(self, *, name, description, manager_id):
        dept_id = self._ids.next()
        self.rows[dept_id] = Department(dept_id=dept_id, name=name, description=description, manager_id=manager_id)
        return dept_id

    def update(self, dept_id, changes):
        dept = self.rows.get(int(dept_id))
        if not dept:
            return False
        self.rows[dept.dept_id] = replace(dept, **dict(changes))
        return True

    def delete_by_id(self, dept_id):
        return self.rows.pop(int(dept_id), None) is not None

    def adjust_employee_count(self, dept_id, delta):
        dept = self.rows.get(int(dept_id))
        if not dept:
            return False
        self.rows[dept.dept_id] = replace(dept, employee_count=max(dept.employee_count + int(delta), 0))
        return True

    def set_employee_count(self, dept_id, count):
        return self.update(dept_id, {"employee_count": int(count)})


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[tuple[int, date], AttendanceRecord] = {}
        self._ids = _Seq()

    def get_recent_for_employee(self, employee_id, limit):
        items = [r for r in self.rows.values() if r.employee_id == int(employee_id)]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[: int(limit)]

    def get_for_employee_and_date(self, employee_id, work_date):
        return self.rows.get((int(employee_id), work_date))

    def create_checkin(self, *, employee_id, work_date, check_in_time, standard_check_in, late_minutes, status, note=None):
        key = (int(employee_id), work_date)
        if key in self.rows:
            raise AlreadyCheckedIn()
        attendance_id = self._ids.next()
        self.rows[key] = AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=int(employee_id),
            work_date=work_date,
            check_in_time=check_in_time,
            standard_check_in=standard_check_in,
            check_out_time=None,
            late_minutes=late_minutes,
            status=status,
            note=note,
        )
        return attendance_id

    def update_checkout(self, *, attendance_id, check_out_time, working_hours, overtime_hours, note=None):
        for key, rec in self.rows.items():
            if rec.attendance_id == int(attendance_id):
                if rec.check_out_time is not None:
                    return False
                self.rows[key] = replace(
                    rec,
                    check_out_time=check_out_time,
                    working_hours=working_hours,
                    overtime_hours=overtime_hours,
                    note=note if note is not None else rec.note,
                )
                return True
        return False

    def find_in_range(self, employee_id, from_date, to_date):
        return self.list_in_range(start_date=from_date, end_date=to_date, employee_ids=[employee_id])

    def list_in_range(self, *, start_date, end_date, employee_ids=None, status=None):
        out = [r for r in self.rows.values() if start_date <= r.work_date <= end_date]
        if employee_ids is not None:
            wanted = {int(i) for i in employee_ids}
            out = [r for r in out if r.employee_id in wanted]
        if status is not None:
            out = [r for r in out if r.status == status]
        return sorted(out, key=lambda r: (r.work_date, r.employee_id))

    def count_for_employee(self, employee_id):
        return sum(1 for r in self.rows.values() if r.employee_id == int(employee_id))

    def add(
        self,
        employee_id: int,
        work_date: date,
        *,
        working_hours="8",
        overtime_hours="0",
        late_minutes: int = 0,
        status: AttendanceStatus = AttendanceStatus.PRESENT,
    ) -> AttendanceRecord:
        """Test helper: insert a checked-out record."""
        rec = AttendanceRecord(
            attendance_id=self._ids.next(),
            employee_id=employee_id,
            work_date=work_date,
            check_in_time=datetime.combine(work_date, datetime.min.time()).replace(hour=8),
            standard_check_in=datetime.combine(work_date, datetime.min.time()).replace(hour=8),
            check_out_time=datetime.combine(work_date, datetime.min.time()).replace(hour=17),
            late_minutes=late_minutes,
            working_hours=Decimal(working_hours),
            overtime_hours=Decimal(overtime_hours),
            status=status,
        )
        self.rows[(employee_id, work_date)] = rec
        return rec


class InMemoryOvertime:
    def __init__(self):
        self.rows: dict[int, OvertimeRequest] = {}
        self._ids = _Seq()

    def create(self, *, employee_id, work_date, requested_hours, reason):
        request_id = self._ids.next()
        self.rows[request_id] = OvertimeRequest(
            request_id=request_id,
            employee_id=int(employee_id),
            work_date=work_date,
            requested_hours=requested_hours,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=CREATED_AT,
        )
        return request_id

    def get_by_id(self, request_id):
        return self.rows.get(int(request_id))

    def set_decision(self, *, request_id, status, approver_id, decided_at, expected_status=RequestStatus.PENDING):
        req = self.rows.get(int(request_id))
        if not req or req.status != expected_status:
            return False
        self.rows[req.request_id] = replace(req, status=status, approver_id=approver_id, approved_at=decided_at)
        return True

    def find_approved(self, employee_id, work_date):
        approved = [
            r
            for r in self.rows.values()
            if r.employee_id == int(employee_id) and r.work_date == work_date and r.status == RequestStatus.APPROVED
        ]
        approved.sort(key=lambda r: (r.approved_at, r.request_id), reverse=True)
        return approved[0] if approved else None

    def list(self, *, employee_id=None, status=None, limit=200):
        out = list(self.rows.values())
        if employee_id is not None:
            out = [r for r in out if r.employee_id == int(employee_id)]
        if status is not None:
            out = [r for r in out if r.status == status]
        return sorted(out, key=lambda r: (r.work_date, r.request_id), reverse=True)[:limit]


class InMemoryLeaves:
    def __init__(self):
        self.rows: dict[int, LeaveRequest] = {}
        self._ids = _Seq()

    def create(self, *, employee_id, start_date, end_date, leave_type, reason):
        request_id = self._ids.next()
        self.rows[request_id] = LeaveRequest(
            request_id=request_id,
            employee_id=int(employee_id),
            start_date=start_date,
            end_date=end_date,
            leave_type=leave_type,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=CREATED_AT,
        )
        return request_id

    def get_by_id(self, request_id):
        return self.rows.get(int(request_id))

    def set_decision(self, *, request_id, status, approver_id, decided_at):
        req = self.rows.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.rows[req.request_id] = replace(req, status=status, approver_id=approver_id, decided_at=decided_at)
        return True

    def list(self, *, employee_id=None, status=None, limit=200):
        out = list(self.rows.values())
        if employee_id is not None:
            out = [r for r in out if r.employee_id == int(employee_id)]
        if status is not None:
            out = [r for r in out if r.status == status]
        return sorted(out, key=lambda r: r.request_id, reverse=True)[:limit]

    def list_overlapping(self, *, start_date, end_date, status, employee_ids=None):
        out = [r for r in self.rows.values() if r.status == status and r.start_date <= end_date and r.end_date >= start_date]
        if employee_ids is not None:
            wanted = {int(i) for i in employee_ids}
            out = [r for r in out if r.employee_id in wanted]
        return sorted(out, key=lambda r: r.start_date)


class InMemoryActivity:
    def __init__(self, accounts: InMemoryAccounts | None = None):
        self.rows: list[ActivityLog] = []
        self.accounts = accounts
        self.now = CREATED_AT

    def add(self, *, actor_id, action, entity_type, entity_id, details):
        log = ActivityLog(
            log_id=len(self.rows) + 1,
            actor_id=actor_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            created_at=self.now,
            details=details,
        )
        self.rows.append(log)
        return log.log_id

    def list_recent(self, *, actor_id=None, entity_type=None, entity_id=None, limit=200):
        out = list(reversed(self.rows))
        if actor_id is not None:
            out = [r for r in out if r.actor_id == actor_id]
        if entity_type is not None:
            out = [r for r in out if r.entity_type == entity_type]
        if entity_id is not None:
            out = [r for r in out if r.entity_id == entity_id]
        return out[:limit]

    def summarize_by_actor(self, *, since=None, until=None):
        grouped: dict[int, list[ActivityLog]] = {}
        for r in self.rows:
            if since is not None and r.created_at < since:
                continue
            if until is not None and r.created_at >= until:
                continue
            grouped.setdefault(r.actor_id, []).append(r)

        out = []
        for actor_id, logs in grouped.items():
            account = self.accounts.get_by_id(actor_id) if self.accounts else None
            if account is None:
                continue
            out.append(
                ActorActivity(
                    actor_id=actor_id,
                    email=account.email,
                    role=account.role,
                    total_actions=len(logs),
                    last_active=max(r.created_at for r in logs),
                    actions=tuple(sorted({r.action for r in logs}, key=lambda x: x.value)),
                    entity_types=tuple(sorted({r.entity_type for r in logs}, key=lambda x: x.value)),
                )
            )
        out.sort(key=lambda a: (-a.total_actions, a.actor_id))
        return out


class FakeTransactionManager:
    """Snapshots the given repositories on entry and restores them when the block raises."""

    def __init__(self, *repos):
        self._repos = repos
        self._depth = 0
        self.commits = 0
        self.rollbacks = 0

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._depth:
            yield
            return

        # repos referencing each other keep pointing at the live objects
        memo = {id(r): r for r in self._repos}
        snapshot = [copy.deepcopy(r.__dict__, memo) for r in self._repos]
        self._depth += 1
        try:
            yield
            self.commits += 1
        except Exception:
            for repo, state in zip(self._repos, snapshot):
                repo.__dict__.clear()
                repo.__dict__.update(state)
            self.rollbacks += 1
            raise
        finally:
            self._depth -= 1


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def admin_account(accounts: InMemoryAccounts, *, email="admin@example.com", password_hash="x") -> Account:
    account_id = accounts.create(email=email, password_hash=password_hash, role=Role.ADMIN)
    return accounts.get_by_id(account_id)


def new_employee_payload(dept_id: int, **overrides) -> dict:
    payload = {
        "email": "binh.tran@example.com",
        "password": "secret123",
        "full_name": "Tran Thi Binh",
        "date_of_birth": "1992-07-15",
        "dept_id": dept_id,
        "position": "Tester",
        "base_salary": "13200000",
        "start_date": "2021-05-03",
    }
    payload.update(overrides)
    return payload
