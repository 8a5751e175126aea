from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from .accounts.mysql_account_repository import MySQLAccountRepository
from .accounts.repository import AccountRepository
from .accounts.service import AuthService
from .activity.mysql_activity_repository import MySQLActivityLogRepository
from .activity.repository import ActivityLogRepository
from .activity.service import ActivityService
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .common.transaction import TransactionManager
from .core.policy import AttendancePolicy, PayrollPolicy, policies_from_settings
from .database.connection import DBConfig, DatabaseConnection
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .departments.repository import DepartmentRepository
from .departments.service import DepartmentService
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .overtime.mysql_overtime_repository import MySQLOvertimeRepository
from .overtime.repository import OvertimeRepository
from .overtime.service import OvertimeService
from .payroll.attendance_report import AttendanceReportService
from .payroll.export import CsvReportSink, ReportSink
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    tx: TransactionManager

    accounts_repo: AccountRepository
    employees_repo: EmployeeRepository
    departments_repo: DepartmentRepository
    attendance_repo: AttendanceRepository
    overtime_repo: OvertimeRepository
    leaves_repo: LeaveRepository
    activity_repo: ActivityLogRepository

    auth_service: AuthService
    activity_service: ActivityService
    employee_service: EmployeeService
    department_service: DepartmentService
    attendance_service: AttendanceService
    overtime_service: OvertimeService
    leave_service: LeaveService
    payroll_service: PayrollService
    attendance_report_service: AttendanceReportService
    report_sink: ReportSink
    clock: Callable[[], datetime] = now_local


def wire(
    *,
    tx: TransactionManager,
    accounts_repo: AccountRepository,
    employees_repo: EmployeeRepository,
    departments_repo: DepartmentRepository,
    attendance_repo: AttendanceRepository,
    overtime_repo: OvertimeRepository,
    leaves_repo: LeaveRepository,
    activity_repo: ActivityLogRepository,
    attendance_policy: Optional[AttendancePolicy] = None,
    payroll_policy: Optional[PayrollPolicy] = None,
    clock=None,
) -> Container:
    """Assemble services over any set of repositories (MySQL in the app, in-memory in tests)."""
    clock_kw = {"clock": clock} if clock is not None else {}

    activity_service = ActivityService(activity_repo)
    overtime_service = OvertimeService(overtime_repo, **clock_kw)
    leave_service = LeaveService(leaves_repo, **clock_kw)

    return Container(
        tx=tx,
        accounts_repo=accounts_repo,
        employees_repo=employees_repo,
        departments_repo=departments_repo,
        attendance_repo=attendance_repo,
        overtime_repo=overtime_repo,
        leaves_repo=leaves_repo,
        activity_repo=activity_repo,
        auth_service=AuthService(accounts_repo, employees_repo),
        activity_service=activity_service,
        employee_service=EmployeeService(
            accounts_repo, employees_repo, departments_repo, attendance_repo, activity_service, tx
        ),
        department_service=DepartmentService(departments_repo, employees_repo, activity_service, tx),
        attendance_service=AttendanceService(
            attendance_repo,
            employees_repo,
            overtime_service,
            policy=attendance_policy,
            strategy_factory=AttendanceStrategyFactory(),
            **clock_kw,
        ),
        overtime_service=overtime_service,
        leave_service=leave_service,
        payroll_service=PayrollService(attendance_repo, employees_repo, departments_repo, policy=payroll_policy),
        attendance_report_service=AttendanceReportService(attendance_repo, employees_repo, leave_service),
        report_sink=CsvReportSink(),
        clock=clock or now_local,
    )


def build_container(*, db_config: Mapping[str, Any], settings=None) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)
    attendance_policy, payroll_policy = policies_from_settings(settings)

    return wire(
        tx=conn,
        accounts_repo=MySQLAccountRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        overtime_repo=MySQLOvertimeRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        activity_repo=MySQLActivityLogRepository(conn),
        attendance_policy=attendance_policy,
        payroll_policy=payroll_policy,
    )
