"""Ví dụ: dùng service layer (không qua Flask).

In bảng lương tháng hiện tại theo phòng ban.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.hr_system.hr_system.common.rates import round_money
from src.hr_system.hr_system.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    today = date.today()
    report = container.payroll_service.compute_for_month(today.year, today.month)
    for dept in report.departments:
        print(f"{dept.dept_name}: {dept.employee_count} NV, tổng {round_money(dept.total_pay)}")
    print(f"Trung bình toàn công ty: {round_money(report.summary.average_pay)}")


if __name__ == "__main__":
    main()
