"""Apply database/schema.sql and report missing tables.

Usage: python scripts/init_db.py [--admin-email EMAIL --admin-password PASSWORD]
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.hr_system.hr_system.core.logging_utils import setup_json_logging
from src.hr_system.hr_system.database.bootstrap import apply_schema, ensure_admin_account, list_tables

EXPECTED_TABLES = {
    "accounts",
    "departments",
    "employees",
    "attendance_records",
    "overtime_requests",
    "leave_requests",
    "activity_logs",
}


def main() -> None:
    parser = argparse.ArgumentParser(description="Initialise the HR database")
    parser.add_argument("--admin-email")
    parser.add_argument("--admin-password")
    args = parser.parse_args()

    load_dotenv(REPO_ROOT / ".env", override=False)
    settings = importlib.import_module(get_settings_module())
    setup_json_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    missing = EXPECTED_TABLES - set(list_tables(db_config))
    if missing:
        raise SystemExit(f"Thiếu bảng sau khi áp dụng schema: {', '.join(sorted(missing))}")

    if args.admin_email and args.admin_password:
        ensure_admin_account(db_config, email=args.admin_email, password=args.admin_password)

    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
