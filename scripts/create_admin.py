"""Create the first admin account.

Usage: python scripts/create_admin.py admin@example.com 'secret-password'
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

from src.hr_system.hr_system.core.constants import MIN_PASSWORD_LENGTH
from src.hr_system.hr_system.database.bootstrap import ensure_admin_account


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("email")
    parser.add_argument("password")
    args = parser.parse_args()

    if len(args.password) < MIN_PASSWORD_LENGTH:
        raise SystemExit(f"Mật khẩu tối thiểu {MIN_PASSWORD_LENGTH} ký tự")

    load_dotenv(REPO_ROOT / ".env", override=False)
    settings = importlib.import_module(get_settings_module())
    created = ensure_admin_account(dict(settings.DB_CONFIG), email=args.email, password=args.password)
    print("OK: Admin account created" if created else "SKIP: An admin account already exists")


if __name__ == "__main__":
    main()
