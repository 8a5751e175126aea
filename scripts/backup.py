"""Dump the HR database with `mysqldump`.

Usage: python scripts/backup.py [--out-dir backups] [--tables attendance_records ...]
"""

from __future__ import annotations

import argparse
import importlib
import subprocess
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module


def build_command(db: dict, tables: list[str]) -> list[str]:
    return [
        "mysqldump",
        "--single-transaction",
        "--routines",
        f"-h{db['host']}",
        f"-P{db.get('port', 3306)}",
        f"-u{db['user']}",
        f"-p{db['password']}",
        db["database"],
        *tables,
    ]


def main() -> None:
    parser = argparse.ArgumentParser(description="Backup HR database")
    parser.add_argument("--out-dir", default=str(REPO_ROOT / "backups"))
    parser.add_argument("--tables", nargs="*", default=[])
    args = parser.parse_args()

    load_dotenv(REPO_ROOT / ".env", override=False)
    settings = importlib.import_module(get_settings_module())
    db = settings.DB_CONFIG

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / f"{db['database']}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.sql"

    try:
        with out_file.open("wb") as f:
            subprocess.run(build_command(db, args.tables), stdout=f, stderr=subprocess.PIPE, check=True)
    except FileNotFoundError:
        out_file.unlink(missing_ok=True)
        raise SystemExit("Không tìm thấy `mysqldump`. Hãy cài MySQL client tools.")
    except subprocess.CalledProcessError as exc:
        out_file.unlink(missing_ok=True)
        raise SystemExit(f"mysqldump lỗi: {exc.stderr.decode(errors='replace').strip()}")
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
