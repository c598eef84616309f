from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.lesson_payroll.lesson_payroll.database.bootstrap import (
    apply_schema,
    apply_seed_sql,
    ensure_system_settings,
    list_tables,
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Apply database/schema.sql (and optionally seed.sql)")
    parser.add_argument("--seed", action="store_true", help="also load database/seed.sql demo data")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    database_dir = REPO_ROOT / "database"

    apply_schema(db_config, schema_path=database_dir / "schema.sql")
    ensure_system_settings(db_config, default_penalty_amd=int(getattr(settings, "DEFAULT_PENALTY_AMD", 1000)))
    if args.seed:
        apply_seed_sql(db_config, seed_path=database_dir / "seed.sql")

    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)}, seeded={args.seed})"
    )


if __name__ == "__main__":
    main()
