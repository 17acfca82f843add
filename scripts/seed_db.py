from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.class_attendance.class_attendance.database.bootstrap import apply_seed_sql, ensure_demo_accounts

logger = logging.getLogger("seed_db")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    # accounts first: seed.sql looks them up by username
    ensure_demo_accounts(db_config)
    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")

    logger.info(
        "Seeded database -> %s@%s:%s/%s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )


if __name__ == "__main__":
    main()
