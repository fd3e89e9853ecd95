from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.homestay_staff.homestay_staff.common.logging_utils import setup_logging
from src.homestay_staff.homestay_staff.database.bootstrap import apply_sql_file

logger = logging.getLogger("scripts.seed_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_sql_file(db_config, path=REPO_ROOT / "database" / "seed.sql")
    logger.info("Seeded demo staff", extra={"database": db_config.get("database")})


if __name__ == "__main__":
    main()
