from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.task_tracker.task_tracker.database.bootstrap import DEMO_TENANT, apply_seed_sql, ensure_demo_users

LOG = logging.getLogger("task_tracker.seed_db")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo departments, batches and users.")
    parser.add_argument("--subdomain", default=DEMO_TENANT, help="tenant that receives the demo users")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_users(db_config, subdomain=args.subdomain)
    LOG.info(
        "Seeded %s -> %s@%s:%s/%s",
        args.subdomain,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )


if __name__ == "__main__":
    main()
