"""
Initialize never-scheduled items in the scheduler database.

Re-initializes every item that still carries default scheduling values
and has never been reviewed (and, under FSRS, every item without FSRS
state). Run once after switching scheduling algorithms.

Usage:
    # Use DATABASE_URL and the stored algorithm preference
    python -m scripts.initialize_stale_items

    # One scope, forcing FSRS initialization
    python -m scripts.initialize_stale_items --scope nl --algorithm fsrs
"""

import argparse
import logging
from typing import Optional

from srs_core.scheduling import (
    SchedulerService,
    SqlItemStore,
    SqlSettingsStore,
    StaticConfigStore,
    get_engine,
    init_db,
)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Initialize stale scheduler items")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="SQLAlchemy URL (default: DATABASE_URL)"
    )
    parser.add_argument(
        "--scope",
        type=str,
        default=None,
        help="Only items in this scope (e.g. a language code)"
    )
    parser.add_argument(
        "--algorithm",
        choices=["classic", "fsrs"],
        default=None,
        help="Algorithm to initialize with (default: stored preference)"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    engine = get_engine(args.database_url)
    init_db(engine)

    if args.algorithm:
        config_store = StaticConfigStore(args.algorithm)
    else:
        config_store = SqlSettingsStore(engine)

    service = SchedulerService(SqlItemStore(engine), config_store)
    count = service.bulk_initialize_stale(scope=args.scope)

    print(f"Initialized {count} item(s) with {service.active_engine().name.value}")
    return count


if __name__ == "__main__":
    main()
