"""
Set the scheduling algorithm stored in the settings table.

The scheduler reads the preference on every operation, so the change
applies to the next review without a restart.

Usage:
    python -m scripts.set_scheduler_algorithm fsrs
    python -m scripts.set_scheduler_algorithm --show
"""

import argparse
from typing import Optional

from srs_core.scheduling import SqlSettingsStore, get_engine, init_db, parse_engine_name


def main(argv: Optional[list[str]] = None) -> Optional[str]:
    parser = argparse.ArgumentParser(description="Set the scheduling algorithm")
    parser.add_argument(
        "algorithm",
        nargs="?",
        choices=["classic", "fsrs"],
        help="Algorithm to use for future reviews"
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="SQLAlchemy URL (default: DATABASE_URL)"
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Print the current preference and exit"
    )

    args = parser.parse_args(argv)
    if not args.show and args.algorithm is None:
        parser.error("an algorithm is required unless --show is given")

    engine = get_engine(args.database_url)
    init_db(engine)
    settings = SqlSettingsStore(engine)

    if args.show:
        stored = settings.get_algorithm_preference()
        print(f"Stored preference: {stored!r} (effective: {parse_engine_name(stored).value})")
        return stored

    settings.set_algorithm_preference(args.algorithm)
    print(f"✓ Scheduling algorithm set to {args.algorithm}")
    return args.algorithm


if __name__ == "__main__":
    main()
