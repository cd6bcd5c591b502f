"""Create the download tables in the configured database."""
from __future__ import annotations

import argparse

from download_gate.db.session import create_tables, drop_tables


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create the download gate tables")
    parser.add_argument(
        "--drop-tables",
        action="store_true",
        help="Drop existing download tables before creating them.",
    )
    args = parser.parse_args(argv)

    if args.drop_tables:
        drop_tables()
        print("[init_db] dropped download tables")
    create_tables()
    print("[init_db] database initialized")


if __name__ == "__main__":
    main()
