"""Ordering database management CLI.

Creates or drops the relational schema for the ordering domain. Only needed
when ``PROTEAN_ENV`` selects a relational database (see ``domain.toml``);
the default in-memory provider has no schema.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db
    PROTEAN_ENV=production python src/manage.py drop-db
"""

import argparse
import sys


def setup_database():
    import ordering.identity as _identity  # noqa: F401  load the package before init() traverses its submodules
    from ordering.domain import ordering
    from ordering.utils.db import setup_db

    print("Initializing ordering domain...")
    ordering.init()
    touched = setup_db(ordering)
    if touched:
        print(f"  Schema ready for: {', '.join(touched)}")
    else:
        print("  No relational database configured; nothing to do.")
    print("Done.")


def drop_database():
    import ordering.identity as _identity  # noqa: F401  load the package before init() traverses its submodules
    from ordering.domain import ordering
    from ordering.utils.db import drop_db

    print("Initializing ordering domain...")
    ordering.init()
    touched = drop_db(ordering)
    if touched:
        print(f"  Schema dropped for: {', '.join(touched)}")
    else:
        print("  No relational database configured; nothing to do.")
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Ordering database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
