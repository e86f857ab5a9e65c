"""Supply-chain database management CLI.

Creates and drops the tables backing the supply-chain aggregates on the
configured SQL provider (see the ``production`` overlay in domain.toml).

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    """Create the supply-chain database schema."""
    from supplychain.domain import supplychain
    from supplychain.utils.db import setup_db

    print("Initializing supplychain domain...")
    supplychain.init()
    print("Creating supplychain database schema...")
    setup_db(supplychain)
    print("Done.")


def drop_database():
    """Drop the supply-chain database schema."""
    from supplychain.domain import supplychain
    from supplychain.utils.db import drop_db

    print("Initializing supplychain domain...")
    supplychain.init()
    print("Dropping supplychain database schema...")
    drop_db(supplychain)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Supply-chain database management")
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
