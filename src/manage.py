"""Storefront database management CLI.

Usage:
    python src/manage.py setup-db           # Create all tables
    python src/manage.py setup-db --seed    # Create tables and add sample products
    python src/manage.py seed               # Add sample products to an empty catalogue
    python src/manage.py drop-db            # Drop all tables
"""

import argparse
import sys


def setup_database(seed=False):
    from shared.database import configure, setup_db

    engine = configure()
    print(f"Creating storefront schema on {engine.url.render_as_string(hide_password=True)}...")
    setup_db(engine)
    print("  schema ready.")
    if seed:
        seed_catalogue()
    print("Done.")


def seed_catalogue():
    from inventory.stock.catalogue import seed_products
    from shared.database import setup_db

    setup_db()
    count = seed_products()
    if count:
        print(f"  seeded {count} sample products.")
    else:
        print("  catalogue already has products, nothing seeded.")


def drop_database():
    from shared.database import configure, drop_db

    engine = configure()
    print(f"Dropping storefront schema on {engine.url.render_as_string(hide_password=True)}...")
    drop_db(engine)
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create all database tables")
    setup_parser.add_argument("--seed", action="store_true", help="Also insert the sample products")

    subparsers.add_parser("seed", help="Insert sample products into an empty catalogue")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    from shared.logging import configure_logging

    configure_logging()

    if args.command == "setup-db":
        setup_database(seed=args.seed)
    elif args.command == "seed":
        seed_catalogue()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
