"""Storefront management CLI.

Usage:
    python src/manage.py setup-db       # Create all tables
    python src/manage.py drop-db        # Drop all tables
    python src/manage.py create-admin --email admin@example.com --password 'S3cret!x' \\
        --first-name Ada --last-name Admin
"""

import argparse
import sys

from protean.exceptions import ValidationError


def setup_database():
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Creating database schema...")
    setup_db(storefront)
    print("Done.")


def drop_database():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Dropping database schema...")
    drop_db(storefront)
    print("Done.")


def create_admin(email, password, first_name, last_name):
    """Register an administrator account; returns the new user's id."""
    from storefront.domain import storefront
    from storefront.identity.passwords import prepare_password
    from storefront.identity.registration import RegisterUser
    from storefront.identity.user import Role

    storefront.init()
    with storefront.domain_context():
        command = RegisterUser(
            email=email,
            password_hash=prepare_password(password),
            first_name=first_name,
            last_name=last_name,
            role=Role.ADMIN.value,
        )
        user_id = storefront.process(command, asynchronous=False)

    print(f"Administrator {email} created with id {user_id}.")
    return user_id


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create an administrator account")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)
    admin_parser.add_argument("--first-name", required=True)
    admin_parser.add_argument("--last-name", required=True)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "create-admin":
        try:
            create_admin(args.email, args.password, args.first_name, args.last_name)
        except ValidationError as exc:
            print(f"Could not create administrator: {exc.messages}", file=sys.stderr)
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
