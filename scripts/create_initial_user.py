"""Utility script to create a staff user in the database."""

from __future__ import annotations

import argparse
from datetime import date
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from app.application.use_cases.users.create_user import create_user
from app.domain.entities import Nationality, UserRole
from app.infrastructure.database import SessionLocal, initialize_database


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid date (expected YYYY-MM-DD): {value}") from exc


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Create a staff user for the residence notification service.",
    )
    parser.add_argument("--username", default="admin", help="Login name (default: admin)")
    parser.add_argument(
        "--full-name",
        default="Administrator",
        help="Full name of the user (default: Administrator)",
    )
    parser.add_argument(
        "--email",
        default="admin@example.com",
        help="Email address of the user (default: admin@example.com)",
    )
    parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.ADMIN.value,
        help="Role assigned to the user (default: admin)",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="User password. Prompted interactively when omitted.",
    )
    parser.add_argument(
        "--residence-number",
        default=None,
        help="Residence permit number, for non-Saudi staff",
    )
    parser.add_argument(
        "--residence-expiry",
        type=_parse_date,
        default=None,
        help="Residence permit expiry date (YYYY-MM-DD); marks the user as a resident",
    )
    return parser.parse_args()


def main() -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args()

    password = args.password or getpass("Password for the new user: ")
    if not password:
        raise SystemExit("No valid password was provided.")

    initialize_database()

    is_resident = args.residence_expiry is not None or args.residence_number is not None
    session = SessionLocal()
    try:
        user = create_user(
            session,
            username=args.username,
            full_name=args.full_name,
            email=args.email,
            password=password,
            role=UserRole(args.role),
            nationality=Nationality.RESIDENT if is_resident else Nationality.SAUDI,
            residence_number=args.residence_number,
            residence_expiry_date=args.residence_expiry,
        )
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Could not create the user: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not save the user in the database: {exc}") from exc
    else:
        print(
            "User created:\n"
            f"  ID: {user.id}\n"
            f"  Username: {user.username}\n"
            f"  Role: {user.role.value}\n"
            f"  Residence expiry: {user.residence_expiry_date or '-'}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
