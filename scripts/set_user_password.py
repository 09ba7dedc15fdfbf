"""Create an account or reset its password from the command line.

Useful to recover access when the only admin has forgotten their password.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure the project root is on sys.path so ``salon_agenda`` can be imported when the script is executed directly.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy import select

from salon_agenda import create_app
from salon_agenda.credentials import CredentialStore
from salon_agenda.errors import SalonError
from salon_agenda.extensions import db
from salon_agenda.models import USER_ROLES, User


def set_password(username: str, password: str, role: str = "admin") -> int:
    app = create_app()

    with app.app_context():
        store = CredentialStore(db.session)
        user = db.session.execute(select(User).where(User.username == username)).scalar_one_or_none()

        try:
            if user is None:
                if role == "admin" and not store.setup_complete():
                    store.setup_admin(username, password)
                else:
                    # Owned by the first admin, as if they had registered it.
                    creator = db.session.execute(
                        select(User.id).where(User.role == "admin").order_by(User.created_at)
                    ).scalar()
                    store.create_user(username, password, role=role, created_by=creator)
                print(f"Created new {role} user: {username}")
            else:
                store.update_password(user.id, password)
                print(f"Password for user '{username}' has been updated.")
        except SalonError as exc:
            print(f"Error: {exc.message}")
            return 1

    return 0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Set a user password, creating the user if needed.")
    parser.add_argument("username", help="Username")
    parser.add_argument("password", help="Plain-text password to hash and store")
    parser.add_argument(
        "--role",
        choices=USER_ROLES,
        default="admin",
        help="Role for a newly created user (default: admin)"
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    sys.exit(set_password(args.username, args.password, args.role))


if __name__ == "__main__":
    main()
