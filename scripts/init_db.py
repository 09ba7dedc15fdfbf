#!/usr/bin/env python3
"""Create the salon agenda tables and report whether the first admin exists."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from salon_agenda import create_app
from salon_agenda.credentials import CredentialStore
from salon_agenda.extensions import db


def init_database(reset: bool = False) -> None:
    app = create_app({"CREATE_TABLES_ON_STARTUP": False})
    with app.app_context():
        if reset:
            db.drop_all()
        db.create_all()
        print(f"Tables ready at {app.config['SQLALCHEMY_DATABASE_URI']}: {', '.join(sorted(db.metadata.tables))}")

        if CredentialStore(db.session).setup_complete():
            print("Setup complete: an admin account exists.")
        else:
            print("No admin yet. Run scripts/set_user_password.py <username> <password> to create one.")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the database tables.")
    parser.add_argument("--reset", action="store_true", help="Drop every table first (destroys all data)")
    return parser.parse_args()


if __name__ == "__main__":
    init_database(parse_args().reset)
