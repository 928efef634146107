#!/usr/bin/env python
"""
Create the account tables and optionally seed an ADMIN account.

Usage:
    python scripts/init_db.py --admin-email admin@example.com \
        --admin-username admin --admin-password 'change-me'
"""
import argparse
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import Base, SessionLocal, engine
from models import Role, User  # noqa: F401  (registers tables on Base.metadata)
from services.auth import hash_password
from services.user_repository import UserRepository


def init_database(admin_email=None, admin_username=None, admin_password=None):
    """Create tables, then the admin account if one was requested."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables created.")

    if not admin_email:
        return

    db = SessionLocal()
    try:
        repo = UserRepository(db)
        if repo.email_exists(admin_email):
            print(f"Account {admin_email} already exists, skipping.")
            return

        admin = repo.create(
            User(
                username=admin_username or admin_email.split("@")[0][:24],
                email=admin_email,
                hashed_password=hash_password(admin_password),
                role=Role.ADMIN,
            )
        )
        print(f"Created ADMIN account {admin.email} ({admin.user_id}).")
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--admin-email")
    parser.add_argument("--admin-username")
    parser.add_argument("--admin-password")
    args = parser.parse_args()

    if args.admin_email and not args.admin_password:
        parser.error("--admin-password is required with --admin-email")

    init_database(args.admin_email, args.admin_username, args.admin_password)
    print("Database initialization complete!")


if __name__ == "__main__":
    main()
