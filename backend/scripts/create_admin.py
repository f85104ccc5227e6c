#!/usr/bin/env python3
"""Create or update a back-office admin account."""

import getpass
import sys
from pathlib import Path

# Make the intranet package importable when run from a checkout
BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BASE_DIR))

from sqlmodel import Session, select  # noqa: E402

from intranet.db import engine, init_db  # noqa: E402
from intranet.models import AdminUser  # noqa: E402
from intranet.services.admin_users import create_or_update_admin  # noqa: E402

ROLES = ("admin", "super_admin")


def create_admin() -> None:
    print("=" * 60)
    print("Create admin user")
    print("=" * 60)

    email = input("Email: ").strip().lower()
    if not email or "@" not in email:
        print("Error: a valid email is required")
        return

    name = input("Name: ").strip() or email.split("@")[0]
    role = input(f"Role {ROLES} [admin]: ").strip() or "admin"
    if role not in ROLES:
        print(f"Error: role must be one of {', '.join(ROLES)}")
        return

    password = getpass.getpass("Password: ")
    if len(password) < 8:
        print("Error: password must be at least 8 characters")
        return
    if getpass.getpass("Repeat password: ") != password:
        print("Error: passwords do not match")
        return

    init_db()
    with Session(engine) as session:
        existing = session.exec(select(AdminUser).where(AdminUser.email == email)).first()
        if existing is not None:
            answer = input(f"\nAdmin {email} already exists. Update it? (y/n): ").strip().lower()
            if answer != "y":
                print("Cancelled")
                return
        admin = create_or_update_admin(session, email, name, password, role)

    print(f"\nAdmin {'updated' if existing else 'created'}")
    print(f"  ID:    {admin.id}")
    print(f"  Email: {admin.email}")
    print(f"  Role:  {admin.role}")
    print("=" * 60)


if __name__ == "__main__":
    try:
        create_admin()
    except KeyboardInterrupt:
        print("\n\nCancelled")
        sys.exit(1)
