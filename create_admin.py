#!/usr/bin/env python3
"""
Bootstrap or list admin accounts for the marketplace backend.

Usage:
    python create_admin.py create [--email EMAIL] [--name NAME]
    python create_admin.py list
"""

import argparse
import getpass
import sys
import os

# Add the backend directory to the Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from database.connection import SessionLocal, create_tables
from services.auth import create_admin
from models.account import Admin
from core.exceptions import ValidationError

MIN_PASSWORD_LENGTH = 8

def create_admin_account(email: str = None, name: str = None) -> int:
    email = email or input("Email: ").strip()
    name = name or input("Name: ").strip() or "Admin"
    password = getpass.getpass("Password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"❌ Password must be at least {MIN_PASSWORD_LENGTH} characters long!")
        return 1

    db = SessionLocal()
    try:
        admin = create_admin(db, name=name, email=email, password=password)
    except ValidationError as e:
        print(f"❌ {e.message}")
        return 1
    finally:
        db.close()

    print(f"✅ Admin created: {admin.email} ({admin.id})")
    return 0

def list_admin_accounts() -> int:
    db = SessionLocal()
    try:
        admins = db.query(Admin).order_by(Admin.created_at).all()
        if not admins:
            print("No admin accounts found.")
        for admin in admins:
            print(f"📧 {admin.email}  👤 {admin.name}  📅 {admin.created_at}")
    finally:
        db.close()
    return 0

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Marketplace admin management")
    commands = parser.add_subparsers(dest="command", required=True)
    create = commands.add_parser("create", help="create an admin account")
    create.add_argument("--email")
    create.add_argument("--name")
    commands.add_parser("list", help="list admin accounts")
    args = parser.parse_args(argv)

    # Ensure tables exist
    create_tables()

    if args.command == "create":
        return create_admin_account(args.email, args.name)
    return list_admin_accounts()

if __name__ == "__main__":
    sys.exit(main())
