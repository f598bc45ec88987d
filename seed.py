#!/usr/bin/env python3
"""
Seed script for the Account Tracker database.
This script creates the default admin account.
"""

import sys
from app import create_app
from extensions import db
from services import get_services, StorageError

ADMIN_USERNAME = 'admin'
ADMIN_PASSWORD = 'admin123'  # nosec B105 - development seed credentials


def seed_admin_user(app=None):
    """Create the admin account unless it already exists. Returns the admin user."""
    app = app or create_app()

    with app.app_context():
        db.create_all()
        users = get_services().users

        existing = users.get_user_by_username(ADMIN_USERNAME)
        if existing:
            print("ℹ️  Admin user already exists, skipping creation")
            return existing

        admin = users.create_user(ADMIN_USERNAME, ADMIN_PASSWORD)
        print(f"✅ Admin user created successfully (id {admin.id})")
        if admin.id != app.config['ADMIN_USER_ID']:
            print(f"⚠️  ADMIN_USER_ID is {app.config['ADMIN_USER_ID']}; "
                  f"set it to {admin.id} to grant admin access")
        return admin


def main():
    """Main function to handle command line arguments."""
    if len(sys.argv) > 1:
        if sys.argv[1] in ('--help', '-h'):
            print("Account Tracker Database Seeder")
            print("Usage:")
            print("  python seed.py          - Create the admin user")
            print("  python seed.py --help   - Show this help message")
            return
        print(f"❌ Unknown argument: {sys.argv[1]}")
        print("Use 'python seed.py --help' for usage information")
        sys.exit(1)

    try:
        seed_admin_user()
    except StorageError as e:
        print(f"❌ Error during seeding: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
