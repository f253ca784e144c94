#!/usr/bin/env python3
"""
Database initialization script.
Creates all tables that don't exist yet; safe to run repeatedly.

Usage: python init_db.py
Make sure DATABASE_URL (and SECRET_KEY) are set in the environment or .env file.
"""
import sys

from sqlalchemy.exc import SQLAlchemyError

from fitness_api.database import engine, init_db


def main() -> int:
    print("📋 Initializing database schema...")
    print(f"   Database: {engine.url.render_as_string(hide_password=True)}")
    print()

    try:
        created = init_db(engine)
    except SQLAlchemyError as e:
        print("❌ Error initializing database:")
        print(f"   {e}")
        print()
        print("📝 Troubleshooting:")
        print("   1. Check if your database server is running")
        print("   2. Verify the credentials in DATABASE_URL")
        return 1

    if created:
        for table in created:
            print(f"✅ Table created: {table}")
    else:
        print("✅ All tables already exist")
    print("✅ Database schema initialized successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
