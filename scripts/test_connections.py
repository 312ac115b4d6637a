#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify MongoDB is reachable and the users indexes exist.
Usage: python scripts/test_connections.py
"""
import sys

from pymongo.errors import PyMongoError

from talent_portal.core.config import get_settings
from talent_portal.db.mongodb import get_users_collection, init_mongo_indexes, test_mongo_connection


def main() -> int:
    settings = get_settings()
    print("=" * 50)
    print("TALENT PORTAL - CONNECTION TEST")
    print("=" * 50)

    # Test MongoDB
    print("\n[1] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if not test_mongo_connection():
        print("    ❌ MongoDB: FAILED")
        return 1
    print("    ✅ MongoDB: CONNECTED")

    # Indexes
    print("\n[2] Ensuring users indexes...")
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        print(f"    ❌ Index creation failed: {e}")
        return 1
    names = sorted(get_users_collection().index_information())
    print(f"    ✅ Indexes: {', '.join(names)}")

    # JWT config sanity
    print("\n[3] Checking JWT settings...")
    if settings.jwt_secret_key == "change-this-secret":
        print("    ⚠️  JWT_SECRET_KEY is the default value - set it before deploying")
    else:
        print(f"    ✅ {settings.jwt_algorithm}, tokens valid {settings.jwt_expire_minutes} minutes")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)
    return 0


if __name__ == "__main__":
    sys.exit(main())
