"""
Database module - MongoDB connection and collection access.
"""
from talent_portal.db.mongodb import (
    get_mongo_db,
    get_users_collection,
    init_mongo_indexes,
    test_mongo_connection,
)

__all__ = [
    "get_mongo_db",
    "get_users_collection",
    "init_mongo_indexes",
    "test_mongo_connection",
]
