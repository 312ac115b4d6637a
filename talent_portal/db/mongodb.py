"""
MongoDB Connection Utility

MongoDB stores one collection:
- users: identity (email + bcrypt hash) and the candidate profile

Why MongoDB:
- One self-contained document per user, no joins
- Single-document updates are atomic, which is all the profile path needs
- Unique index on email enforces the one-account-per-address rule
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from talent_portal.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
}


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        settings = get_settings()
        _client = MongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
            tz_aware=True,
        )
    return _client


def get_mongo_db() -> Database:
    """Get the application database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    db = get_mongo_db()
    return db[name]


def get_users_collection() -> Collection:
    """
    FastAPI dependency for the users collection.
    Tests override this to point at an in-memory collection.
    """
    return get_collection(COLLECTIONS["users"])


def ensure_user_indexes(collection: Collection) -> None:
    """Unique email (the duplicate-registration guard) and newest-first listing."""
    collection.create_index([("email", ASCENDING)], unique=True, name="email_unique")
    collection.create_index([("createdAt", DESCENDING)], name="created_at_desc")


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    ensure_user_indexes(get_users_collection())
    logger.info("MongoDB indexes created successfully")


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command("ping")
        return True
    except PyMongoError as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


def close_mongo_client() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None
