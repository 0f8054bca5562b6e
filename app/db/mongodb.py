"""
MongoDB Connection Utility

MongoDB stores everything CareerHub persists:
- Accounts (credentials, role, profile reference)
- One-time passwords issued during registration
- Seeker and recruiter profile documents

The database handle is handed to services explicitly. Routes receive it
through the get_mongo_db dependency, which tests override with an
in-memory database.
"""
import logging

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from app.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the CareerHub database. Also used as a FastAPI dependency."""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(db: Database, name: str) -> Collection:
    """Get a collection by its key in COLLECTIONS."""
    return db[COLLECTIONS[name]]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "accounts": "accounts",
    "otps": "otps",
    "seeker_profiles": "seeker_profiles",
    "recruiter_profiles": "recruiter_profiles",
}


def init_mongo_indexes(db: Database = None):
    """
    Create indexes. Call this once during app startup.

    The unique indexes are what actually guarantee one account per email
    and one profile per account under concurrent requests.
    """
    db = db if db is not None else get_mongo_db()

    db[COLLECTIONS["accounts"]].create_index("email", unique=True)

    # OTP lookups are by (email, code); the TTL index lets MongoDB drop
    # expired codes. Expiry is still checked at verification time.
    db[COLLECTIONS["otps"]].create_index([
        ("email", ASCENDING),
        ("otp", ASCENDING)
    ])
    db[COLLECTIONS["otps"]].create_index("expires_at", expireAfterSeconds=0)

    db[COLLECTIONS["seeker_profiles"]].create_index("user_id", unique=True)
    db[COLLECTIONS["recruiter_profiles"]].create_index("user_id", unique=True)

    logger.info("MongoDB indexes created successfully")
