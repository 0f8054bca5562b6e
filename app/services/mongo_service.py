"""
MongoDB Service - CRUD operations for document collections.

Collections in this database:
1. accounts           - Registered users (email, password hash, role, profile reference)
2. otps               - One-time passwords issued during registration
3. seeker_profiles    - Job seeker profile documents
4. recruiter_profiles - Recruiter profile documents

Every service takes the database handle explicitly. Each operation is a
single-document atomic MongoDB call; no application-level locking is used.
"""

from datetime import datetime, timezone
from typing import Optional, List
from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database

from app.db.mongodb import get_collection


# ============================================================
# HELPERS
# ============================================================

def utcnow() -> datetime:
    """Naive UTC timestamp, matching what pymongo hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_object_id(value) -> Optional[ObjectId]:
    """Parse an id string into an ObjectId, None if it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


# ============================================================
# ACCOUNTS COLLECTION
# The credential store
# ============================================================

class AccountService:
    """
    Handles account documents.

    profile_ref is a tagged reference to the account's profile:
    None, or {"kind": "seeker" | "recruiter", "id": ObjectId}.
    """

    def __init__(self, db: Database):
        self.collection: Collection = get_collection(db, "accounts")

    def insert(self, email: str, password_hash: str, role: str, now: datetime) -> dict:
        """
        Create an account in the profile-incomplete state.

        Raises pymongo.errors.DuplicateKeyError if the email is taken
        (unique index on email).
        """
        doc = {
            "email": email,
            "password_hash": password_hash,
            "role": role,
            "is_profile_complete": False,
            "profile_ref": None,
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def exists(self, email: str) -> bool:
        return self.collection.find_one({"email": email}, {"_id": 1}) is not None

    def get_by_id(self, account_id) -> Optional[dict]:
        oid = to_object_id(account_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def set_profile(self, account_id: ObjectId, kind: str, profile_id: ObjectId, now: datetime) -> bool:
        """Point the account at its profile and mark it complete."""
        result = self.collection.update_one(
            {"_id": account_id},
            {"$set": {
                "profile_ref": {"kind": kind, "id": profile_id},
                "is_profile_complete": True,
                "updated_at": now,
            }}
        )
        return result.matched_count > 0


# ============================================================
# OTPS COLLECTION
# Short-lived registration codes
# ============================================================

class OtpService:
    """
    Handles one-time password records.

    Several records for one email can briefly coexist when two requests
    race, so lookups always match on the (email, code) pair.
    """

    def __init__(self, db: Database):
        self.collection: Collection = get_collection(db, "otps")

    def insert(self, email: str, otp: str, expires_at: datetime, now: datetime) -> str:
        doc = {
            "email": email,
            "otp": otp,
            "expires_at": expires_at,
            "created_at": now,
        }
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)

    def find_valid(self, email: str, otp: str, now: datetime) -> Optional[dict]:
        """Return a record matching (email, otp) that has not expired yet."""
        return self.collection.find_one({
            "email": email,
            "otp": otp,
            "expires_at": {"$gt": now},
        })

    def get_latest(self, email: str) -> Optional[dict]:
        """Most recently issued record for an email."""
        return self.collection.find_one(
            {"email": email},
            sort=[("created_at", DESCENDING)]
        )

    def delete_for_email(self, email: str) -> int:
        """Purge every record for an email. Returns number deleted."""
        result = self.collection.delete_many({"email": email})
        return result.deleted_count


# ============================================================
# PROFILE COLLECTIONS
# One document per account, replaced wholesale on each completion
# ============================================================

class ProfileStore:
    """Base class for the per-role profile collections."""

    collection_name: str = None
    kind: str = None

    def __init__(self, db: Database):
        self.collection: Collection = get_collection(db, self.collection_name)

    def upsert(self, user_id: ObjectId, fields: dict, now: datetime) -> dict:
        """
        Replace the account's profile with `fields`, creating it if missing.

        A replacement (not $set) so optional fields from an earlier call
        do not survive. created_at is carried over from the old document.
        """
        existing = self.collection.find_one({"user_id": user_id}, {"created_at": 1})
        doc = dict(fields)
        doc["user_id"] = user_id
        doc["created_at"] = existing["created_at"] if existing else now
        doc["updated_at"] = now
        return self.collection.find_one_and_replace(
            {"user_id": user_id},
            doc,
            upsert=True,
            return_document=ReturnDocument.AFTER
        )

    def get_by_user(self, user_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"user_id": user_id})


class SeekerProfileService(ProfileStore):
    collection_name = "seeker_profiles"
    kind = "seeker"

    # Required fields, in the order they are reported
    required_fields: List[str] = ["full_name", "phone", "education", "experience"]


class RecruiterProfileService(ProfileStore):
    collection_name = "recruiter_profiles"
    kind = "recruiter"

    required_fields: List[str] = ["company_name", "location", "designation"]
