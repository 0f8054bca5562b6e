"""
Profile Service - role-specific profile completion and lookup.

Seekers and recruiters each own exactly one profile document. Completing a
profile replaces that document wholesale; admins have no profile.
"""

import logging
from typing import Any, Optional, Tuple

from pymongo.database import Database

from app.core.errors import BadRequestError
from app.services.mongo_service import (
    AccountService, ProfileStore, RecruiterProfileService, SeekerProfileService, utcnow
)

logger = logging.getLogger(__name__)

# Optional fields accepted per role, in addition to the required ones
SEEKER_OPTIONAL = ["resume_url", "profile_image_url"]
RECRUITER_OPTIONAL = ["company_website", "company_email"]


def normalize_skills(skills: Any) -> list:
    """
    Turn a list or comma-separated string into a clean list of skills.

    >>> normalize_skills("Go, Rust, , C++")
    ['Go', 'Rust', 'C++']
    """
    if not skills:
        return []
    if isinstance(skills, (list, tuple)):
        items = [str(s) for s in skills if s is not None]
    else:
        items = str(skills).split(",")
    return [s.strip() for s in items if s.strip()]


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class ProfileService:
    def __init__(self, db: Database):
        self.accounts = AccountService(db)
        self.stores = {
            "seeker": SeekerProfileService(db),
            "recruiter": RecruiterProfileService(db),
        }

    def store_for(self, role: str) -> Optional[ProfileStore]:
        """Profile store for a role, None for roles without a profile."""
        return self.stores.get(role)

    def complete_profile(self, account: dict, data: dict) -> Tuple[str, dict]:
        """
        Create or replace the account's profile.

        Args:
            account: account document of the caller
            data: submitted fields (snake_case keys)

        Returns:
            (profile kind, stored profile document)
        """
        role = account.get("role")
        if role == "admin":
            raise BadRequestError("Admin profile is not required")

        store = self.store_for(role)
        if store is None:
            raise BadRequestError("Unsupported role")

        fields = {name: _clean(data.get(name)) for name in store.required_fields}
        if any(v is None for v in fields.values()):
            raise BadRequestError("Missing required fields")

        optional = SEEKER_OPTIONAL if store.kind == "seeker" else RECRUITER_OPTIONAL
        for name in optional:
            fields[name] = _clean(data.get(name))
        if store.kind == "seeker":
            fields["skills"] = normalize_skills(data.get("skills"))

        now = utcnow()
        profile = store.upsert(account["_id"], fields, now)
        self.accounts.set_profile(account["_id"], store.kind, profile["_id"], now)
        account["profile_ref"] = {"kind": store.kind, "id": profile["_id"]}
        account["is_profile_complete"] = True

        logger.info("Profile completed for %s (%s)", account.get("email"), store.kind)
        return store.kind, profile

    def get_my_profile(self, account: dict) -> Tuple[Optional[str], Optional[dict]]:
        """(profile kind, profile document), or (None, None) when there is none."""
        store = self.store_for(account.get("role"))
        if store is None:
            return None, None
        profile = store.get_by_user(account["_id"])
        if profile is None:
            return None, None
        return store.kind, profile
