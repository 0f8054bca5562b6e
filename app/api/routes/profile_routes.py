"""
Profile Routes

POST /profile/complete - Create or replace the caller's role profile
GET /profile/me - Get own account and profile
"""

from fastapi import APIRouter, Depends
from pymongo.database import Database

from app.db.mongodb import get_mongo_db
from app.core.auth import get_current_account
from app.services.profile_service import ProfileService
from app.services.registration_service import public_account
from app.schemas.schemas import (
    ProfileCompleteRequest, ProfileCompleteResponse, MyProfileResponse,
    UserPublic, profile_response
)

router = APIRouter(prefix="/profile", tags=["Profile"])


def get_profile_service(db: Database = Depends(get_mongo_db)) -> ProfileService:
    return ProfileService(db)


@router.post("/complete", response_model=ProfileCompleteResponse)
def complete_profile(
    data: ProfileCompleteRequest,
    account: dict = Depends(get_current_account),
    service: ProfileService = Depends(get_profile_service)
):
    """
    Complete the profile for the caller's role.

    Seekers: fullName, phone, education, experience (skills as list or
    comma-separated string). Recruiters: companyName, location, designation.
    Every call replaces the whole profile.
    """
    kind, profile = service.complete_profile(account, data.model_dump())
    return ProfileCompleteResponse(
        message="Profile completed successfully",
        profile=profile_response(kind, profile)
    )


@router.get("/me", response_model=MyProfileResponse)
def get_my_profile(
    account: dict = Depends(get_current_account),
    service: ProfileService = Depends(get_profile_service)
):
    """Get own account info and profile (null for admins or before completion)."""
    kind, profile = service.get_my_profile(account)
    return MyProfileResponse(
        user=UserPublic(**public_account(account)),
        profile=profile_response(kind, profile)
    )
