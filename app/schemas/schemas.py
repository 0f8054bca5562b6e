"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Field names are camelCase on the wire (userOtp, fullName, ...); snake_case
is accepted on input too.

Request fields are optional at the schema level on purpose: the services
report missing fields with their own messages.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, List, Any, Literal, Union
from datetime import datetime
from enum import Enum


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    admin = "admin"
    recruiter = "recruiter"
    seeker = "seeker"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class OtpRequest(CamelModel):
    email: Optional[str] = None

class RegisterRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    user_otp: Optional[str] = None

class UserPublic(CamelModel):
    id: str
    email: str
    role: UserRole
    is_profile_complete: bool = False

class RegisterResponse(CamelModel):
    message: str
    token: str
    user: UserPublic


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ProfileCompleteRequest(CamelModel):
    """Union of seeker and recruiter fields; which apply depends on the caller's role."""
    # Seeker
    full_name: Optional[str] = None
    phone: Optional[str] = None
    education: Optional[str] = None
    experience: Optional[str] = None
    skills: Optional[Union[List[Any], str]] = None
    resume_url: Optional[str] = None
    profile_image_url: Optional[str] = None
    # Recruiter
    company_name: Optional[str] = None
    location: Optional[str] = None
    designation: Optional[str] = None
    company_website: Optional[str] = None
    company_email: Optional[str] = None

class SeekerProfileResponse(CamelModel):
    kind: Literal["seeker"] = "seeker"
    id: str
    user: str
    full_name: str
    phone: str
    education: str
    experience: str
    skills: List[str] = []
    resume_url: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class RecruiterProfileResponse(CamelModel):
    kind: Literal["recruiter"] = "recruiter"
    id: str
    user: str
    company_name: str
    location: str
    designation: str
    company_website: Optional[str] = None
    company_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

ProfileResponse = Union[SeekerProfileResponse, RecruiterProfileResponse]

class ProfileCompleteResponse(CamelModel):
    message: str
    profile: ProfileResponse

class MyProfileResponse(CamelModel):
    user: UserPublic
    profile: Optional[ProfileResponse] = None


def profile_response(kind: Optional[str], doc: Optional[dict]) -> Optional[ProfileResponse]:
    """Build the response model for a stored profile document."""
    if kind is None or doc is None:
        return None
    data = {k: v for k, v in doc.items() if k not in ("_id", "user_id")}
    data["id"] = str(doc["_id"])
    data["user"] = str(doc["user_id"])
    if kind == "seeker":
        return SeekerProfileResponse(**data)
    return RecruiterProfileResponse(**data)


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str

class ErrorResponse(BaseModel):
    message: str
