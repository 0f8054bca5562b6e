"""
Authentication Routes

POST /auth/request-otp - Email a one-time code to an unregistered address
POST /auth/register - Verify the code, create the account, get JWT token
"""

from fastapi import APIRouter, Depends
from pymongo.database import Database

from app.db.mongodb import get_mongo_db
from app.services.mail_service import OtpMailer, get_mailer
from app.services.registration_service import RegistrationService
from app.schemas.schemas import (
    OtpRequest, RegisterRequest, RegisterResponse, UserPublic, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_registration_service(
    db: Database = Depends(get_mongo_db),
    mailer: OtpMailer = Depends(get_mailer)
) -> RegistrationService:
    return RegistrationService(db, mailer)


@router.post("/request-otp", response_model=MessageResponse)
def request_otp(
    request: OtpRequest,
    service: RegistrationService = Depends(get_registration_service)
):
    """
    Send a 6-digit OTP to the given email.

    The code is only delivered by email, never returned here.
    Requesting again invalidates the previous code.
    """
    service.request_otp(request.email)
    return MessageResponse(message="OTP sent to email")


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(
    request: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service)
):
    """
    Register a new account with the emailed OTP.

    Returns a 7-day token: Authorization: Bearer <token>
    """
    result = service.register(
        email=request.email,
        password=request.password,
        role=request.role,
        user_otp=request.user_otp
    )
    return RegisterResponse(
        message="User registered successfully",
        token=result["token"],
        user=UserPublic(**result["user"])
    )
