"""
Registration Service - OTP-gated account creation.

Per email the flow moves through:
    unregistered --request_otp--> otp-pending --register--> registered

Expiry is checked lazily when a code is submitted; there is no sweep job
(the TTL index on otps only bounds storage).

Validation order in register() is fixed so error reporting is deterministic:
    1. required fields
    2. role whitelist
    3. password policy (only when enabled)
    4. OTP validity
    5. email uniqueness
"""

import logging
import re
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from app.core.auth import create_account_token, hash_password
from app.core.config import Settings, get_settings
from app.core.errors import BadRequestError, ConflictError, TooManyRequestsError
from app.services.mail_service import OtpMailer
from app.services.mongo_service import AccountService, OtpService, utcnow

logger = logging.getLogger(__name__)

ALLOWED_ROLES = ("admin", "recruiter", "seeker")

PASSWORD_RULES = [
    (re.compile(r".{8,}", re.S), "at least 8 characters"),
    (re.compile(r"[A-Z]"), "an uppercase letter"),
    (re.compile(r"[a-z]"), "a lowercase letter"),
    (re.compile(r"\d"), "a number"),
    (re.compile(r"[^A-Za-z0-9]"), "a special character"),
]


def generate_otp(length: int = 6) -> str:
    """Numeric code, each digit drawn independently; leading zeros allowed."""
    return "".join(secrets.choice("0123456789") for _ in range(length))


def password_problems(password: str) -> list:
    """Names of the password rules that `password` fails."""
    return [label for pattern, label in PASSWORD_RULES if not pattern.search(password)]


def public_account(account: dict) -> dict:
    """Projection of an account that is safe to return to clients."""
    return {
        "id": str(account["_id"]),
        "email": account["email"],
        "role": account["role"],
        "is_profile_complete": account.get("is_profile_complete", False),
    }


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class RegistrationService:
    """
    Orchestrates OTP issuance, OTP verification and account creation.

    Args:
        db: MongoDB database handle
        mailer: sender used to deliver codes
        settings: app settings (defaults to get_settings())
        clock: returns the current naive-UTC time
    """

    def __init__(
        self,
        db: Database,
        mailer: OtpMailer,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.accounts = AccountService(db)
        self.otps = OtpService(db)
        self.mailer = mailer
        self.settings = settings or get_settings()
        self.clock = clock

    def request_otp(self, email: Optional[str]) -> None:
        """
        Issue a fresh code for an unregistered email and mail it.

        Any previous codes for the email are purged first, so only the
        newest code verifies. Mailer errors propagate.
        """
        if _blank(email):
            raise BadRequestError("Email is required")

        if self.accounts.exists(email):
            raise ConflictError("User already exists")

        now = self.clock()
        self._check_cooldown(email, now)

        self.otps.delete_for_email(email)

        otp = generate_otp(self.settings.otp_length)
        expires_at = now + timedelta(minutes=self.settings.otp_expire_minutes)
        self.otps.insert(email, otp, expires_at, now)
        logger.info("OTP issued for %s (expires %s)", email, expires_at.isoformat())

        self.mailer.send_otp(email, otp)

    def _check_cooldown(self, email: str, now: datetime) -> None:
        cooldown = self.settings.otp_resend_cooldown_seconds
        if cooldown <= 0:
            return
        latest = self.otps.get_latest(email)
        if not latest or not latest.get("created_at"):
            return
        elapsed = (now - latest["created_at"]).total_seconds()
        if elapsed < cooldown:
            wait = int(cooldown - elapsed) + 1
            raise TooManyRequestsError(f"Please wait {wait} seconds before requesting a new OTP")

    def register(
        self,
        email: Optional[str],
        password: Optional[str],
        role: Optional[str],
        user_otp: Optional[str]
    ) -> dict:
        """
        Verify the code and create the account.

        Returns:
            {"token": <JWT>, "user": <public account projection>}
        """
        if any(_blank(v) for v in (email, password, role, user_otp)):
            raise BadRequestError("All fields are required")

        if role not in ALLOWED_ROLES:
            raise BadRequestError("Invalid role")

        if self.settings.enforce_password_policy:
            problems = password_problems(password)
            if problems:
                raise BadRequestError("Password must contain " + ", ".join(problems))

        now = self.clock()
        if self.otps.find_valid(email, user_otp, now) is None:
            raise BadRequestError("Invalid or expired OTP")

        if self.accounts.exists(email):
            raise ConflictError("User already exists")

        try:
            account = self.accounts.insert(email, hash_password(password), role, now)
        except DuplicateKeyError:
            # Lost a race with a concurrent registration for the same email
            logger.info("Concurrent registration for %s rejected by unique index", email)
            raise ConflictError("User already exists")

        self.otps.delete_for_email(email)
        token = create_account_token(account)
        logger.info("Registered %s as %s", email, role)

        return {"token": token, "user": public_account(account)}
