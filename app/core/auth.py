"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt (cost 10 by default)
- JWT token creation/verification
- FastAPI dependency resolving the bearer token to an account
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pymongo.database import Database

from app.core.config import get_settings
from app.core.errors import NotFoundError, UnauthorizedError
from app.db.mongodb import get_mongo_db
from app.services.mongo_service import AccountService, to_object_id

settings = get_settings()

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds
)

# Bearer token extractor. auto_error is off so a missing header is a 401
# rendered by our own handler.
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_account_token(account: dict) -> str:
    """Session credential for an account: {sub: account id, role}."""
    return create_access_token(data={"sub": str(account["_id"]), "role": account["role"]})


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token (signature and expiry)."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Database = Depends(get_mongo_db)
) -> dict:
    """
    FastAPI dependency - Get current authenticated account document.

    Usage:
        @router.get("/protected")
        async def route(account: dict = Depends(get_current_account)):
            return account["email"]
    """
    if credentials is None:
        raise UnauthorizedError("Authorization token missing")

    payload = decode_token(credentials.credentials)
    if not payload:
        raise UnauthorizedError()

    account_id = to_object_id(payload.get("sub"))
    if account_id is None:
        raise UnauthorizedError()

    account = AccountService(db).get_by_id(account_id)
    if not account:
        raise NotFoundError("User not found")

    if not account.get("is_active", True):
        raise UnauthorizedError("Account deactivated")

    return account
