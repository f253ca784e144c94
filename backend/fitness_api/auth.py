"""
Authentication: password hashing, JWT issuance and the register/login flow.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError

from . import models
from .config import settings
from .errors import AuthError, ConflictError, ValidationError
from .logging_config import mask_email
from .repositories import UserRepository, get_user_repository

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

INVALID_CREDENTIALS = "Invalid credentials."


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def create_access_token(user: models.User, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token carrying the user's id (as ``sub``) and email."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode = {"sub": str(user.id), "email": user.email, "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry; any failure is an AuthError."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise AuthError("Invalid or expired token.")
    if not payload.get("sub"):
        raise AuthError("Invalid token payload.")
    return payload


def register_user(
    users: UserRepository,
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
) -> Tuple[str, models.User]:
    """
    Create an account and return ``(token, user)``.

    Raises ValidationError when a field is missing and ConflictError when the
    email is already registered (exact match).
    """
    if not name or not email or not password:
        raise ValidationError("Name, email, and password are required.")

    if users.find_by_email(email):
        logger.info(f"Registration rejected, email already exists: {mask_email(email)}")
        raise ConflictError("User already exists with this email.")

    try:
        user = users.create(name=name, email=email, password_hash=get_password_hash(password))
    except IntegrityError:
        # lost a race against a concurrent registration with the same email
        raise ConflictError("User already exists with this email.")

    logger.info(f"User registered: id={user.id} email={mask_email(email)}")
    return create_access_token(user), user


def authenticate_user(
    users: UserRepository,
    email: Optional[str],
    password: Optional[str],
) -> Tuple[str, models.User]:
    """
    Check credentials and return ``(token, user)``.

    Unknown email and wrong password raise the same AuthError.
    """
    if not email or not password:
        raise ValidationError("Email and password are required.")

    user = users.find_by_email(email)
    if not user:
        logger.info(f"Login failed, unknown email: {mask_email(email)}")
        raise AuthError(INVALID_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        logger.info(f"Login failed, bad password for: {mask_email(email)}")
        raise AuthError(INVALID_CREDENTIALS)

    return create_access_token(user), user


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    users: UserRepository = Depends(get_user_repository),
) -> models.User:
    """Resolve the bearer token into the stored user."""
    if not token:
        raise AuthError("Not authenticated.")
    payload = decode_access_token(token)
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthError("Invalid token payload.")

    user = users.find_by_id(user_id)
    if user is None:
        raise AuthError("User no longer exists.")
    return user
