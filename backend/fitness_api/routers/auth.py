"""
Authentication routes: register, login and current-user lookup.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
import logging

from .. import models, schemas
from ..auth import authenticate_user, get_current_user, register_user
from ..errors import StorageError
from ..repositories import UserRepository, get_user_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: schemas.RegisterRequest,
    users: UserRepository = Depends(get_user_repository)
):
    """
    Register a new user.

    - **name**, **email**, **password**: all required

    Returns a signed token and the public user record.
    """
    try:
        token, user = register_user(users, payload.name, payload.email, payload.password)
    except SQLAlchemyError:
        logger.exception("Register error")
        raise StorageError("Internal server error")

    return schemas.AuthResponse(token=token, user=schemas.PublicUser.model_validate(user))


@router.post("/login", response_model=schemas.AuthResponse)
def login(
    payload: schemas.LoginRequest,
    users: UserRepository = Depends(get_user_repository)
):
    """
    Login with email and password to get a token.
    """
    try:
        token, user = authenticate_user(users, payload.email, payload.password)
    except SQLAlchemyError:
        logger.exception("Login error")
        raise StorageError("Internal server error")

    return schemas.AuthResponse(token=token, user=schemas.PublicUser.model_validate(user))


@router.get("/me", response_model=schemas.UserResponse)
def get_current_user_info(current_user: models.User = Depends(get_current_user)):
    """
    Get current authenticated user's information.
    """
    return schemas.UserResponse(user=schemas.PublicUser.model_validate(current_user))
