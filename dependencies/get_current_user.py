from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from sqlalchemy.orm import Session

from database import get_db
from errors import Unauthorized
from models.user import UserModel
from services.auth import AuthContext, decode_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> UserModel:
    """Resolve the bearer token to a user, or fail with 401."""
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Not authorized, no token")

    user_id = decode_token(credentials.credentials)

    user = db.query(UserModel).filter(UserModel.id == user_id).first()
    if not user:
        raise Unauthorized("User not found")

    return user


def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthContext:
    """
    Optional authentication for public endpoints.

    A missing token, or one that fails verification, yields an anonymous
    context instead of an error.
    """
    if credentials is None or not credentials.credentials:
        return AuthContext.anonymous()

    try:
        user_id = decode_token(credentials.credentials)
    except Unauthorized as error:
        logger.debug(f"Ignoring bearer token on public endpoint: {error.message}")
        return AuthContext.anonymous()

    if not db.query(UserModel.id).filter(UserModel.id == user_id).first():
        logger.debug(f"Ignoring token for unknown user {user_id}")
        return AuthContext.anonymous()

    return AuthContext.authenticated(user_id)
