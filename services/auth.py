from dataclasses import dataclass
from typing import Optional

import jwt
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config.environment import secret
from errors import DuplicateKey, Unauthorized
from models.user import UserModel


@dataclass(frozen=True)
class AuthContext:
    """Who is making the request: anonymous (``user_id is None``) or a known user."""

    user_id: Optional[int] = None

    @classmethod
    def anonymous(cls):
        return cls()

    @classmethod
    def authenticated(cls, user_id: int):
        return cls(user_id=user_id)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


def decode_token(token: str) -> int:
    """Return the user id carried by ``token`` or raise Unauthorized."""
    try:
        payload = jwt.decode(token, secret, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired")
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid token")

    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise Unauthorized("Invalid token")


def register_user(db: Session, name: str, email: str, password: str) -> UserModel:
    email = email.lower()
    if db.query(UserModel).filter(UserModel.email == email).first():
        raise DuplicateKey("email already exists")

    user = UserModel(name=name, email=email)
    user.set_password(password)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateKey("email already exists")
    db.refresh(user)

    logger.info(f"New user registered: id={user.id}")
    return user


def authenticate_user(db: Session, email: str, password: str) -> UserModel:
    user = db.query(UserModel).filter(UserModel.email == email.lower()).first()
    if not user or not user.verify_password(password):
        raise Unauthorized("Invalid email or password")
    return user
