from pydantic import EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from .common import CamelModel


class UserSignup(CamelModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value):
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be between 2 and 50 characters")
        return value


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthorSchema(CamelModel):
    """Public view of a user attached to products and posts"""
    id: int
    name: str
    avatar: Optional[str] = None


class UserResponseSchema(CamelModel):
    id: int
    name: str
    email: str
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None


class UserToken(CamelModel):
    success: bool = True
    message: str
    token: str
    user: UserResponseSchema


class CurrentUser(CamelModel):
    success: bool = True
    user: UserResponseSchema
