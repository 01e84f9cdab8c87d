"""
Puff Backend: Account Schemas
=============================

What:  Request/response models for sign-up, login and the current user.
How:   Emails are trimmed and lower-cased, then checked by EmailStr, so
       "Me@Example.com" and "me@example.com" are the same account and
       "bob@@example.com" never becomes one.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator


def _normalize_email(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


class SignUpRequest(BaseModel):
    email: EmailStr = Field(description="Login email")
    password: str = Field(min_length=6, max_length=128, description="At least 6 characters")
    name: str = Field(min_length=1, max_length=100, description="Display name")

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        name = v.strip()
        if not name:
            raise ValueError("Name cannot be empty")
        return name


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


class UserResponse(BaseModel):
    id: uuid.UUID
    email: str
    name: str
    is_pro: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    """
    Returned by signup and login.

    The client sends `access_token` back as `Authorization: Bearer <token>`
    until `expires_at`, then signs in again.
    """
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserResponse
