"""
Authentication schemas.

Accounts are identified by email; the email is lower-cased on the way in so
login and collaborator matching see the same value.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def _normalize_email(value: str) -> str:
    return value.strip().lower()


class LoginRequest(BaseModel):
    """User login request schema."""

    email: EmailStr = Field(description="Account email")
    password: str = Field(min_length=1, max_length=128, description="User password")

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return _normalize_email(v)

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "ana@example.com", "password": "securepassword123"}}
    )


class RegisterRequest(BaseModel):
    """User registration request schema."""

    name: str = Field(min_length=2, max_length=100, description="Display name")
    email: EmailStr = Field(description="Account email, must be unique")
    password: str = Field(min_length=8, max_length=128, description="User password")

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return _normalize_email(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must have at least 2 characters")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Ana Souza",
                "email": "ana@example.com",
                "password": "securepassword123",
            }
        }
    )


class ProfileUpdateRequest(BaseModel):
    """Profile update; only the display name can change here.

    Email and account status are not fields of this schema, so values sent
    for them are ignored.
    """

    name: str = Field(min_length=2, max_length=100, description="Display name")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must have at least 2 characters")
        return v


class UserResponse(BaseModel):
    """User information response schema."""

    id: uuid.UUID = Field(description="User unique identifier")
    email: str = Field(description="Account email")
    name: str = Field(description="Display name")
    is_active: bool = Field(description="Whether user account is active")
    created_at: datetime = Field(description="Account creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """Token pair response schema."""

    access_token: str = Field(description="JWT access token")
    refresh_token: str = Field(description="Opaque refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(description="Access token lifetime in seconds")
    user: UserResponse = Field(description="User information")


class RefreshTokenRequest(BaseModel):
    """Refresh token request schema."""

    refresh_token: str = Field(min_length=1, description="Refresh token from login")
