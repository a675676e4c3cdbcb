"""
Authentication Pydantic schemas.

Defines request and response schemas for authentication endpoints.
"""

from pydantic import BaseModel, Field
from typing import Optional


class UserLogin(BaseModel):
    """
    Schema for user login.

    Used by POST /api/auth/login. Fields are plain strings so that a blank
    or malformed email fails with the generic credentials error instead of
    a validation error.
    """
    email: str = Field(default="", description="Email address (any case)")
    password: str = Field(default="", description="Password")


class UserRegister(BaseModel):
    """
    Schema for self-service registration.

    Used by POST /api/auth/register. Missing fields are reported as 400 by
    the user service.
    """
    email: Optional[str] = Field(default=None, description="User email address")
    password: Optional[str] = Field(default=None, description="Password (min 8 characters)")
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    position: Optional[str] = None


class TokenResponse(BaseModel):
    """
    Schema for JWT token response.

    Returned by successful login/register operations.
    """
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user_id: int = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    role: Optional[str] = Field(default=None, description="Role name")
