"""
User Models
===========
Pydantic models for account requests and responses.

Author: Potbot Team
"""

from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """
    Create an account.

    Example Request:
        POST /api/register
        {"email": "ada@example.com", "password": "hunter22", "username": "ada"}
    """
    email: str = Field("", description="Email address, used for notifications")
    password: str = Field("", description="Plain password, hashed before storage")
    username: Optional[str] = Field(None, description="Login name")


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class UserResponse(BaseModel):
    """The logged-in user, as returned by register, login and /api/me."""
    user_id: int = Field(..., description="Account ID")
    email: str = Field(..., description="Email address")
    username: str = Field("", description="Login name (empty if never set)")
