"""Pydantic schemas for registration, login and session claims."""
from __future__ import annotations
from typing import Optional, Union
from pydantic import BaseModel, Field

from journal.models.user import Role


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    verification_code: Optional[Union[str, int]] = Field(None, alias="verificationCode")

    model_config = {"populate_by_name": True}


class LoginResponse(BaseModel):
    token: str
    role: Role


class SuccessResponse(BaseModel):
    success: bool = True


class Claims(BaseModel):
    """Identity asserted by a verified session token."""

    id: int
    email: str
    role: Role
