"""
Pydantic v2 schemas for the authentication endpoints.

Covers the login and account-request payloads, the profile returned by
login and ``GET /auth/me``, and the sanitised ``CurrentUser`` context
that the authentication dependency attaches to each request.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils.constants import NIK_LENGTH


class NikPayload(BaseModel):
    """Base for payloads identified by NIK; trims and length-checks it."""

    nik: str = Field(..., description="NIK 16 digit")

    @field_validator("nik")
    @classmethod
    def validate_nik(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("NIK wajib tidak boleh kosong")
        if len(value) != NIK_LENGTH:
            raise ValueError(f"NIK harus terdiri dari {NIK_LENGTH} digit")
        return value


class LoginRequest(NikPayload):
    """Payload accepted by ``POST /auth/login``.

    Attributes:
        nik: 16-digit national identity number.
        password: Plain-text password (transmitted over HTTPS only).
        remember_me: Drop the absolute session expiry and keep a
                     persistent refresh cookie.
    """

    password: str = Field(..., description="Kata sandi (hanya melalui HTTPS)")
    remember_me: bool = Field(default=False, description="Ingat saya")

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("Kata sandi tidak boleh kosong")
        return value

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "nik": "3201010101010001",
                "password": "Password123!",
                "remember_me": False,
            }
        }
    )


class ForgotPasswordRequest(NikPayload):
    """Payload accepted by ``POST /auth/forgot-password``."""


class BlockUserRequest(NikPayload):
    """Payload accepted by ``POST /auth/block-user``.

    Attributes:
        nik: Account to block.
        reason: Optional explanation shown to the approving administrator.
    """

    reason: str | None = Field(default=None, max_length=500)


class AccessItem(BaseModel):
    """One entry of the permission catalogue, flagged for the caller's role."""

    code: str
    name: str
    module: str | None = None
    assigned: bool


class CurrentUser(BaseModel):
    """Sanitised identity of the authenticated caller.

    Never carries the password hash or token material.
    """

    id: int
    employee_id: int
    nik: str
    name: str
    email: str | None = None
    role_id: int
    role_name: str
    company: str | None = None
    branch: str | None = None
    division: str | None = None
    sub_division: str | None = None
    position: str | None = None
    picture: str | None = None


class ProfileResponse(BaseModel):
    """Profile returned by login and ``GET /auth/me``.

    ``picture_url`` is a presigned URL valid for ``SIGNED_URL_EXPIRES``
    seconds, or ``None`` when the employee has no picture.
    """

    user: CurrentUser
    picture_url: str | None = None
    access: list[AccessItem] = Field(default_factory=list)
    last_login_at: datetime | None = None


class ApprovalResponse(BaseModel):
    id: int
    type: Literal["forgot_password", "block_user"]
    status: Literal["pending", "approved", "rejected"]
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CsrfTokenResponse(BaseModel):
    csrf_token: str
