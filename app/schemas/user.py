"""
Pydantic v2 schemas for the user listing endpoint.

The list row is flattened from ``User`` + ``Employee`` + ``Role`` so the
frontend table needs no second request.  Sensitive fields
(``password``) are never part of any user schema.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserListItem(BaseModel):
    """One row of ``GET /api/v1/users``.

    Attributes:
        id: User primary key.
        nik: Employee NIK (login identifier).
        name: Employee full name.
        email: Employee email address.
        role: Role name.
        status: Whether the account is active.
        last_login_at: Last successful login, if any.
    """

    id: int
    nik: str
    name: str
    email: str | None = None
    role: str | None = None
    status: bool
    last_login_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
