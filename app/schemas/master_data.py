"""
Pydantic v2 schemas for the master-data list endpoints.

All read schemas enable ``from_attributes`` so routers can validate ORM
rows directly.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class EmployeeListItem(BaseModel):
    id: int
    nik: str
    name: str
    email: str | None = None
    phone: str | None = None
    status: bool

    model_config = ConfigDict(from_attributes=True)


class CompanyResponse(BaseModel):
    id: int
    code: str
    name: str
    status: bool

    model_config = ConfigDict(from_attributes=True)


class BranchResponse(BaseModel):
    id: int
    company_id: int
    code: str
    name: str
    status: bool

    model_config = ConfigDict(from_attributes=True)


class DivisionResponse(BaseModel):
    id: int
    branch_id: int | None = None
    code: str
    name: str
    status: bool

    model_config = ConfigDict(from_attributes=True)


class RoleResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    status: bool

    model_config = ConfigDict(from_attributes=True)


class AccessResponse(BaseModel):
    """Permission catalogue row (``MasterAccess``)."""

    id: int
    code: str
    name: str
    module: str | None = None
    status: bool

    model_config = ConfigDict(from_attributes=True)
