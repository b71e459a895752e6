"""
Master data router.

Mounts under ``/api/v1`` (prefix set in ``main.py``).

Paginated, read-only lists of the organisation catalogue.  Soft-deleted
rows are hidden; inactive rows are listed with ``status = false`` so the
admin screens can re-activate them.

Endpoints
---------
GET /employees  — Employees (``employee.read``).
GET /companies  — Companies (``master.read``).
GET /branches   — Branches, optionally filtered by ``company_id`` (``master.read``).
GET /divisions  — Divisions, optionally filtered by ``branch_id`` (``master.read``).
GET /roles      — Roles (``role.read``).
GET /access     — Access-code catalogue (``role.read``).
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.common import (
    ApiResponse,
    PaginationParams,
    paginated_response,
    pagination_params,
)
from app.schemas.master_data import (
    AccessResponse,
    BranchResponse,
    CompanyResponse,
    DivisionResponse,
    EmployeeListItem,
    RoleResponse,
)
from app.services import master_data_service
from app.services.auth_service import require_access
from app.utils.constants import (
    ACCESS_EMPLOYEE_READ,
    ACCESS_MASTER_READ,
    ACCESS_ROLE_READ,
)

router = APIRouter(tags=["Master Data"])

Pagination = Annotated[PaginationParams, Depends(pagination_params)]
DbSession = Annotated[Session, Depends(get_db)]


# ---------------------------------------------------------------------------
# GET /employees
# ---------------------------------------------------------------------------


@router.get(
    "/employees",
    response_model=ApiResponse[list[EmployeeListItem]],
    summary="Daftar karyawan",
)
def get_employees(
    params: Pagination,
    db: DbSession,
    _current_user: Annotated[CurrentUser, Depends(require_access(ACCESS_EMPLOYEE_READ))],
):
    rows, total = master_data_service.list_employees(db, params)
    return paginated_response(
        [EmployeeListItem.model_validate(row) for row in rows], total, params
    )


# ---------------------------------------------------------------------------
# GET /companies  ·  /branches  ·  /divisions
# ---------------------------------------------------------------------------


@router.get(
    "/companies",
    response_model=ApiResponse[list[CompanyResponse]],
    summary="Daftar perusahaan",
)
def get_companies(
    params: Pagination,
    db: DbSession,
    _current_user: Annotated[CurrentUser, Depends(require_access(ACCESS_MASTER_READ))],
):
    rows, total = master_data_service.list_companies(db, params)
    return paginated_response(
        [CompanyResponse.model_validate(row) for row in rows], total, params
    )


@router.get(
    "/branches",
    response_model=ApiResponse[list[BranchResponse]],
    summary="Daftar cabang",
)
def get_branches(
    params: Pagination,
    db: DbSession,
    _current_user: Annotated[CurrentUser, Depends(require_access(ACCESS_MASTER_READ))],
    company_id: Annotated[
        int | None,
        Query(description="Filter berdasarkan ID perusahaan.", ge=1),
    ] = None,
):
    rows, total = master_data_service.list_branches(db, params, company_id=company_id)
    return paginated_response(
        [BranchResponse.model_validate(row) for row in rows], total, params
    )


@router.get(
    "/divisions",
    response_model=ApiResponse[list[DivisionResponse]],
    summary="Daftar divisi",
)
def get_divisions(
    params: Pagination,
    db: DbSession,
    _current_user: Annotated[CurrentUser, Depends(require_access(ACCESS_MASTER_READ))],
    branch_id: Annotated[
        int | None,
        Query(description="Filter berdasarkan ID cabang.", ge=1),
    ] = None,
):
    rows, total = master_data_service.list_divisions(db, params, branch_id=branch_id)
    return paginated_response(
        [DivisionResponse.model_validate(row) for row in rows], total, params
    )


# ---------------------------------------------------------------------------
# GET /roles  ·  /access
# ---------------------------------------------------------------------------


@router.get(
    "/roles",
    response_model=ApiResponse[list[RoleResponse]],
    summary="Daftar role",
)
def get_roles(
    params: Pagination,
    db: DbSession,
    _current_user: Annotated[CurrentUser, Depends(require_access(ACCESS_ROLE_READ))],
):
    rows, total = master_data_service.list_roles(db, params)
    return paginated_response(
        [RoleResponse.model_validate(row) for row in rows], total, params
    )


@router.get(
    "/access",
    response_model=ApiResponse[list[AccessResponse]],
    summary="Katalog hak akses",
)
def get_access(
    params: Pagination,
    db: DbSession,
    _current_user: Annotated[CurrentUser, Depends(require_access(ACCESS_ROLE_READ))],
):
    rows, total = master_data_service.list_access(db, params)
    return paginated_response(
        [AccessResponse.model_validate(row) for row in rows], total, params
    )
