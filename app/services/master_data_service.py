"""
Master-data listing queries (employees, companies, branches, divisions,
roles, access codes).

Every list hides soft-deleted rows and supports the same pagination and
``q`` search over the entity's name (and code / NIK where it has one).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from app.models.branch import Branch
from app.models.company import Company
from app.models.division import Division
from app.models.employee import Employee
from app.models.master_access import MasterAccess
from app.models.role import Role
from app.schemas.common import PaginationParams


def _search(query: Query, q: str | None, *columns: Any) -> Query:
    if not q:
        return query
    term = f"%{q.lower()}%"
    return query.filter(or_(*(func.lower(col).like(term) for col in columns)))


def _page(query: Query, params: PaginationParams, *order_by: Any) -> tuple[list[Any], int]:
    total = query.count()
    rows = query.order_by(*order_by).offset(params.offset).limit(params.per_page).all()
    return rows, total


def list_employees(db: Session, params: PaginationParams) -> tuple[list[Employee], int]:
    query = db.query(Employee).filter(Employee.deleted_at.is_(None))
    query = _search(query, params.q, Employee.name, Employee.nik, Employee.email)
    return _page(query, params, Employee.name)


def list_companies(db: Session, params: PaginationParams) -> tuple[list[Company], int]:
    query = db.query(Company).filter(Company.deleted_at.is_(None))
    query = _search(query, params.q, Company.name, Company.code)
    return _page(query, params, Company.name)


def list_branches(
    db: Session, params: PaginationParams, company_id: int | None = None
) -> tuple[list[Branch], int]:
    query = db.query(Branch).filter(Branch.deleted_at.is_(None))
    if company_id is not None:
        query = query.filter(Branch.company_id == company_id)
    query = _search(query, params.q, Branch.name, Branch.code)
    return _page(query, params, Branch.name)


def list_divisions(
    db: Session, params: PaginationParams, branch_id: int | None = None
) -> tuple[list[Division], int]:
    query = db.query(Division).filter(Division.deleted_at.is_(None))
    if branch_id is not None:
        query = query.filter(Division.branch_id == branch_id)
    query = _search(query, params.q, Division.name, Division.code)
    return _page(query, params, Division.name)


def list_roles(db: Session, params: PaginationParams) -> tuple[list[Role], int]:
    query = db.query(Role).filter(Role.deleted_at.is_(None))
    query = _search(query, params.q, Role.name)
    return _page(query, params, Role.name)


def list_access(db: Session, params: PaginationParams) -> tuple[list[MasterAccess], int]:
    query = db.query(MasterAccess).filter(MasterAccess.deleted_at.is_(None))
    query = _search(query, params.q, MasterAccess.name, MasterAccess.code)
    return _page(query, params, MasterAccess.module, MasterAccess.code)
