"""
User listing queries.

Soft-deleted users are never listed.  The optional ``q`` term matches the
employee's name, NIK or email case-insensitively.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.models.employee import Employee
from app.models.role import Role
from app.models.user import User
from app.schemas.common import PaginationParams
from app.schemas.user import UserListItem

logger = logging.getLogger(__name__)


def list_users(db: Session, params: PaginationParams) -> tuple[list[UserListItem], int]:
    """Return one page of users (newest first) and the total match count."""
    query = (
        db.query(
            User.id,
            Employee.nik,
            Employee.name,
            Employee.email,
            Role.name.label("role"),
            User.status,
            User.last_login_at,
        )
        .join(Employee, User.employee_id == Employee.id)
        .outerjoin(Role, User.role_id == Role.id)
        .filter(User.deleted_at.is_(None))
    )
    if params.q:
        term = f"%{params.q.lower()}%"
        query = query.filter(
            or_(
                func.lower(Employee.name).like(term),
                Employee.nik.like(term),
                func.lower(Employee.email).like(term),
            )
        )

    total = query.count()
    rows = query.order_by(User.id.desc()).offset(params.offset).limit(params.per_page).all()
    logger.debug("list_users: q=%r total=%d page=%d", params.q, total, params.page)
    return [UserListItem.model_validate(row) for row in rows], total
