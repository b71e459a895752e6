"""
Role → access-code resolution.

Only access codes that are active and not soft-deleted count, whether
they are being checked by ``require_access`` or listed on the profile.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.models.master_access import MasterAccess
from app.models.role_access import RoleAccess
from app.schemas.auth import AccessItem


def _live_access():
    return (MasterAccess.status.is_(True), MasterAccess.deleted_at.is_(None))


def get_role_access_codes(db: Session, role_id: int) -> set[str]:
    """Return the set of live access codes granted to *role_id*."""
    rows = (
        db.query(MasterAccess.code)
        .join(RoleAccess, RoleAccess.access_id == MasterAccess.id)
        .filter(RoleAccess.role_id == role_id, *_live_access())
        .all()
    )
    return {code for (code,) in rows}


def has_any_access(granted: set[str], required: set[str]) -> bool:
    """Any-match check: one overlapping code is enough."""
    return bool(granted & required)


def list_access_with_flags(db: Session, role_id: int) -> list[AccessItem]:
    """Return the full live catalogue, each entry flagged if the role holds it.

    Ordered by module then code so the frontend can group menu entries.
    """
    granted = get_role_access_codes(db, role_id)
    catalogue = (
        db.query(MasterAccess)
        .filter(*_live_access())
        .order_by(MasterAccess.module, MasterAccess.code)
        .all()
    )
    return [
        AccessItem(
            code=access.code,
            name=access.name,
            module=access.module,
            assigned=access.code in granted,
        )
        for access in catalogue
    ]
