"""
Account chain loading and status validation.

A login account is only usable while every record it depends on is live:
the user, its employee, the employee's current work detail, that
assignment's division / sub-division / branch / company / position, and
the user's role.  :class:`AccountChain` holds those records after one
load; :meth:`AccountChain.first_violation` walks them in a fixed order
and reports the first broken link as a :class:`ChainViolation`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from sqlalchemy.orm import Session

from app.models.branch import Branch
from app.models.company import Company
from app.models.division import Division
from app.models.employee import Employee
from app.models.employee_work_detail import EmployeeWorkDetail
from app.models.position import Position
from app.models.role import Role
from app.models.sub_division import SubDivision
from app.models.user import User
from app.utils.errors import AppError, ErrorKind

logger = logging.getLogger(__name__)


class ViolationReason(str, Enum):
    MISSING = "missing"
    INACTIVE = "inactive"
    DELETED = "deleted"


_REASON_SUFFIX = {
    ViolationReason.MISSING: "tidak ditemukan",
    ViolationReason.INACTIVE: "tidak aktif",
    ViolationReason.DELETED: "telah dihapus",
}


@dataclass(frozen=True)
class ChainLink:
    """One record in the account chain.

    Attributes:
        name: Tag used in violations and logs, e.g. ``"division"``.
        label: User-facing noun for messages.
        getter: Extracts the record from an :class:`AccountChain`.
        optional: When true a missing record is not a violation.
        has_status: Whether the record carries a ``status`` flag.
    """

    name: str
    label: str
    getter: Callable[["AccountChain"], Any]
    optional: bool = False
    has_status: bool = True


@dataclass(frozen=True)
class ChainViolation:
    link: str
    reason: ViolationReason
    message: str

    @property
    def tag(self) -> str:
        return f"{self.link}_{self.reason.value}"


@dataclass
class AccountChain:
    user: User | None
    employee: Employee | None = None
    work_detail: EmployeeWorkDetail | None = None
    division: Division | None = None
    sub_division: SubDivision | None = None
    branch: Branch | None = None
    company: Company | None = None
    position: Position | None = None
    role: Role | None = None

    def first_violation(self) -> ChainViolation | None:
        """Return the first broken link, or ``None`` if the account is usable."""
        for link in CHAIN_LINKS:
            record = link.getter(self)
            if record is None:
                if link.optional:
                    continue
                return _violation(link, ViolationReason.MISSING)
            if link.has_status and not record.status:
                return _violation(link, ViolationReason.INACTIVE)
            if record.deleted_at is not None:
                return _violation(link, ViolationReason.DELETED)
        return None

    @property
    def is_usable(self) -> bool:
        return self.first_violation() is None


# Validation order: the account itself first, then its organisation top-down
CHAIN_LINKS: tuple[ChainLink, ...] = (
    ChainLink("user", "Akun pengguna", lambda c: c.user),
    ChainLink("employee", "Data karyawan", lambda c: c.employee),
    ChainLink("work_detail", "Penempatan kerja", lambda c: c.work_detail, has_status=False),
    ChainLink("company", "Perusahaan", lambda c: c.company),
    ChainLink("branch", "Cabang", lambda c: c.branch),
    ChainLink("division", "Divisi", lambda c: c.division),
    ChainLink("sub_division", "Sub divisi", lambda c: c.sub_division, optional=True),
    ChainLink("position", "Jabatan", lambda c: c.position),
    ChainLink("role", "Role", lambda c: c.role),
)


def _violation(link: ChainLink, reason: ViolationReason) -> ChainViolation:
    return ChainViolation(
        link=link.name,
        reason=reason,
        message=f"{link.label} {_REASON_SUFFIX[reason]}",
    )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def get_latest_work_detail(db: Session, employee_id: int) -> EmployeeWorkDetail | None:
    """Return the current assignment; the highest id wins if several are flagged."""
    return (
        db.query(EmployeeWorkDetail)
        .filter(
            EmployeeWorkDetail.employee_id == employee_id,
            EmployeeWorkDetail.is_latest.is_(True),
        )
        .order_by(EmployeeWorkDetail.id.desc())
        .first()
    )


def build_chain(db: Session, user: User | None) -> AccountChain:
    if user is None:
        return AccountChain(user=None)

    employee = user.employee
    work_detail = get_latest_work_detail(db, employee.id) if employee is not None else None

    chain = AccountChain(user=user, employee=employee, work_detail=work_detail, role=user.role)
    if work_detail is not None:
        chain.company = work_detail.company
        chain.branch = work_detail.branch
        chain.division = work_detail.division
        chain.sub_division = work_detail.sub_division
        chain.position = work_detail.position
    return chain


def load_chain_by_user_id(db: Session, user_id: int) -> AccountChain:
    user = db.query(User).filter(User.id == user_id).first()
    return build_chain(db, user)


def load_chain_by_nik(db: Session, nik: str) -> AccountChain:
    user = (
        db.query(User)
        .join(Employee, User.employee_id == Employee.id)
        .filter(Employee.nik == nik)
        .first()
    )
    return build_chain(db, user)


def ensure_usable(chain: AccountChain) -> AccountChain:
    """Raise ``UNAUTHORIZED`` with the violation message if any link is broken.

    Returns:
        The same chain, for call chaining.
    """
    violation = chain.first_violation()
    if violation is not None:
        user_id = chain.user.id if chain.user is not None else None
        logger.info("Account chain rejected user_id=%s reason=%s", user_id, violation.tag)
        raise AppError(ErrorKind.UNAUTHORIZED, violation.message)
    return chain
