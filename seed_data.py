"""Seed data script for the HR Portal database.

Populates the database with a small demo organisation, the access-code
catalogue, two roles and two login accounts.  The script is idempotent:
it checks for existing records before inserting.

Usage (from the repository root, after ``alembic upgrade head``):
    python seed_data.py

Demo accounts (password ``Password123!``):
    3201010101010001 — Administrator (all access codes)
    3201010101010002 — Staff (``employee.read`` only)
"""

from __future__ import annotations

from datetime import date

from app.database import SessionLocal
from app.models import (
    Branch,
    Company,
    Division,
    Employee,
    EmployeeWorkDetail,
    MasterAccess,
    Position,
    Role,
    RoleAccess,
    SubDivision,
    User,
)
from app.utils.constants import ACCESS_CATALOGUE, ACCESS_EMPLOYEE_READ
from app.utils.security import hash_password

DEMO_PASSWORD = "Password123!"


def _get_or_create(session, model, lookup: dict, **values):
    """Return the row matching *lookup*, inserting it with *values* if absent."""
    instance = session.query(model).filter_by(**lookup).first()
    if instance is not None:
        print(f"  [SKIP] {model.__name__} {lookup}")
        return instance
    instance = model(**lookup, **values)
    session.add(instance)
    session.flush()
    print(f"  [OK]   {model.__name__} {lookup}")
    return instance


# ---------------------------------------------------------------------------
# Seed functions
# ---------------------------------------------------------------------------


def seed_access(session) -> list[MasterAccess]:
    return [
        _get_or_create(session, MasterAccess, {"code": code}, name=name, module=module)
        for code, name, module in ACCESS_CATALOGUE
    ]


def seed_roles(session, catalogue: list[MasterAccess]) -> dict[str, Role]:
    admin = _get_or_create(
        session, Role, {"name": "Administrator"}, description="Akses penuh"
    )
    staff = _get_or_create(
        session, Role, {"name": "Staff"}, description="Lihat data karyawan"
    )
    grants = [(admin, access) for access in catalogue]
    grants += [(staff, access) for access in catalogue if access.code == ACCESS_EMPLOYEE_READ]
    for role, access in grants:
        _get_or_create(session, RoleAccess, {"role_id": role.id, "access_id": access.id})
    return {"admin": admin, "staff": staff}


def seed_organisation(session) -> dict:
    company = _get_or_create(session, Company, {"code": "HRP"}, name="PT HR Portal Indonesia")
    branch = _get_or_create(
        session, Branch, {"code": "JKT"}, company_id=company.id, name="Kantor Pusat Jakarta"
    )
    division = _get_or_create(
        session, Division, {"code": "HRD"}, branch_id=branch.id, name="Human Resources"
    )
    sub_division = _get_or_create(
        session, SubDivision, {"code": "HRD-REC"}, division_id=division.id, name="Rekrutmen"
    )
    manager = _get_or_create(session, Position, {"code": "MGR"}, name="Manager")
    officer = _get_or_create(session, Position, {"code": "OFC"}, name="Officer")
    return {
        "company": company,
        "branch": branch,
        "division": division,
        "sub_division": sub_division,
        "positions": {"manager": manager, "officer": officer},
    }


def seed_accounts(session, org: dict, roles: dict[str, Role]) -> None:
    people = [
        ("3201010101010001", "Admin HR Portal", "admin@hrportal.local", "manager", "admin"),
        ("3201010101010002", "Staff HR Portal", "staff@hrportal.local", "officer", "staff"),
    ]
    for nik, name, email, position_key, role_key in people:
        employee = _get_or_create(session, Employee, {"nik": nik}, name=name, email=email)
        has_detail = (
            session.query(EmployeeWorkDetail)
            .filter_by(employee_id=employee.id, is_latest=True)
            .first()
        )
        if has_detail is None:
            session.add(
                EmployeeWorkDetail(
                    employee_id=employee.id,
                    company_id=org["company"].id,
                    branch_id=org["branch"].id,
                    division_id=org["division"].id,
                    sub_division_id=org["sub_division"].id,
                    position_id=org["positions"][position_key].id,
                    start_date=date(2025, 1, 1),
                    is_latest=True,
                )
            )
        _get_or_create(
            session,
            User,
            {"employee_id": employee.id},
            role_id=roles[role_key].id,
            password=hash_password(DEMO_PASSWORD),
        )


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the complete seed process within a single database transaction."""
    print("=" * 60)
    print("  HR Portal — Seed Data Script")
    print("=" * 60)

    session = SessionLocal()
    try:
        print("\n[1/4] Master access...")
        catalogue = seed_access(session)

        print("\n[2/4] Roles...")
        roles = seed_roles(session, catalogue)

        print("\n[3/4] Organisation...")
        org = seed_organisation(session)

        print("\n[4/4] Employees + users...")
        seed_accounts(session, org, roles)

        session.commit()
        print("\n" + "=" * 60)
        print(f"  Seed selesai. Password demo: {DEMO_PASSWORD}")
        print("=" * 60)

    except Exception as exc:
        session.rollback()
        print("\n[ERROR] Seed gagal, rollback dilakukan.")
        print(f"  Detail: {exc}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
