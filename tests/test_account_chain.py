"""Account-chain validation: every link must exist, be active and not deleted."""

from datetime import datetime

import pytest

from app.services.account_service import (
    ViolationReason,
    build_chain,
    ensure_usable,
    get_latest_work_detail,
    load_chain_by_nik,
    load_chain_by_user_id,
)
from app.models import EmployeeWorkDetail
from app.utils.errors import AppError, ErrorKind

STATUS_LINKS = ["user", "employee", "company", "branch", "division", "sub_division", "position", "role"]


def test_complete_chain_is_usable(db_session, make_account):
    account = make_account()
    chain = load_chain_by_nik(db_session, account.nik)
    assert chain.is_usable
    assert ensure_usable(chain) is chain
    assert chain.company.id == account.company.id
    assert chain.role.id == account.role.id


def test_unknown_nik_yields_empty_chain(db_session):
    chain = load_chain_by_nik(db_session, "9999999999999999")
    assert chain.user is None
    violation = chain.first_violation()
    assert violation.link == "user"
    assert violation.reason is ViolationReason.MISSING


@pytest.mark.parametrize("link", STATUS_LINKS)
def test_inactive_link_rejects(db_session, make_account, link):
    account = make_account()
    getattr(account, link).status = False
    db_session.commit()

    chain = load_chain_by_user_id(db_session, account.user.id)
    violation = chain.first_violation()
    assert violation.link == link
    assert violation.reason is ViolationReason.INACTIVE
    assert violation.message.endswith("tidak aktif")


@pytest.mark.parametrize("link", STATUS_LINKS + ["work_detail"])
def test_soft_deleted_link_rejects(db_session, make_account, link):
    account = make_account()
    getattr(account, link).deleted_at = datetime(2025, 1, 1)
    db_session.commit()

    chain = load_chain_by_user_id(db_session, account.user.id)
    violation = chain.first_violation()
    assert violation.link == link
    assert violation.reason is ViolationReason.DELETED
    with pytest.raises(AppError) as exc_info:
        ensure_usable(chain)
    assert exc_info.value.kind is ErrorKind.UNAUTHORIZED
    assert exc_info.value.message.endswith("telah dihapus")


def test_sub_division_is_optional(db_session, make_account):
    account = make_account(with_sub_division=False)
    chain = load_chain_by_user_id(db_session, account.user.id)
    assert chain.sub_division is None
    assert chain.is_usable


def test_missing_work_detail_rejects(db_session, make_account):
    account = make_account()
    account.work_detail.is_latest = False
    db_session.commit()

    violation = load_chain_by_user_id(db_session, account.user.id).first_violation()
    assert violation.tag == "work_detail_missing"


def test_latest_work_detail_prefers_highest_id(db_session, make_account):
    account = make_account()
    newer = EmployeeWorkDetail(
        employee_id=account.employee.id,
        company_id=account.company.id,
        branch_id=account.branch.id,
        division_id=account.division.id,
        position_id=account.position.id,
        is_latest=True,
    )
    db_session.add(newer)
    db_session.commit()

    assert get_latest_work_detail(db_session, account.employee.id).id == newer.id


def test_build_chain_without_user():
    chain = build_chain(None, None)
    assert not chain.is_usable
