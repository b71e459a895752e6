import itertools
import math
import os
import tempfile
import time
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

# Configure the app before anything imports app.config / app.database
_test_tmp_dir = tempfile.mkdtemp(prefix="hr_portal_test_")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_test_tmp_dir) / 'test.db'}"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only-do-not-use-in-production"
os.environ["APP_ENV"] = "local"
os.environ["CSRF_ENABLED"] = "false"
# Disabled by default; rate-limit tests switch it on
os.environ["RATE_LIMIT_MAX"] = "0"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import app.models  # noqa: E402,F401
from app.cache import get_cache  # noqa: E402
from app.database import Base, SessionLocal, engine  # noqa: E402
from app.main import app as fastapi_app  # noqa: E402
from app.models import (  # noqa: E402
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
from app.services.storage import ObjectStorage, get_storage  # noqa: E402
from app.utils.constants import ACCESS_CATALOGUE  # noqa: E402
from app.utils.security import hash_password  # noqa: E402

PASSWORD = "Password123!"


class FakeClock:
    """Manually advanced clock shared by the cache double and the limiter."""

    def __init__(self, start: float | None = None):
        self.now = start if start is not None else time.time()

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MemoryCache:
    """In-process stand-in for ``RedisCache`` with the same method surface.

    TTLs follow Redis semantics: ``ttl`` returns -2 for a missing key and
    -1 for a key without expiry.
    """

    def __init__(self, clock=time.time):
        self.clock = clock
        self.data: dict[str, tuple[object, float | None]] = {}

    def _alive(self, key):
        entry = self.data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self.clock():
            del self.data[key]
            return None
        return entry

    def ping(self) -> bool:
        return True

    def get_json(self, key):
        entry = self._alive(key)
        return None if entry is None else entry[0]

    def set_json(self, key, value, ttl_seconds):
        self.data[key] = (value, self.clock() + max(1, int(ttl_seconds)))

    def delete(self, key):
        self.data.pop(key, None)

    def expire(self, key, ttl_seconds):
        entry = self._alive(key)
        if entry is None:
            return False
        self.data[key] = (entry[0], self.clock() + max(1, int(ttl_seconds)))
        return True

    def ttl(self, key):
        entry = self._alive(key)
        if entry is None:
            return -2
        if entry[1] is None:
            return -1
        return math.ceil(entry[1] - self.clock())

    def hit(self, key, window_seconds):
        entry = self._alive(key)
        if entry is None:
            entry = (0, self.clock() + window_seconds)
        count = int(entry[0]) + 1
        self.data[key] = (count, entry[1])
        return count, self.ttl(key)


# ---------------------------------------------------------------------------
# Infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache():
    return MemoryCache()


@pytest.fixture
def s3_client():
    client = MagicMock()
    client.generate_presigned_url.side_effect = (
        lambda op, Params, ExpiresIn: f"https://files.test/{Params['Key']}?expires={ExpiresIn}"
    )
    return client


@pytest.fixture
def storage(s3_client):
    return ObjectStorage(s3_client, "hr-portal-test", url_expires=3600)


@pytest.fixture
def client(cache, storage):
    fastapi_app.dependency_overrides[get_cache] = lambda: cache
    fastapi_app.dependency_overrides[get_storage] = lambda: storage
    # Not used as a context manager: the startup Redis ping is skipped
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Data factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_account(db_session):
    """Factory building a user with a complete organisation chain.

    Returns a namespace exposing every record of the chain so tests can
    deactivate or soft-delete individual links.
    """
    counter = itertools.count(1)

    def _access(code):
        access = db_session.query(MasterAccess).filter_by(code=code).first()
        if access is None:
            name, module = next(
                ((n, m) for c, n, m in ACCESS_CATALOGUE if c == code), (code, "TEST")
            )
            access = MasterAccess(code=code, name=name, module=module)
            db_session.add(access)
            db_session.flush()
        return access

    def _make(
        nik=None,
        password=PASSWORD,
        access=(),
        with_sub_division=True,
        picture=None,
        name=None,
    ):
        n = next(counter)
        nik = nik or f"32010101010{n:05d}"
        company = Company(code=f"CMP{n}", name=f"Company {n}")
        db_session.add(company)
        db_session.flush()
        branch = Branch(code=f"BR{n}", name=f"Branch {n}", company_id=company.id)
        db_session.add(branch)
        db_session.flush()
        division = Division(code=f"DIV{n}", name=f"Division {n}", branch_id=branch.id)
        db_session.add(division)
        db_session.flush()
        sub_division = None
        if with_sub_division:
            sub_division = SubDivision(
                code=f"SUB{n}", name=f"Sub Division {n}", division_id=division.id
            )
            db_session.add(sub_division)
        position = Position(code=f"POS{n}", name=f"Position {n}")
        role = Role(name=f"Role {n}")
        employee = Employee(
            nik=nik,
            name=name or f"Employee {n}",
            email=f"employee{n}@hrportal.test",
            picture=picture,
        )
        db_session.add_all([position, role, employee])
        db_session.flush()
        work_detail = EmployeeWorkDetail(
            employee_id=employee.id,
            company_id=company.id,
            branch_id=branch.id,
            division_id=division.id,
            sub_division_id=sub_division.id if sub_division else None,
            position_id=position.id,
            is_latest=True,
        )
        user = User(employee_id=employee.id, role_id=role.id, password=hash_password(password))
        db_session.add_all([work_detail, user])
        db_session.flush()
        for code in access:
            db_session.add(RoleAccess(role_id=role.id, access_id=_access(code).id))
        db_session.commit()
        return SimpleNamespace(
            user=user,
            employee=employee,
            work_detail=work_detail,
            company=company,
            branch=branch,
            division=division,
            sub_division=sub_division,
            position=position,
            role=role,
            nik=nik,
            password=password,
        )

    return _make


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def login(client, nik, password=PASSWORD, remember_me=False):
    return client.post(
        "/auth/login",
        json={"nik": nik, "password": password, "remember_me": remember_me},
    )


def set_cookies(response, name):
    return [h for h in response.headers.get_list("set-cookie") if h.startswith(f"{name}=")]
