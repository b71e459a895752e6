"""
Application-wide constants for the HR portal.

Defines cookie and cache-key names, approval enumerations and the
catalogue of access codes seeded into ``master_access``.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Cookies
# ---------------------------------------------------------------------------

ACCESS_TOKEN_COOKIE: Final[str] = "access_token"
REFRESH_TOKEN_COOKIE: Final[str] = "refresh_token"
CSRF_COOKIE: Final[str] = "_csrf"
CSRF_HEADER: Final[str] = "X-CSRF-Token"

# ---------------------------------------------------------------------------
# Cache key prefixes
# ---------------------------------------------------------------------------

REFRESH_TOKEN_KEY_PREFIX: Final[str] = "refresh_token:"
LOGIN_ATTEMPT_KEY_PREFIX: Final[str] = "login:user:"
RATE_LIMIT_KEY_PREFIX: Final[str] = "rl:"

# ---------------------------------------------------------------------------
# User approval requests
# ---------------------------------------------------------------------------

APPROVAL_FORGOT_PASSWORD: Final[str] = "forgot_password"
APPROVAL_BLOCK_USER: Final[str] = "block_user"

APPROVAL_PENDING: Final[str] = "pending"

# ---------------------------------------------------------------------------
# Access codes
# ---------------------------------------------------------------------------

ACCESS_USER_READ: Final[str] = "user.read"
ACCESS_EMPLOYEE_READ: Final[str] = "employee.read"
ACCESS_MASTER_READ: Final[str] = "master.read"
ACCESS_ROLE_READ: Final[str] = "role.read"
ACCESS_APPROVAL_MANAGE: Final[str] = "approval.manage"

# (code, name, module), seeded by ``seed_data.py`` and the initial migration
ACCESS_CATALOGUE: Final[list[tuple[str, str, str]]] = [
    (ACCESS_USER_READ, "Lihat daftar pengguna", "USER"),
    (ACCESS_EMPLOYEE_READ, "Lihat daftar karyawan", "EMPLOYEE"),
    (ACCESS_MASTER_READ, "Lihat data master organisasi", "MASTER"),
    (ACCESS_ROLE_READ, "Lihat role dan hak akses", "ROLE"),
    (ACCESS_APPROVAL_MANAGE, "Kelola permintaan persetujuan", "APPROVAL"),
]

# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

DEFAULT_PER_PAGE: Final[int] = 10
MAX_PER_PAGE: Final[int] = 100

# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

NIK_LENGTH: Final[int] = 16
