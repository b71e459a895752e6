"""
User management router.

Mounts under ``/api/v1`` (prefix set in ``main.py``).

Endpoints
---------
GET /users — Paginated user list; requires ``user.read``.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.common import (
    ApiResponse,
    PaginationParams,
    paginated_response,
    pagination_params,
)
from app.schemas.user import UserListItem
from app.services.auth_service import require_access
from app.services.user_service import list_users
from app.utils.constants import ACCESS_USER_READ

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


@router.get(
    "/users",
    response_model=ApiResponse[list[UserListItem]],
    summary="Daftar pengguna",
    description=(
        "Daftar pengguna aktif maupun nonaktif (kecuali yang dihapus), "
        "diurutkan dari yang terbaru. ``q`` mencari nama, NIK atau email."
    ),
    responses={
        200: {"description": "Satu halaman pengguna dengan metadata paginasi."},
        401: {"description": "Sesi tidak valid."},
        403: {"description": "Role tidak memiliki akses ``user.read``."},
    },
)
def get_users(
    params: Annotated[PaginationParams, Depends(pagination_params)],
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[CurrentUser, Depends(require_access(ACCESS_USER_READ))],
):
    rows, total = list_users(db, params)
    return paginated_response(rows, total, params)
