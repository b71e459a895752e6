"""
Shared Pydantic v2 schemas reused across multiple modules.

Every endpoint answers with the same envelope::

    {"success": bool, "message": str, "metadata": {...}, "data": ...}

List endpoints fill ``metadata`` with ``per_page``, ``current_page``,
``total_row`` and ``total_page``.
"""

from __future__ import annotations

import math
from typing import Annotated, Any, Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel, Field

from app.utils.constants import DEFAULT_PER_PAGE, MAX_PER_PAGE

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Response envelope.

    Attributes:
        success: ``True`` for 2xx responses.
        message: Short human-readable result or error summary.
        metadata: Pagination info for list endpoints; empty otherwise.
        data: Payload, or ``None`` on errors.
    """

    success: bool = True
    message: str = "success"
    metadata: dict[str, Any] = Field(default_factory=dict)
    data: T | None = None


class PaginationParams(BaseModel):
    """Pagination parameters for list endpoints.

    Attributes:
        page: 1-based page number.
        per_page: Rows per page (capped to protect the DB).
        q: Optional free-text search term.
    """

    page: int = Field(default=1, ge=1, description="Nomor halaman (mulai dari 1).")
    per_page: int = Field(
        default=DEFAULT_PER_PAGE,
        ge=1,
        le=MAX_PER_PAGE,
        description=f"Jumlah baris per halaman (maksimal {MAX_PER_PAGE}).",
    )
    q: str | None = Field(default=None, max_length=100, description="Kata kunci pencarian.")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def pagination_metadata(total: int, page: int, per_page: int) -> dict[str, int]:
    return {
        "per_page": per_page,
        "current_page": page,
        "total_row": total,
        "total_page": math.ceil(total / per_page) if per_page else 0,
    }


def api_response(data: Any = None, message: str = "success", **metadata: Any) -> ApiResponse:
    return ApiResponse(success=True, message=message, metadata=metadata, data=data)


def paginated_response(rows: list[Any], total: int, params: PaginationParams) -> ApiResponse:
    return ApiResponse(
        success=True,
        message="success",
        metadata=pagination_metadata(total, params.page, params.per_page),
        data=rows,
    )


def pagination_params(
    page: Annotated[int, Query(description="Nomor halaman (mulai dari 1).", ge=1)] = 1,
    per_page: Annotated[
        int,
        Query(description=f"Jumlah baris per halaman (maksimal {MAX_PER_PAGE}).", ge=1, le=MAX_PER_PAGE),
    ] = DEFAULT_PER_PAGE,
    q: Annotated[str | None, Query(description="Kata kunci pencarian.", max_length=100)] = None,
) -> PaginationParams:
    """Assemble ``PaginationParams`` from URL query parameters."""
    return PaginationParams(page=page, per_page=per_page, q=q or None)
