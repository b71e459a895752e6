"""MasterAccess model — catalogue of permission codes."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class MasterAccess(Base):
    """A single permission code, e.g. ``user.read``.

    Attributes:
        id: Primary key.
        code: Unique permission identifier checked by ``require_access``.
        name: Human-readable label.
        module: Grouping used by the frontend menu, e.g. "USER".
        status: Active flag; inactive codes are never granted.
        deleted_at: Soft-delete timestamp.
    """

    __tablename__ = "master_access"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(100), unique=True, nullable=False)
    name = Column(String(200), nullable=False)
    module = Column(String(50), nullable=True)
    status = Column(Boolean, default=True, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    role_accesses = relationship("RoleAccess", back_populates="access", lazy="select")
