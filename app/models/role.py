"""Role model — named permission group assigned to users."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class Role(Base):
    """Permission group.  The access codes it grants live in ``RoleAccess``.

    Attributes:
        id: Primary key.
        name: Unique role name, e.g. "HR Admin".
        description: Optional free text.
        status: Active flag; an inactive role invalidates every session using it.
        deleted_at: Soft-delete timestamp.
    """

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String(300), nullable=True)
    status = Column(Boolean, default=True, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    role_accesses = relationship("RoleAccess", back_populates="role", lazy="select")
    users = relationship("User", back_populates="role", lazy="select")
