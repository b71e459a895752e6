"""RoleAccess model — join table between Role and MasterAccess."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class RoleAccess(Base):
    __tablename__ = "role_access"
    __table_args__ = (UniqueConstraint("role_id", "access_id", name="uq_role_access"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, index=True)
    access_id = Column(Integer, ForeignKey("master_access.id"), nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    # Relationships
    role = relationship("Role", back_populates="role_accesses", lazy="select")
    access = relationship("MasterAccess", back_populates="role_accesses", lazy="joined")
