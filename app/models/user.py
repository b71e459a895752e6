"""User model — login account bound to an employee and a role."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class User(Base):
    """Login account.  Identity data lives on the linked :class:`Employee`.

    Attributes:
        id: Primary key.
        employee_id: Unique FK to Employee (login is by ``employee.nik``).
        role_id: FK to Role controlling permissions.
        password: Bcrypt hash (never store plain text).
        status: Active flag.
        last_login_at: Timestamp of the last successful login.
        last_activity_at: Timestamp of the last authenticated request.
        deleted_at: Soft-delete timestamp.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), unique=True, nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    password = Column(String(200), nullable=False)
    status = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime, nullable=True)
    last_activity_at = Column(DateTime, nullable=True)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    employee = relationship("Employee", back_populates="user", lazy="joined")
    role = relationship("Role", back_populates="users", lazy="joined")
    approvals = relationship("UserApproval", back_populates="user", lazy="select")
