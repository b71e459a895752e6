"""Employee model — personal record of a staff member."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class Employee(Base):
    """Personal data of an employee, independent of their login account.

    Attributes:
        id: Primary key.
        nik: 16-digit national identity number; the login identifier.
        name: Full name.
        email: Contact email address.
        phone: Optional phone number.
        picture: Object-storage key of the profile picture, if any.
        status: Active flag.
        deleted_at: Soft-delete timestamp.
    """

    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nik = Column(String(16), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), unique=True, nullable=True)
    phone = Column(String(30), nullable=True)
    picture = Column(String(500), nullable=True)
    status = Column(Boolean, default=True, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="employee", uselist=False, lazy="select")
    work_details = relationship(
        "EmployeeWorkDetail",
        back_populates="employee",
        lazy="select",
        order_by="EmployeeWorkDetail.id",
    )
