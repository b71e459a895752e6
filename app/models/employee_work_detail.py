"""EmployeeWorkDetail model — time-sliced organisational assignment."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class EmployeeWorkDetail(Base):
    """One assignment period of an employee.

    ``is_latest`` marks the current assignment.  Only one row per employee
    should carry it; when several do, the highest ``id`` is taken as current.

    Attributes:
        id: Primary key.
        employee_id: FK to Employee.
        company_id: FK to Company.
        branch_id: FK to Branch.
        division_id: FK to Division.
        sub_division_id: Optional FK to SubDivision.
        position_id: FK to Position.
        start_date: First day of the assignment.
        end_date: Last day of the assignment; ``None`` while ongoing.
        is_latest: Current-assignment flag.
        deleted_at: Soft-delete timestamp.
    """

    __tablename__ = "employee_work_details"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False)
    division_id = Column(Integer, ForeignKey("divisions.id"), nullable=False)
    sub_division_id = Column(Integer, ForeignKey("sub_divisions.id"), nullable=True)
    position_id = Column(Integer, ForeignKey("positions.id"), nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    is_latest = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    employee = relationship("Employee", back_populates="work_details", lazy="select")
    company = relationship("Company", lazy="joined")
    branch = relationship("Branch", lazy="joined")
    division = relationship("Division", lazy="joined")
    sub_division = relationship("SubDivision", lazy="joined")
    position = relationship("Position", lazy="joined")
