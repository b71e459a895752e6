"""Branch model — regional office of a company."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class Branch(Base):
    """Office belonging to a :class:`Company`.

    Attributes:
        id: Primary key.
        company_id: FK to the owning company.
        code: Short internal code.
        name: Display name, e.g. "Cabang Bandung".
        status: Active flag.
        deleted_at: Soft-delete timestamp.
    """

    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    code = Column(String(20), unique=True, nullable=False)
    name = Column(String(200), nullable=False)
    status = Column(Boolean, default=True, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    company = relationship("Company", back_populates="branches", lazy="select")
    divisions = relationship("Division", back_populates="branch", lazy="select")
