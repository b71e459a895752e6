"""Company model — top of the organisational hierarchy."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class Company(Base):
    """Legal entity that owns one or more branches.

    Attributes:
        id: Primary key.
        code: Short internal code, e.g. "HQ".
        name: Registered company name.
        status: Active flag.
        deleted_at: Soft-delete timestamp; ``None`` while the row is live.
    """

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(20), unique=True, nullable=False)
    name = Column(String(200), nullable=False)
    status = Column(Boolean, default=True, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    branches = relationship("Branch", back_populates="company", lazy="select")
