"""UserApproval model — pending account requests (forgot password, block)."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base
from app.utils.constants import APPROVAL_PENDING


class UserApproval(Base):
    """A request raised on behalf of a user that an administrator resolves.

    Attributes:
        id: Primary key.
        user_id: FK to the account the request concerns.
        type: ``forgot_password`` or ``block_user``.
        status: ``pending``, ``approved`` or ``rejected``.
        fields: Free-form JSON payload captured with the request.
    """

    __tablename__ = "user_approvals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(30), nullable=False)
    status = Column(String(20), default=APPROVAL_PENDING, nullable=False)
    fields = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="approvals", lazy="select")
