"""
User Models

Company staff (HR) who own job postings and review candidates. Credentials and
sessions are handled upstream; only the identity needed for CC addresses and
recorder attribution is kept here.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, ForeignKey, DateTime, func
from database.engine import Base, BigIntegerId, utcnow
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.companies import Company


class User(Base):
    """Member of a company's hiring team."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigIntegerId, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(
        BigIntegerId, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    company: Mapped["Company"] = relationship("Company", back_populates="users")
