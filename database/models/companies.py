"""
Company Models

A company is the tenant boundary: every job, and through its job every
candidate, belongs to exactly one company.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, DateTime, func
from database.engine import Base, BigIntegerId, utcnow
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.jobs import Job
    from database.models.users import User


class Company(Base):
    """Employer posting jobs."""

    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(BigIntegerId, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    logo_url: Mapped[str | None] = mapped_column(String(1000))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    jobs: Mapped[list["Job"]] = relationship("Job", back_populates="company")
    users: Mapped[list["User"]] = relationship("User", back_populates="company")
