"""SQLAlchemy Employee model for database operations."""

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from src.models.base import Base

if TYPE_CHECKING:
    from src.models.department import Department


class Employee(Base):
    """
    Personnel record owned by exactly one department.

    Employees carry no relationships to each other; the owning
    department reference is required and always valid.
    """

    __tablename__ = "employees"

    # Primary Key
    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    department_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("departments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[str] = mapped_column(String(200), nullable=False)
    hired_at: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    # Relationships
    department: Mapped["Department"] = relationship(
        "Department", back_populates="employees", foreign_keys=[department_id]
    )

    def __repr__(self) -> str:
        return (
            f"<Employee("
            f"id={self.id}, "
            f"department_id={self.department_id}, "
            f"full_name={self.full_name}"
            f")>"
        )
