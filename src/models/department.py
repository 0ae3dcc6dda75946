"""SQLAlchemy Department model for the organizational tree."""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from src.models.base import Base

if TYPE_CHECKING:
    from src.models.employee import Employee


# Backstop for sibling name uniqueness among non-root departments
SIBLING_NAME_CONSTRAINT = "unique_name_per_parent"


class Department(Base):
    """
    Organizational unit in a strictly acyclic tree.

    Sibling departments (same parent, or all roots) have distinct names.
    The service layer enforces that before every write; the table
    constraint only backs it up for non-root siblings.
    """

    __tablename__ = "departments"

    # Primary Key
    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    # Hierarchy
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("departments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    # =========================================================================
    # Relationships
    # =========================================================================

    parent: Mapped[Optional["Department"]] = relationship(
        "Department", remote_side=[id], foreign_keys=[parent_id]
    )
    employees: Mapped[List["Employee"]] = relationship(
        "Employee",
        back_populates="department",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("name", "parent_id", name=SIBLING_NAME_CONSTRAINT),
    )

    def __repr__(self) -> str:
        return (
            f"<Department("
            f"id={self.id}, "
            f"name={self.name}, "
            f"parent_id={self.parent_id}"
            f")>"
        )
