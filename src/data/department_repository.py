"""Department repository for data access operations."""

from typing import Collection, List, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from src.models.department import Department


class DepartmentRepository:
    """
    Repository for department data access operations.

    Performs no hierarchy validation of its own; callers check
    invariants before writing, within the same session.
    """

    def __init__(self, session: Session):
        """Initialize repository with database session."""
        self.session = session

    # =========================================================================
    # Lookups
    # =========================================================================

    def get(self, department_id: int) -> Optional[Department]:
        """Get department by primary key."""
        return self.session.get(Department, department_id)

    def exists(self, department_id: int) -> bool:
        stmt = select(Department.id).where(Department.id == department_id)
        return self.session.execute(stmt).first() is not None

    def exists_by_name_and_parent(
        self,
        name: str,
        parent_id: Optional[int],
        exclude_id: Optional[int] = None,
    ) -> bool:
        """
        Check whether a sibling with this name exists.

        A parent_id of None scopes the check to root departments.

        Args:
            name: Department name (already normalized)
            parent_id: Parent department, or None for roots
            exclude_id: Department to leave out (the one being renamed/moved)
        """
        stmt = select(func.count()).select_from(Department).where(Department.name == name)

        if parent_id is None:
            stmt = stmt.where(Department.parent_id.is_(None))
        else:
            stmt = stmt.where(Department.parent_id == parent_id)

        if exclude_id is not None:
            stmt = stmt.where(Department.id != exclude_id)

        return (self.session.execute(stmt).scalar() or 0) > 0

    def get_children(self, parent_id: int) -> Sequence[Department]:
        """Get direct children ordered by creation time."""
        stmt = (
            select(Department)
            .where(Department.parent_id == parent_id)
            .order_by(Department.created_at, Department.id)
        )
        return self.session.execute(stmt).scalars().all()

    def get_children_ids(self, parent_ids: Collection[int]) -> List[int]:
        """Get ids of all departments whose parent is in parent_ids."""
        if not parent_ids:
            return []

        stmt = select(Department.id).where(Department.parent_id.in_(list(parent_ids)))
        return list(self.session.execute(stmt).scalars().all())

    # =========================================================================
    # Writes
    # =========================================================================

    def add(self, name: str, parent_id: Optional[int]) -> Department:
        """Insert a department and flush to obtain its id."""
        department = Department(name=name, parent_id=parent_id)
        self.session.add(department)
        self.session.flush()
        self.session.refresh(department)
        return department

    def update(
        self,
        department: Department,
        name: Optional[str] = None,
        parent_id: Optional[int] = None,
    ) -> Department:
        """Apply field changes and flush."""
        if name is not None:
            department.name = name
        if parent_id is not None:
            department.parent_id = parent_id

        self.session.flush()
        return department

    def delete_many(self, department_ids: Collection[int]) -> int:
        """Delete departments by id; returns rows removed."""
        if not department_ids:
            return 0

        stmt = (
            delete(Department)
            .where(Department.id.in_(list(department_ids)))
            .execution_options(synchronize_session="evaluate")
        )
        result = self.session.execute(stmt)
        return result.rowcount or 0
