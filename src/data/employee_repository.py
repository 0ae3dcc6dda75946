"""Employee repository for data access operations."""

from datetime import date
from typing import Collection, Optional, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from src.models.employee import Employee


class EmployeeRepository:
    """Repository for employee data access operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session."""
        self.session = session

    def get(self, employee_id: int) -> Optional[Employee]:
        """Get employee by primary key."""
        return self.session.get(Employee, employee_id)

    def get_by_department(self, department_id: int) -> Sequence[Employee]:
        """Get a department's employees, oldest record first."""
        stmt = (
            select(Employee)
            .where(Employee.department_id == department_id)
            .order_by(Employee.created_at, Employee.id)
        )
        return self.session.execute(stmt).scalars().all()

    def add(
        self,
        department_id: int,
        full_name: str,
        position: str,
        hired_at: Optional[date] = None,
    ) -> Employee:
        """Insert an employee and flush to obtain its id."""
        employee = Employee(
            department_id=department_id,
            full_name=full_name,
            position=position,
            hired_at=hired_at,
        )
        self.session.add(employee)
        self.session.flush()
        self.session.refresh(employee)
        return employee

    def delete(self, employee: Employee) -> None:
        self.session.delete(employee)
        self.session.flush()

    # =========================================================================
    # Bulk Operations
    # =========================================================================

    def reassign_department(
        self,
        from_department_ids: Collection[int],
        to_department_id: int,
    ) -> int:
        """
        Move every employee owned by any of from_department_ids.

        Returns:
            Number of employees re-owned
        """
        if not from_department_ids:
            return 0

        stmt = (
            update(Employee)
            .where(Employee.department_id.in_(list(from_department_ids)))
            .values(department_id=to_department_id)
            .execution_options(synchronize_session="evaluate")
        )
        result = self.session.execute(stmt)
        return result.rowcount or 0

    def delete_by_departments(self, department_ids: Collection[int]) -> int:
        """Delete every employee owned by any of department_ids."""
        if not department_ids:
            return 0

        stmt = (
            delete(Employee)
            .where(Employee.department_id.in_(list(department_ids)))
            .execution_options(synchronize_session="evaluate")
        )
        result = self.session.execute(stmt)
        return result.rowcount or 0
