"""Employee service for personnel records owned by departments."""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from src.config.settings import get_settings
from src.data.department_repository import DepartmentRepository
from src.data.employee_repository import EmployeeRepository
from src.models.employee import Employee
from src.utils.errors import (
    create_field_error,
    create_not_found_error,
    create_validation_error,
)


logger = logging.getLogger(__name__)


_UNSET = object()


class EmployeeService:
    """
    Service layer for employee CRUD operations.

    An employee always belongs to an existing department; every write
    that sets department_id checks the department first.
    """

    def __init__(self, session: Session):
        """Initialize service with database session."""
        self.session = session
        self.repository = EmployeeRepository(session)
        self.department_repository = DepartmentRepository(session)
        self.settings = get_settings()

    # =========================================================================
    # Create Operations
    # =========================================================================

    def create_employee(
        self,
        department_id: int,
        full_name: str,
        position: str,
        hired_at: Optional[date] = None,
    ) -> Employee:
        """
        Create an employee in a department.

        Raises:
            NotFoundError: department does not exist
            ValidationError: blank or overlong name or position
        """
        self._ensure_department_exists(department_id)

        employee = self.repository.add(
            department_id=department_id,
            full_name=self._normalize("full_name", full_name),
            position=self._normalize("position", position),
            hired_at=hired_at,
        )

        logger.info("Created employee %s in department %s", employee.id, department_id)
        return employee

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_employee(self, employee_id: int) -> Employee:
        employee = self.repository.get(employee_id)
        if employee is None:
            raise create_not_found_error("Employee", employee_id)
        return employee

    def list_department_employees(self, department_id: int) -> List[Employee]:
        """Get a department's employees ordered by creation time."""
        self._ensure_department_exists(department_id)
        return list(self.repository.get_by_department(department_id))

    # =========================================================================
    # Update Operations
    # =========================================================================

    def update_employee(
        self,
        employee_id: int,
        full_name: Optional[str] = None,
        position: Optional[str] = None,
        hired_at=_UNSET,
        department_id: Optional[int] = None,
    ) -> Employee:
        """
        Update an employee's fields.

        hired_at may be passed as None to clear it; leaving it out
        keeps the current value.
        """
        employee = self.get_employee(employee_id)

        if department_id is not None and department_id != employee.department_id:
            self._ensure_department_exists(department_id)
            employee.department_id = department_id

        if full_name is not None:
            employee.full_name = self._normalize("full_name", full_name)
        if position is not None:
            employee.position = self._normalize("position", position)
        if hired_at is not _UNSET:
            employee.hired_at = hired_at

        self.session.flush()

        logger.info("Updated employee %s", employee_id)
        return employee

    # =========================================================================
    # Delete Operations
    # =========================================================================

    def delete_employee(self, employee_id: int) -> None:
        employee = self.get_employee(employee_id)
        self.repository.delete(employee)
        logger.info("Deleted employee %s", employee_id)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _ensure_department_exists(self, department_id: int) -> None:
        if not self.department_repository.exists(department_id):
            raise create_not_found_error("Department", department_id)

    def _normalize(self, field: str, value: str) -> str:
        """Trim surrounding whitespace and enforce length bounds."""
        normalized = (value or "").strip()
        max_length = self.settings.hierarchy.max_name_length

        if not normalized:
            raise create_validation_error([
                create_field_error(field, f"{field} must not be blank", "blank"),
            ])
        if len(normalized) > max_length:
            raise create_validation_error([
                create_field_error(
                    field,
                    f"{field} must be at most {max_length} characters",
                    "too_long",
                ),
            ])

        return normalized
