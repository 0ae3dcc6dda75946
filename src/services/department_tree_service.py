"""Bounded-depth read view of a department and its subtree."""

from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.orm import Session

from src.config.settings import get_settings
from src.data.department_repository import DepartmentRepository
from src.data.employee_repository import EmployeeRepository
from src.models.department import Department
from src.models.employee import Employee
from src.utils.errors import create_not_found_error


@dataclass
class DepartmentTree:
    """A department with its (optionally loaded) employees and children."""

    department: Department
    employees: Optional[List[Employee]] = None
    children: List["DepartmentTree"] = field(default_factory=list)


class DepartmentTreeBuilder:
    """Assembles nested department snapshots down to a limited depth."""

    def __init__(self, session: Session):
        """Initialize builder with database session."""
        self.session = session
        self.repository = DepartmentRepository(session)
        self.employee_repository = EmployeeRepository(session)
        self.settings = get_settings()

    def build(
        self,
        department_id: int,
        depth: Optional[int] = None,
        include_employees: Optional[bool] = None,
    ) -> DepartmentTree:
        """
        Project a department and its descendants.

        Args:
            department_id: Root of the projection
            depth: Levels of children to include; clamped to the configured bounds
            include_employees: Attach employees at every included level

        Raises:
            NotFoundError: department does not exist
        """
        hierarchy = self.settings.hierarchy
        depth = hierarchy.clamp_depth(depth)
        if include_employees is None:
            include_employees = hierarchy.include_employees_by_default

        department = self.repository.get(department_id)
        if department is None:
            raise create_not_found_error("Department", department_id)

        return self._project(department, depth, include_employees)

    def _project(
        self,
        department: Department,
        depth: int,
        include_employees: bool,
    ) -> DepartmentTree:
        node = DepartmentTree(department=department)

        if include_employees:
            node.employees = list(self.employee_repository.get_by_department(department.id))

        if depth > 0:
            node.children = [
                self._project(child, depth - 1, include_employees)
                for child in self.repository.get_children(department.id)
            ]

        return node
