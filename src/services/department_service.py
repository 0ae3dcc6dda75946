"""Department service: create, rename, move and delete within the tree."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Set, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.config.settings import get_settings
from src.data.department_repository import DepartmentRepository
from src.data.employee_repository import EmployeeRepository
from src.models.department import SIBLING_NAME_CONSTRAINT, Department
from src.services.descendant_resolver import DescendantResolver
from src.utils.errors import (
    CannotReassignToSelfError,
    CyclicReferenceError,
    DuplicateError,
    InvalidModeError,
    SelfReferenceError,
    TargetNotFoundError,
    TargetRequiredError,
    create_duplicate_error,
    create_field_error,
    create_not_found_error,
    create_validation_error,
)


logger = logging.getLogger(__name__)


class DeleteMode(str, Enum):
    """How a department's subtree is removed."""

    CASCADE = "cascade"      # Destroy subtree and its employees
    REASSIGN = "reassign"    # Salvage employees to a target, then destroy subtree


@dataclass
class DeletionResult:
    """Summary of a completed department deletion."""

    department_id: int
    mode: DeleteMode
    departments_removed: int = 0
    employees_removed: int = 0
    employees_reassigned: int = 0
    reassigned_to_department_id: Optional[int] = None


class DepartmentService:
    """
    Service layer for department hierarchy mutations.

    Every invariant (parent existence, sibling name uniqueness,
    acyclicity) is checked against the current session state before
    any write. The service never commits: the caller's transaction
    makes each operation all-or-nothing.
    """

    def __init__(self, session: Session):
        """Initialize service with database session."""
        self.session = session
        self.repository = DepartmentRepository(session)
        self.employee_repository = EmployeeRepository(session)
        self.resolver = DescendantResolver(session)
        self.settings = get_settings()

    # =========================================================================
    # Create Operations
    # =========================================================================

    def create_department(
        self,
        name: str,
        parent_id: Optional[int] = None,
    ) -> Department:
        """
        Create a department, as a root or under an existing parent.

        Raises:
            NotFoundError: parent does not exist
            DuplicateError: a sibling already has this name
        """
        name = self._normalize_name(name)

        if parent_id is not None:
            self._get_or_raise(parent_id)

        self._validate_name_unique(name, parent_id)

        department = self._flush_or_duplicate(
            lambda: self.repository.add(name=name, parent_id=parent_id),
            name,
        )

        logger.info(
            "Created department %s (%r) under parent %s",
            department.id,
            department.name,
            parent_id,
        )
        return department

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_department(self, department_id: int) -> Department:
        """Get department by id, raising NotFoundError if absent."""
        return self._get_or_raise(department_id)

    # =========================================================================
    # Update Operations
    # =========================================================================

    def rename_department(self, department_id: int, name: str) -> Department:
        """Rename a department within its current parent."""
        return self.update_department(department_id, name=name)

    def move_department(self, department_id: int, parent_id: int) -> Department:
        """Reparent a department, keeping its current name."""
        return self.update_department(department_id, parent_id=parent_id)

    def update_department(
        self,
        department_id: int,
        name: Optional[str] = None,
        parent_id: Optional[int] = None,
    ) -> Department:
        """
        Rename and/or move a department.

        When both are given, sibling uniqueness is checked once against
        the resulting (name, parent) pair rather than each change alone.

        Raises:
            NotFoundError: department or new parent does not exist
            SelfReferenceError: parent_id equals department_id
            CyclicReferenceError: new parent is a descendant of the department
            DuplicateError: a sibling under the resulting parent has the name
        """
        department = self._get_or_raise(department_id)

        if name is not None:
            name = self._normalize_name(name)

        if parent_id is not None:
            self._validate_move(department_id, parent_id)

        if name is None and parent_id is None:
            return department

        target_name = name if name is not None else department.name
        target_parent_id = parent_id if parent_id is not None else department.parent_id

        self._validate_name_unique(target_name, target_parent_id, exclude_id=department_id)

        previous_parent_id = department.parent_id
        previous_name = department.name

        self._flush_or_duplicate(
            lambda: self.repository.update(department, name=name, parent_id=parent_id),
            target_name,
        )

        logger.info(
            "Updated department %s: name %r -> %r, parent %s -> %s",
            department_id,
            previous_name,
            department.name,
            previous_parent_id,
            department.parent_id,
        )
        return department

    # =========================================================================
    # Delete Operations
    # =========================================================================

    def delete_department(
        self,
        department_id: int,
        mode: Union[DeleteMode, str],
        reassign_to_department_id: Optional[int] = None,
    ) -> DeletionResult:
        """
        Delete a department together with its entire subtree.

        In cascade mode the subtree's employees are deleted too. In
        reassign mode they are first moved to reassign_to_department_id;
        descendant departments are still deleted, not reparented.

        Raises:
            NotFoundError: department does not exist
            InvalidModeError: mode is neither cascade nor reassign
            TargetRequiredError: reassign mode without a target
            CannotReassignToSelfError: target is the department or lies in its subtree
            TargetNotFoundError: target does not exist
        """
        self._get_or_raise(department_id)

        try:
            mode = DeleteMode(mode)
        except ValueError:
            raise InvalidModeError(details={"mode": str(mode)})

        if mode == DeleteMode.CASCADE:
            return self._delete_cascade(department_id)

        return self._delete_reassign(department_id, reassign_to_department_id)

    def _delete_cascade(self, department_id: int) -> DeletionResult:
        """Remove the subtree's employees, then the subtree itself."""
        levels = self.resolver.descendant_levels(department_id)
        subtree = self._flatten(department_id, levels)

        employees_removed = self.employee_repository.delete_by_departments(subtree)
        departments_removed = self._remove_departments(department_id, levels)

        logger.info(
            "Cascade-deleted department %s: %d departments, %d employees removed",
            department_id,
            departments_removed,
            employees_removed,
        )
        return DeletionResult(
            department_id=department_id,
            mode=DeleteMode.CASCADE,
            departments_removed=departments_removed,
            employees_removed=employees_removed,
        )

    def _delete_reassign(
        self,
        department_id: int,
        target_id: Optional[int],
    ) -> DeletionResult:
        """Move the subtree's employees to target_id, then remove the subtree."""
        if target_id is None:
            raise TargetRequiredError()

        if target_id == department_id:
            raise CannotReassignToSelfError(
                details={"department_id": department_id, "target_id": target_id},
            )

        if not self.repository.exists(target_id):
            raise TargetNotFoundError(details={"target_id": target_id})

        levels = self.resolver.descendant_levels(department_id)
        subtree = self._flatten(department_id, levels)

        # Employees moved into the subtree would be deleted along with it
        if target_id in subtree:
            raise CannotReassignToSelfError(
                message="Cannot reassign employees to a descendant of the department being deleted",
                details={"department_id": department_id, "target_id": target_id},
            )

        employees_reassigned = self.employee_repository.reassign_department(subtree, target_id)
        departments_removed = self._remove_departments(department_id, levels)

        logger.info(
            "Deleted department %s with reassignment: %d departments removed, "
            "%d employees moved to department %s",
            department_id,
            departments_removed,
            employees_reassigned,
            target_id,
        )
        return DeletionResult(
            department_id=department_id,
            mode=DeleteMode.REASSIGN,
            departments_removed=departments_removed,
            employees_reassigned=employees_reassigned,
            reassigned_to_department_id=target_id,
        )

    @staticmethod
    def _flatten(department_id: int, levels: List[List[int]]) -> Set[int]:
        return {department_id}.union(*levels)

    def _remove_departments(self, department_id: int, levels: List[List[int]]) -> int:
        """Delete the subtree deepest level first, so no row still has children when removed."""
        removed = 0
        for level in reversed(levels):
            removed += self.repository.delete_many(level)
        removed += self.repository.delete_many([department_id])
        return removed

    # =========================================================================
    # Validation Helpers
    # =========================================================================

    def _get_or_raise(self, department_id: int) -> Department:
        department = self.repository.get(department_id)
        if department is None:
            raise create_not_found_error("Department", department_id)
        return department

    def _normalize_name(self, name: str) -> str:
        """Trim surrounding whitespace and enforce length bounds."""
        normalized = (name or "").strip()
        max_length = self.settings.hierarchy.max_name_length

        if not normalized:
            raise create_validation_error([
                create_field_error("name", "Name must not be blank", "blank"),
            ])
        if len(normalized) > max_length:
            raise create_validation_error([
                create_field_error(
                    "name",
                    f"Name must be at most {max_length} characters",
                    "too_long",
                ),
            ])

        return normalized

    def _validate_move(self, department_id: int, parent_id: int) -> None:
        """Check that department_id may be placed under parent_id."""
        if parent_id == department_id:
            raise SelfReferenceError(details={"department_id": department_id})

        self._get_or_raise(parent_id)

        if self.resolver.is_descendant(department_id, parent_id):
            raise CyclicReferenceError(
                details={
                    "department_id": department_id,
                    "proposed_parent_id": parent_id,
                },
            )

    def _validate_name_unique(
        self,
        name: str,
        parent_id: Optional[int],
        exclude_id: Optional[int] = None,
    ) -> None:
        if self.repository.exists_by_name_and_parent(name, parent_id, exclude_id):
            raise self._duplicate_name_error(name)

    def _flush_or_duplicate(self, write, name: str):
        """Run a write; a sibling-name constraint failure means a concurrent sibling won."""
        try:
            return write()
        except IntegrityError as e:
            self.session.rollback()
            if not self._is_sibling_name_violation(e):
                logger.error("Integrity error writing department %r: %s", name, e.orig)
                raise
            logger.warning("Unique constraint rejected department name %r", name)
            raise self._duplicate_name_error(name)

    @staticmethod
    def _is_sibling_name_violation(error: IntegrityError) -> bool:
        diag = getattr(error.orig, "diag", None)
        constraint_name = getattr(diag, "constraint_name", None)
        if constraint_name is not None:
            return constraint_name == SIBLING_NAME_CONSTRAINT
        # SQLite names the columns, not the constraint
        return "UNIQUE constraint failed: departments.name, departments.parent_id" in str(error.orig)

    @staticmethod
    def _duplicate_name_error(name: str) -> DuplicateError:
        return create_duplicate_error("Department", "name", name)
