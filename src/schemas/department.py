"""Pydantic schemas for department API operations."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.config.settings import get_settings
from src.schemas.employee import EmployeeResponse
from src.services.department_tree_service import DepartmentTree


def _strip_name(value: Optional[str]) -> Optional[str]:
    """Trim the name, then apply the length bounds to what remains."""
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("Name must not be blank")
    max_length = get_settings().hierarchy.max_name_length
    if len(value) > max_length:
        raise ValueError(f"Name must be at most {max_length} characters")
    return value


# =============================================================================
# Request Models
# =============================================================================

class DepartmentCreateRequest(BaseModel):
    """Request to create a department."""

    name: str = Field(..., description="Department name")
    parent_id: Optional[int] = Field(None, ge=1, description="Parent department ID (omit for a root)")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_name(v)


class DepartmentUpdateRequest(BaseModel):
    """Request to rename and/or move a department."""

    name: Optional[str] = Field(None, description="New name")
    parent_id: Optional[int] = Field(None, ge=1, description="New parent department ID")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return _strip_name(v)

    @model_validator(mode="after")
    def validate_has_changes(self) -> "DepartmentUpdateRequest":
        """Require at least one of name or parent_id."""
        if self.name is None and self.parent_id is None:
            raise ValueError("At least one of name or parent_id must be provided")
        return self


# =============================================================================
# Response Models
# =============================================================================

class DepartmentResponse(BaseModel):
    """Department data for API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    parent_id: Optional[int] = None
    created_at: datetime


class DepartmentTreeResponse(DepartmentResponse):
    """Department with nested children and, optionally, employees."""

    employees: Optional[List[EmployeeResponse]] = None
    children: List["DepartmentTreeResponse"] = Field(default_factory=list)

    @classmethod
    def from_tree(cls, tree: DepartmentTree) -> "DepartmentTreeResponse":
        """Convert a projected tree into its response form."""
        department = tree.department
        employees = None
        if tree.employees is not None:
            employees = [EmployeeResponse.model_validate(e) for e in tree.employees]

        return cls(
            id=department.id,
            name=department.name,
            parent_id=department.parent_id,
            created_at=department.created_at,
            employees=employees,
            children=[cls.from_tree(child) for child in tree.children],
        )


DepartmentTreeResponse.model_rebuild()
