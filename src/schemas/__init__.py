"""Pydantic schemas for API request/response validation."""

from src.schemas.department import (
    DepartmentCreateRequest,
    DepartmentResponse,
    DepartmentTreeResponse,
    DepartmentUpdateRequest,
)
from src.schemas.employee import (
    EmployeeCreateRequest,
    EmployeeResponse,
    EmployeeUpdateRequest,
)

__all__ = [
    # Department schemas
    "DepartmentCreateRequest",
    "DepartmentResponse",
    "DepartmentTreeResponse",
    "DepartmentUpdateRequest",
    # Employee schemas
    "EmployeeCreateRequest",
    "EmployeeResponse",
    "EmployeeUpdateRequest",
]
