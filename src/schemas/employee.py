"""Pydantic schemas for employee API operations."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.config.settings import get_settings


def _strip_required(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("Value must not be blank")
    max_length = get_settings().hierarchy.max_name_length
    if len(value) > max_length:
        raise ValueError(f"Value must be at most {max_length} characters")
    return value


class EmployeeCreateRequest(BaseModel):
    """Request to create an employee in a department."""

    full_name: str = Field(..., description="Full name")
    position: str = Field(..., description="Position or title")
    hired_at: Optional[date] = Field(None, description="Hire date (YYYY-MM-DD)")

    @field_validator("full_name", "position")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _strip_required(v)


class EmployeeUpdateRequest(BaseModel):
    """Request to update an employee; only provided fields change."""

    full_name: Optional[str] = None
    position: Optional[str] = None
    hired_at: Optional[date] = None
    department_id: Optional[int] = Field(None, ge=1, description="Move to another department")

    @field_validator("full_name", "position")
    @classmethod
    def validate_text(cls, v: Optional[str]) -> Optional[str]:
        return _strip_required(v)


class EmployeeResponse(BaseModel):
    """Employee data for API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    department_id: int
    full_name: str
    position: str
    hired_at: Optional[date] = None
    created_at: datetime
