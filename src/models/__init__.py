"""Models package for the organizational structure service."""

from src.models.base import Base
from src.models.department import Department
from src.models.employee import Employee

__all__ = [
    "Base",
    "Department",
    "Employee",
]
