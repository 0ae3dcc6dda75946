"""API endpoints for the department tree."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from src.database.database import get_db
from src.schemas.department import (
    DepartmentCreateRequest,
    DepartmentResponse,
    DepartmentTreeResponse,
    DepartmentUpdateRequest,
)
from src.schemas.employee import EmployeeCreateRequest, EmployeeResponse
from src.services.department_service import DepartmentService
from src.services.department_tree_service import DepartmentTreeBuilder
from src.services.employee_service import EmployeeService


# =============================================================================
# Dependency Injection
# =============================================================================

def get_department_service(
    session: Annotated[Session, Depends(get_db, scope="function")],
) -> DepartmentService:
    """Get department service instance."""
    return DepartmentService(session)


def get_tree_builder(
    session: Annotated[Session, Depends(get_db, scope="function")],
) -> DepartmentTreeBuilder:
    """Get department tree builder instance."""
    return DepartmentTreeBuilder(session)


def get_employee_service(
    session: Annotated[Session, Depends(get_db, scope="function")],
) -> EmployeeService:
    """Get employee service instance."""
    return EmployeeService(session)


# =============================================================================
# Router Setup
# =============================================================================

department_router = APIRouter(prefix="/departments", tags=["Departments"])


# =============================================================================
# Department Endpoints
# =============================================================================

@department_router.post(
    "",
    response_model=DepartmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Department",
    description="Create a root department or a department under an existing parent.",
)
async def create_department(
    request: DepartmentCreateRequest,
    service: Annotated[DepartmentService, Depends(get_department_service)],
) -> DepartmentResponse:
    department = service.create_department(
        name=request.name,
        parent_id=request.parent_id,
    )
    return DepartmentResponse.model_validate(department)


@department_router.get(
    "/{department_id}",
    response_model=DepartmentTreeResponse,
    summary="Get Department Tree",
    description="Get a department with its subtree down to the requested depth.",
)
async def get_department(
    department_id: int,
    builder: Annotated[DepartmentTreeBuilder, Depends(get_tree_builder)],
    depth: Annotated[Optional[int], Query(description="Levels of children (clamped to 1-5)")] = None,
    include_employees: Annotated[
        Optional[bool], Query(description="Attach employees at every level")
    ] = None,
) -> DepartmentTreeResponse:
    """
    Get a department tree snapshot.

    - depth outside 1-5 is clamped, not rejected
    - employees are ordered by creation time
    """
    tree = builder.build(
        department_id,
        depth=depth,
        include_employees=include_employees,
    )
    return DepartmentTreeResponse.from_tree(tree)


@department_router.patch(
    "/{department_id}",
    response_model=DepartmentResponse,
    summary="Update Department",
    description="Rename a department, move it under another parent, or both.",
)
async def update_department(
    department_id: int,
    request: DepartmentUpdateRequest,
    service: Annotated[DepartmentService, Depends(get_department_service)],
) -> DepartmentResponse:
    """
    Update a department.

    - Prevents self reference and circular dependencies
    - Validates sibling name uniqueness against the resulting parent
    """
    department = service.update_department(
        department_id,
        name=request.name,
        parent_id=request.parent_id,
    )
    return DepartmentResponse.model_validate(department)


@department_router.delete(
    "/{department_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Department",
    description=(
        "Delete a department and its whole subtree. mode=cascade also deletes "
        "the employees; mode=reassign moves them to reassign_to_department_id first."
    ),
)
async def delete_department(
    department_id: int,
    service: Annotated[DepartmentService, Depends(get_department_service)],
    mode: Annotated[str, Query(description="cascade or reassign")] = "",
    reassign_to_department_id: Annotated[
        Optional[int], Query(description="Target department for mode=reassign")
    ] = None,
) -> Response:
    service.delete_department(
        department_id,
        mode=mode,
        reassign_to_department_id=reassign_to_department_id,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Department Employee Endpoints
# =============================================================================

@department_router.post(
    "/{department_id}/employees",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Employee",
    description="Create an employee in the department.",
)
async def create_department_employee(
    department_id: int,
    request: EmployeeCreateRequest,
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    employee = service.create_employee(
        department_id=department_id,
        full_name=request.full_name,
        position=request.position,
        hired_at=request.hired_at,
    )
    return EmployeeResponse.model_validate(employee)


@department_router.get(
    "/{department_id}/employees",
    response_model=List[EmployeeResponse],
    summary="List Department Employees",
)
async def list_department_employees(
    department_id: int,
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> List[EmployeeResponse]:
    employees = service.list_department_employees(department_id)
    return [EmployeeResponse.model_validate(e) for e in employees]
