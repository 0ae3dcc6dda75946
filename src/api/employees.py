"""API endpoints for individual employee records."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from src.api.departments import get_employee_service
from src.schemas.employee import EmployeeResponse, EmployeeUpdateRequest
from src.services.employee_service import EmployeeService


employee_router = APIRouter(prefix="/employees", tags=["Employees"])


@employee_router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
    summary="Get Employee",
)
async def get_employee(
    employee_id: int,
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    return EmployeeResponse.model_validate(service.get_employee(employee_id))


@employee_router.patch(
    "/{employee_id}",
    response_model=EmployeeResponse,
    summary="Update Employee",
    description="Update employee fields; only fields present in the body change.",
)
async def update_employee(
    employee_id: int,
    request: EmployeeUpdateRequest,
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    changes = request.model_dump(exclude_unset=True)
    employee = service.update_employee(employee_id, **changes)
    return EmployeeResponse.model_validate(employee)


@employee_router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Employee",
)
async def delete_employee(
    employee_id: int,
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> Response:
    service.delete_employee(employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
