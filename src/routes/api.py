"""API route aggregation and error handling."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.api.departments import department_router
from src.api.employees import employee_router
from src.utils.errors import APIError


# =============================================================================
# Router Setup
# =============================================================================

api_router = APIRouter(prefix="/api")
api_router.include_router(department_router)
api_router.include_router(employee_router)


# =============================================================================
# Error Handling
# =============================================================================

async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle API errors and return structured responses."""
    response = exc.to_response()
    return JSONResponse(
        status_code=response.status_code,
        content=response.to_dict(),
    )
