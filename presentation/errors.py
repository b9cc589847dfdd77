from fastapi import HTTPException, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.exceptions import (
    CycleDetectedError,
    EmployeeNotFoundError,
    HierarchyError,
    InvalidManagerReferenceError,
    StoreError,
    StoreUnavailableError,
)
from core.settings import settings

STATUS_BY_ERROR: dict[type[HierarchyError], int] = {
    EmployeeNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidManagerReferenceError: status.HTTP_400_BAD_REQUEST,
    CycleDetectedError: status.HTTP_409_CONFLICT,
    StoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    StoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(error: HierarchyError, not_found_is_404: bool = False) -> HTTPException:
    """HTTP error for a hierarchy failure.

    With LEGACY_ERROR_STATUSES every failure is a 400, except a missing
    employee on endpoints passing ``not_found_is_404``.
    """
    if settings.LEGACY_ERROR_STATUSES:
        if not_found_is_404 and isinstance(error, EmployeeNotFoundError):
            code = status.HTTP_404_NOT_FOUND
        else:
            code = status.HTTP_400_BAD_REQUEST
    else:
        code = STATUS_BY_ERROR.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=code, detail=error.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> Response:
    """Malformed bodies and parameters: FastAPI's 422, or 400 with LEGACY_ERROR_STATUSES."""
    if settings.LEGACY_ERROR_STATUSES:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={'detail': jsonable_encoder(exc.errors())},
        )
    return await request_validation_exception_handler(request, exc)
