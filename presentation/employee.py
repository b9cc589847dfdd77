from fastapi import APIRouter, Depends, Response, status

from core.exceptions import HierarchyError
from database.database import DataBaseConnection, database
from domain.entities import EmployeeUpsert
from services.hierarchy_service import HierarchyService

from .dto import EmployeeResponse, EmployeeUpsertRequest
from .errors import to_http_exception
from .serializers import encode_employee, encode_employees, json_response

# ========== ROUTER ==========
router = APIRouter(prefix='/api', tags=['employee'])


# ========== DEPENDENCIES ==========
def get_database() -> DataBaseConnection:
    return database


def get_service(db: DataBaseConnection = Depends(get_database)) -> HierarchyService:
    return HierarchyService(db)


# ========== ENDPOINTS ==========

@router.get(
    '/employee/{id}',
    response_model=EmployeeResponse,
    status_code=status.HTTP_200_OK,
    summary='Employee with the whole reporting subtree',
)
async def get_employee_by_id(
    id: int,
    service: HierarchyService = Depends(get_service),
) -> Response:
    try:
        employee = await service.get_employee_by_id(id)
    except HierarchyError as e:
        raise to_http_exception(e, not_found_is_404=True)

    # EmployeeResponse documents the schema; the tree is encoded without per-level validation
    return json_response(encode_employee(employee))


@router.get(
    '/employee',
    response_model=list[EmployeeResponse],
    status_code=status.HTTP_200_OK,
    summary='Top-level managers, each with the whole reporting subtree',
)
async def get_top_level_managers(
    service: HierarchyService = Depends(get_service),
) -> Response:
    try:
        managers = await service.get_top_level_managers()
    except HierarchyError as e:
        raise to_http_exception(e)

    return json_response(encode_employees(managers))


@router.put(
    '/employee',
    status_code=status.HTTP_200_OK,
    summary='Create (employee_id 0 or missing) or update an employee',
    responses={
        200: {'description': 'Employee saved'},
        400: {'description': 'Manager does not exist'},
        404: {'description': 'Employee to update does not exist'},
        409: {'description': 'Manager assignment would create a cycle'},
    },
)
async def add_or_update_employee(
    request: EmployeeUpsertRequest,
    service: HierarchyService = Depends(get_service),
) -> Response:
    employee = EmployeeUpsert(
        employee_id=request.employee_id,
        full_name=request.full_name,
        title=request.title,
        manager_employee_id=request.manager_employee_id,
    )

    try:
        await service.upsert_employee(employee)
    except HierarchyError as e:
        raise to_http_exception(e)

    return Response(status_code=status.HTTP_200_OK)


@router.delete(
    '/employee/{id}',
    status_code=status.HTTP_204_NO_CONTENT,
    summary='Delete an employee, reports move to its manager',
    responses={
        204: {'description': 'Employee deleted'},
        404: {'description': 'Employee does not exist'},
    },
)
async def delete_employee(
    id: int,
    service: HierarchyService = Depends(get_service),
) -> Response:
    try:
        await service.delete_employee(id)
    except HierarchyError as e:
        raise to_http_exception(e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
