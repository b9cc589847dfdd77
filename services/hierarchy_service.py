from core.exceptions import (
    CycleDetectedError,
    EmployeeNotFoundError,
    InvalidManagerReferenceError,
)
from core.logger import logger
from core.settings import settings
from database.database import DataBaseConnection
from database.repositories.employee_repo import EmployeeRepo
from domain.entities import EmployeeNode, EmployeeUpsert

from .hierarchy_assembler import HierarchyAssembler


class HierarchyService:
    """
    Public hierarchy operations.

    Every operation runs in its own transaction: the session is opened,
    committed on success, rolled back on failure and closed, never shared
    between operations.
    """

    def __init__(self, database: DataBaseConnection, preload: bool | None = None):
        self.database = database
        self.preload = settings.HIERARCHY_PRELOAD if preload is None else preload

    async def get_employee_by_id(self, id: int) -> EmployeeNode:
        async with self.database.transaction() as session:
            repo = EmployeeRepo(session)
            record = await repo.fetch_by_id(id)
            if record is None:
                raise EmployeeNotFoundError(id)

            assembler = HierarchyAssembler(repo, preload=self.preload)
            return await assembler.expand(record)

    async def get_top_level_managers(self) -> list[EmployeeNode]:
        async with self.database.transaction() as session:
            repo = EmployeeRepo(session)
            assembler = HierarchyAssembler(repo, preload=self.preload)
            return [await assembler.expand(record) for record in await repo.fetch_top_level()]

    async def upsert_employee(self, employee: EmployeeUpsert) -> int:
        """Create or update ``employee`` and return its id. Nothing is written on failure."""
        async with self.database.transaction() as session:
            repo = EmployeeRepo(session)
            manager_id = employee.manager_employee_id

            if manager_id is not None:
                if not await repo.manager_exists(manager_id):
                    raise InvalidManagerReferenceError(manager_id)

                if not employee.is_create and await repo.is_in_subtree(
                    employee.employee_id, manager_id
                ):
                    raise CycleDetectedError(
                        employee.employee_id,
                        f'Employee with ID {manager_id} cannot manage employee with ID '
                        f'{employee.employee_id}: it would create a management cycle.',
                    )

            if employee.is_create:
                return await repo.insert(employee)

            if await repo.update(employee) == 0:
                raise EmployeeNotFoundError(employee.employee_id)
            return employee.employee_id

    async def delete_employee(self, id: int) -> None:
        """Delete ``id`` after handing its reports over to its own manager.

        Both statements share one transaction, a failed delete undoes the reassignment.
        """
        async with self.database.transaction() as session:
            repo = EmployeeRepo(session)
            await repo.reassign_children(id)
            if await repo.delete(id) == 0:
                raise EmployeeNotFoundError(id)

        logger.info(f'Employee ID={id} removed from the hierarchy')
