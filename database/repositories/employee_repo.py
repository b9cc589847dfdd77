from sqlalchemy import delete as sql_delete, func, select, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from core.logger import logger
from domain.entities import EmployeeRecord, EmployeeUpsert

from ..errors import translate_store_errors
from ..mappers import EmployeeMapper
from ..models import Employee as EmployeeORM


class EmployeeRepo:
    """Row-level access to the employees table. Knows nothing about trees."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def fetch_by_id(self, id: int) -> EmployeeRecord | None:
        with translate_store_errors(f'fetch of employee ID={id}'):
            stmt = select(EmployeeORM).where(EmployeeORM.employee_id == id)
            result = await self.session.execute(stmt)
            orm_employee = result.scalars().first()

        if not orm_employee:
            logger.warning(f'Employee ID={id} not found')
            return None

        return EmployeeMapper.to_domain(orm_employee)

    async def fetch_top_level(self) -> list[EmployeeRecord]:
        with translate_store_errors('fetch of top-level managers'):
            stmt = (
                select(EmployeeORM)
                .where(EmployeeORM.manager_employee_id.is_(None))
                .order_by(EmployeeORM.employee_id)
            )
            result = await self.session.execute(stmt)
            return [EmployeeMapper.to_domain(e) for e in result.scalars().all()]

    async def fetch_children(self, manager_id: int) -> list[EmployeeRecord]:
        with translate_store_errors(f'fetch of employees managed by ID={manager_id}'):
            stmt = (
                select(EmployeeORM)
                .where(EmployeeORM.manager_employee_id == manager_id)
                .order_by(EmployeeORM.employee_id)
            )
            result = await self.session.execute(stmt)
            return [EmployeeMapper.to_domain(e) for e in result.scalars().all()]

    async def fetch_all(self) -> list[EmployeeRecord]:
        with translate_store_errors('fetch of all employees'):
            stmt = select(EmployeeORM).order_by(EmployeeORM.employee_id)
            result = await self.session.execute(stmt)
            return [EmployeeMapper.to_domain(e) for e in result.scalars().all()]

    async def manager_exists(self, id: int) -> bool:
        with translate_store_errors(f'existence check of manager ID={id}'):
            stmt = select(func.count()).select_from(EmployeeORM).where(EmployeeORM.employee_id == id)
            result = await self.session.execute(stmt)
            return result.scalar_one() > 0

    async def insert(self, employee: EmployeeUpsert) -> int:
        with translate_store_errors('insert of employee'):
            orm_employee = EmployeeMapper.to_orm(employee)
            self.session.add(orm_employee)
            # flush sends the INSERT and fills in the generated key
            await self.session.flush()

        logger.info(f'Employee saved. ID={orm_employee.employee_id}')
        return orm_employee.employee_id

    async def update(self, employee: EmployeeUpsert) -> int:
        with translate_store_errors(f'update of employee ID={employee.employee_id}'):
            stmt = (
                sql_update(EmployeeORM)
                .where(EmployeeORM.employee_id == employee.employee_id)
                .values(
                    full_name=employee.full_name,
                    title=employee.title,
                    manager_employee_id=employee.manager_employee_id,
                )
                .execution_options(synchronize_session=False)
            )
            result = await self.session.execute(stmt)

        if result.rowcount == 0:
            logger.warning(f'Employee ID={employee.employee_id} not found on update')
        else:
            logger.info(f'Employee updated. ID={employee.employee_id}')
        return result.rowcount

    async def reassign_children(self, id: int) -> int:
        """Point every direct report of ``id`` at the manager of ``id``.

        The new manager is read by the same statement, so it is never stale.
        Matches zero rows when ``id`` has no reports or does not exist.
        """
        removed = aliased(EmployeeORM)
        new_manager_id = (
            select(removed.manager_employee_id)
            .where(removed.employee_id == id)
            .scalar_subquery()
        )
        with translate_store_errors(f'reassignment of reports of employee ID={id}'):
            stmt = (
                sql_update(EmployeeORM)
                .where(EmployeeORM.manager_employee_id == id)
                .values(manager_employee_id=new_manager_id)
                .execution_options(synchronize_session=False)
            )
            result = await self.session.execute(stmt)

        logger.info(f'Reports of employee ID={id} reassigned ({result.rowcount} rows)')
        return result.rowcount

    async def delete(self, id: int) -> int:
        with translate_store_errors(f'deletion of employee ID={id}'):
            stmt = (
                sql_delete(EmployeeORM)
                .where(EmployeeORM.employee_id == id)
                .execution_options(synchronize_session=False)
            )
            result = await self.session.execute(stmt)

        if result.rowcount == 0:
            logger.warning(f'Employee ID={id} not found on delete')
        else:
            logger.info(f'Employee deleted. ID={id}')
        return result.rowcount

    async def _collect_subtree_ids(self, root_id: int) -> list[int]:
        """BFS over the reports of ``root_id``, root first. Each id is visited once."""
        ids: list[int] = []
        seen = {root_id}
        queue = [root_id]
        while queue:
            current_id = queue.pop(0)
            ids.append(current_id)
            with translate_store_errors(f'subtree walk at employee ID={current_id}'):
                result = await self.session.execute(
                    select(EmployeeORM.employee_id).where(
                        EmployeeORM.manager_employee_id == current_id
                    )
                )
            for child_id in result.scalars().all():
                if child_id not in seen:
                    seen.add(child_id)
                    queue.append(child_id)
        return ids

    async def is_in_subtree(self, root_id: int, candidate_id: int) -> bool:
        """Whether ``candidate_id`` is ``root_id`` or reports to it, directly or not."""
        return candidate_id in await self._collect_subtree_ids(root_id)
