from sqlalchemy import select

from database.database import DataBaseConnection
from database.models import Employee as EmployeeORM


async def seed_employees(db: DataBaseConnection, rows) -> None:
    """Insert raw rows, bypassing the manager checks of the service."""
    async with db.transaction() as session:
        session.add_all([
            EmployeeORM(
                employee_id=employee_id,
                full_name=full_name,
                title=title,
                manager_employee_id=manager_employee_id,
            )
            for employee_id, full_name, title, manager_employee_id in rows
        ])


async def manager_of(db: DataBaseConnection, employee_id: int) -> int | None:
    async with db.get_session() as session:
        result = await session.execute(
            select(EmployeeORM.manager_employee_id).where(EmployeeORM.employee_id == employee_id)
        )
        return result.scalar_one()


async def all_rows(db: DataBaseConnection) -> list[tuple]:
    async with db.get_session() as session:
        result = await session.execute(
            select(
                EmployeeORM.employee_id,
                EmployeeORM.full_name,
                EmployeeORM.title,
                EmployeeORM.manager_employee_id,
            ).order_by(EmployeeORM.employee_id)
        )
        return [tuple(row) for row in result.all()]


def names(nodes) -> list[str]:
    return [n.full_name for n in nodes]
