import pytest

from core.exceptions import (
    CycleDetectedError,
    EmployeeNotFoundError,
    InvalidManagerReferenceError,
    StoreError,
)
from database.repositories.employee_repo import EmployeeRepo
from domain.entities import EmployeeNode, EmployeeUpsert
from services.hierarchy_service import HierarchyService
from tests.helpers import all_rows, manager_of, names, seed_employees


# ========== READ ==========

async def test_get_employee_by_id_returns_subtree(sample_db, service):
    alice = await service.get_employee_by_id(1)

    assert alice == EmployeeNode(
        employee_id=1,
        full_name='Alice',
        title='CEO',
        managed_employees=[
            EmployeeNode(
                employee_id=2,
                full_name='Bob',
                title='CFO',
                managed_employees=[EmployeeNode(employee_id=3, full_name='Carol', title='Analyst')],
            )
        ],
    )


async def test_get_employee_by_id_missing(sample_db, service):
    with pytest.raises(EmployeeNotFoundError) as exc_info:
        await service.get_employee_by_id(99)

    assert exc_info.value.employee_id == 99


@pytest.mark.parametrize('preload', [True, False])
async def test_get_top_level_managers(db, preload):
    await seed_employees(db, [
        (1, 'Alice', 'CEO', None),
        (2, 'Bob', 'CFO', 1),
        (3, 'Heidi', 'Founder', None),
        (4, 'Ivan', 'Assistant', 3),
    ])

    managers = await HierarchyService(db, preload=preload).get_top_level_managers()

    assert names(managers) == ['Alice', 'Heidi']
    assert names(managers[0].managed_employees) == ['Bob']
    assert names(managers[1].managed_employees) == ['Ivan']


async def test_get_top_level_managers_empty(service):
    assert await service.get_top_level_managers() == []


async def test_cycle_in_stored_data_is_reported(db, service):
    await seed_employees(db, [(1, 'A', 'T', 2), (2, 'B', 'T', 1)])

    with pytest.raises(CycleDetectedError):
        await service.get_employee_by_id(1)


# ========== UPSERT ==========

async def test_create_top_level_employee(sample_db, service):
    new_id = await service.upsert_employee(EmployeeUpsert(employee_id=0, full_name='Dan', title='COO'))

    dan = await service.get_employee_by_id(new_id)
    assert (dan.full_name, dan.title, dan.managed_employees) == ('Dan', 'COO', [])
    assert names(await service.get_top_level_managers()) == ['Alice', 'Dan']


async def test_create_with_missing_id_attribute(sample_db, service):
    new_id = await service.upsert_employee(
        EmployeeUpsert(full_name='Dan', title='Analyst', manager_employee_id=2)
    )

    bob = await service.get_employee_by_id(2)
    assert [n.employee_id for n in bob.managed_employees] == [3, new_id]


async def test_create_with_unknown_manager_writes_nothing(sample_db, service):
    before = await all_rows(sample_db)

    with pytest.raises(InvalidManagerReferenceError) as exc_info:
        await service.upsert_employee(
            EmployeeUpsert(full_name='Dan', title='Analyst', manager_employee_id=42)
        )

    assert exc_info.value.manager_employee_id == 42
    assert await all_rows(sample_db) == before


async def test_update_existing_employee(sample_db, service):
    await service.upsert_employee(
        EmployeeUpsert(employee_id=3, full_name='Carol', title='Controller', manager_employee_id=1)
    )

    alice = await service.get_employee_by_id(1)
    assert names(alice.managed_employees) == ['Bob', 'Carol']
    assert alice.managed_employees[1].title == 'Controller'


async def test_update_to_top_level(sample_db, service):
    await service.upsert_employee(EmployeeUpsert(employee_id=2, full_name='Bob', title='CFO'))

    assert await manager_of(sample_db, 2) is None


async def test_update_missing_employee_writes_nothing(sample_db, service):
    before = await all_rows(sample_db)

    with pytest.raises(EmployeeNotFoundError):
        await service.upsert_employee(
            EmployeeUpsert(employee_id=50, full_name='Nobody', title='Ghost', manager_employee_id=1)
        )

    assert await all_rows(sample_db) == before


async def test_update_with_unknown_manager_writes_nothing(sample_db, service):
    before = await all_rows(sample_db)

    with pytest.raises(InvalidManagerReferenceError):
        await service.upsert_employee(
            EmployeeUpsert(employee_id=3, full_name='Carol', title='Analyst', manager_employee_id=42)
        )

    assert await all_rows(sample_db) == before


async def test_update_rejects_self_as_manager(sample_db, service):
    with pytest.raises(CycleDetectedError):
        await service.upsert_employee(
            EmployeeUpsert(employee_id=2, full_name='Bob', title='CFO', manager_employee_id=2)
        )

    assert await manager_of(sample_db, 2) == 1


async def test_update_rejects_descendant_as_manager(sample_db, service):
    with pytest.raises(CycleDetectedError):
        await service.upsert_employee(
            EmployeeUpsert(employee_id=1, full_name='Alice', title='CEO', manager_employee_id=3)
        )

    assert await manager_of(sample_db, 1) is None


# ========== DELETE ==========

async def test_delete_reassigns_reports_to_own_manager(sample_db, service):
    await service.delete_employee(2)

    assert await manager_of(sample_db, 3) == 1
    with pytest.raises(EmployeeNotFoundError):
        await service.get_employee_by_id(2)

    alice = await service.get_employee_by_id(1)
    assert names(alice.managed_employees) == ['Carol']
    assert alice.managed_employees[0].managed_employees == []


async def test_delete_top_level_promotes_reports(sample_db, service):
    await service.delete_employee(1)

    assert await manager_of(sample_db, 2) is None
    managers = await service.get_top_level_managers()
    assert names(managers) == ['Bob']
    assert names(managers[0].managed_employees) == ['Carol']


async def test_delete_missing_employee(sample_db, service):
    before = await all_rows(sample_db)

    with pytest.raises(EmployeeNotFoundError):
        await service.delete_employee(99)

    assert await all_rows(sample_db) == before


async def test_failed_delete_rolls_back_reassignment(sample_db, service, monkeypatch):
    async def failing_delete(self, id):
        raise StoreError('disk full')

    monkeypatch.setattr(EmployeeRepo, 'delete', failing_delete)

    with pytest.raises(StoreError):
        await service.delete_employee(2)

    assert await manager_of(sample_db, 3) == 2
    assert len(await all_rows(sample_db)) == 3
