import pytest
from httpx import ASGITransport, AsyncClient

from database.database import DataBaseConnection
from main import app
from presentation.employee import get_database
from services.hierarchy_service import HierarchyService
from tests.helpers import seed_employees

TEST_DATABASE_URL = 'sqlite+aiosqlite:///:memory:'

# (employee_id, full_name, title, manager_employee_id)
SAMPLE_ROWS = [
    (1, 'Alice', 'CEO', None),
    (2, 'Bob', 'CFO', 1),
    (3, 'Carol', 'Analyst', 2),
]


@pytest.fixture
async def db():
    """Fresh in-memory database per test."""
    connection = DataBaseConnection(TEST_DATABASE_URL)
    await connection.create_schema()
    yield connection
    await connection.dispose()


@pytest.fixture
async def sample_db(db):
    await seed_employees(db, SAMPLE_ROWS)
    return db


@pytest.fixture
def service(db):
    return HierarchyService(db)


@pytest.fixture
async def client(db):
    app.dependency_overrides[get_database] = lambda: db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac
    app.dependency_overrides.clear()
