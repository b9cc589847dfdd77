from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError

from core.logger import logger
from core.settings import settings
from database.database import DataBaseConnection, database
from presentation.employee import get_database, router as employee_router
from presentation.errors import request_validation_handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    # Startup
    logger.info('[STARTUP] Starting application...')
    try:
        await database.connect()
        if settings.CREATE_SCHEMA_ON_STARTUP:
            await database.create_schema()
        logger.info('[STARTUP] Application started')
    except Exception as e:
        logger.error(f'[STARTUP] Startup failed: {e}')
        raise

    yield

    # Shutdown
    logger.info('[SHUTDOWN] Stopping application...')
    try:
        await database.dispose()
        logger.info('[SHUTDOWN] Application stopped')
    except Exception as e:
        logger.error(f'[SHUTDOWN] Error during shutdown: {e}')


app = FastAPI(
    title='Company Hierarchy API',
    description='Employees and their reporting lines',
    version='0.1.0',
    lifespan=lifespan,
)

app.include_router(employee_router)
app.add_exception_handler(RequestValidationError, request_validation_handler)


@app.get('/', tags=['health'])
async def root(db: DataBaseConnection = Depends(get_database)):
    """Health check endpoint."""
    return {
        'status': 'ok',
        'message': 'Company Hierarchy API is running',
        'db_connected': await db.is_connected(),
    }


if __name__ == '__main__':
    import uvicorn

    uvicorn.run(
        'main:app',
        host='0.0.0.0',
        port=8000,
        reload=True,
    )
