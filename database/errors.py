from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, SQLAlchemyError

from core.exceptions import HierarchyError, StoreError, StoreUnavailableError
from core.logger import logger


@contextmanager
def translate_store_errors(action: str) -> Iterator[None]:
    """Log a store failure and re-raise it as a hierarchy error."""
    try:
        yield
    except HierarchyError:
        raise
    except (OperationalError, InterfaceError, OSError) as e:
        logger.error(f'[DATABASE] Store unavailable during {action}: {e}')
        raise StoreUnavailableError(str(e)) from e
    except DBAPIError as e:
        if e.connection_invalidated:
            logger.error(f'[DATABASE] Connection lost during {action}: {e}')
            raise StoreUnavailableError(str(e)) from e
        logger.error(f'[DATABASE] Error during {action}: {e}')
        raise StoreError(str(e)) from e
    except SQLAlchemyError as e:
        logger.error(f'[DATABASE] Error during {action}: {e}')
        raise StoreError(str(e)) from e
