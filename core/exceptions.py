class HierarchyError(Exception):
    """Base class for every failure surfaced by the hierarchy service."""

    kind = 'unknown'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EmployeeNotFoundError(HierarchyError):
    kind = 'not_found'

    def __init__(self, employee_id: int):
        super().__init__(f'Employee with ID {employee_id} not found.')
        self.employee_id = employee_id


class InvalidManagerReferenceError(HierarchyError):
    kind = 'invalid_reference'

    def __init__(self, manager_employee_id: int):
        super().__init__(f'Manager with ID {manager_employee_id} does not exist.')
        self.manager_employee_id = manager_employee_id


class CycleDetectedError(HierarchyError):
    """The manager graph is not a forest around ``employee_id``."""

    kind = 'cycle_detected'

    def __init__(self, employee_id: int, message: str | None = None):
        super().__init__(
            message or f'Management cycle detected at employee with ID {employee_id}.'
        )
        self.employee_id = employee_id


class StoreUnavailableError(HierarchyError):
    kind = 'store_unavailable'


class StoreError(HierarchyError):
    kind = 'unknown'
