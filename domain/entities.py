from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class EmployeeRecord:
    """Employee row as stored"""

    employee_id: int
    full_name: str
    title: str
    manager_employee_id: int | None = None


@dataclass
class EmployeeUpsert:
    """Create (employee_id is 0 or None) or update command"""

    full_name: str
    title: str
    manager_employee_id: int | None = None
    employee_id: int | None = None

    @property
    def is_create(self) -> bool:
        return not self.employee_id


@dataclass
class EmployeeNode:
    """Employee with the whole reporting subtree"""

    employee_id: int
    full_name: str
    title: str
    managed_employees: list[EmployeeNode] = field(default_factory=list)
