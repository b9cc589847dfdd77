from typing import Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class Employee(Base):
    __tablename__ = 'employees'

    employee_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)

    # Self-referencing FK, NULL for top-level managers
    manager_employee_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey('employees.employee_id'), nullable=True, index=True
    )

    manager: Mapped[Optional['Employee']] = relationship(
        back_populates='managed_employees',
        remote_side='Employee.employee_id',
    )

    managed_employees: Mapped[list['Employee']] = relationship(back_populates='manager')
