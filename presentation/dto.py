from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class EmployeeUpsertRequest(BaseModel):
    # 0 or missing creates a new employee, a positive id updates that employee
    employee_id: int = Field(default=0, ge=0)
    full_name: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    manager_employee_id: int | None = Field(default=None)

    # Accepts employeeId/fullName/... as well as snake_case keys
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator('full_name', 'title')
    @classmethod
    def strip_fields(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Field must not be blank')
        return v


class EmployeeResponse(BaseModel):
    employee_id: int
    full_name: str
    title: str
    managed_employees: list['EmployeeResponse'] = []

    model_config = ConfigDict(from_attributes=True)


EmployeeResponse.model_rebuild()
