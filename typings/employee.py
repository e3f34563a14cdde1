from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EmployeeInput(BaseModel):
    """
    Fields accepted by addEmployee
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    age: Optional[int] = Field(default=None, ge=0)
    class_: Optional[str] = Field(default=None, alias="class")
    subjects: Optional[list[str]] = None
    attendance: Optional[float] = Field(default=None, ge=0, le=100)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value):
        if value is None or not value.strip():
            raise ValueError("name must not be empty")
        return value.strip()


class EmployeePatch(EmployeeInput):
    """
    Fields accepted by updateEmployee, all optional. Only supplied fields are
    validated and written; an explicit null name is rejected.
    """

    name: Optional[str] = None

