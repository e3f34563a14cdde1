from enum import Enum

from pydantic import BaseModel, field_validator

from util.cert import MAX_SECRET_BYTES


class Role(str, Enum):
    admin = "ADMIN"
    employee = "EMPLOYEE"


class RegisterInput(BaseModel):
    username: str
    password: str
    email: str
    name: str
    role: Role = Role.employee

    @field_validator("username", "password", "email", "name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_SECRET_BYTES:
            raise ValueError(f"must be at most {MAX_SECRET_BYTES} bytes")
        return value
