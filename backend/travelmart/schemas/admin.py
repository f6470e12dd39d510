import uuid

from pydantic import BaseModel, EmailStr, Field


class CreateStaffRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str
    phone: str | None = None
    role_id: int
    department: str | None = None


class UpdateStaffRequest(BaseModel):
    full_name: str | None = None
    phone: str | None = None
    role_id: int | None = None
    department: str | None = None
    is_active: bool | None = None


class StaffResponse(BaseModel):
    id: uuid.UUID
    email: str
    full_name: str
    phone: str | None = None
    role_id: int | None = None
    role_name: str | None = None
    department: str | None = None
    is_active: bool


class AssignRoleRequest(BaseModel):
    user_id: uuid.UUID
    role_id: int


class RoleResponse(BaseModel):
    id: int
    name: str
    description: str | None = None

    model_config = {"from_attributes": True}
