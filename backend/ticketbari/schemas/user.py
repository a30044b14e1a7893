"""
Pydantic schemas for user-related request/response validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from ticketbari.models.enums import Role
from ticketbari.schemas.base import CamelModel


class UserCreate(CamelModel):
    email: EmailStr
    name: Optional[str] = Field(None, max_length=255)
    photo: Optional[str] = Field(None, max_length=1024)


class UserResponse(CamelModel):
    id: int
    email: str
    name: Optional[str]
    photo: Optional[str]
    role: Role
    created_at: datetime


class UserCreateResult(CamelModel):
    message: str
    inserted_id: Optional[int]


class RoleResponse(CamelModel):
    role: Role


class RoleUpdate(CamelModel):
    role: Role = Role.ADMIN


class FraudResult(CamelModel):
    user_modified: int
    tickets_modified: int
