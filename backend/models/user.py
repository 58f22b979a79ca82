from typing import Optional
from pydantic import Field, field_validator
from models.common import CamelModel, UserRole


class UserCreate(CamelModel):
    email:        str
    display_name: Optional[str] = None
    photo_url:    Optional[str] = Field(None, alias="photoURL")

    @field_validator("email")
    @classmethod
    def email_must_be_present(cls, v: str) -> str:
        v = v.strip()
        if not v or "@" not in v:
            raise ValueError("User data with email required")
        return v


class RoleUpdate(CamelModel):
    role: UserRole


class RoleResponse(CamelModel):
    role: UserRole = UserRole.USER
