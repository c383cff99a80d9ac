import uuid
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    if "@" not in value:
        raise ValueError("must be an email address")
    return value


# Emails are case-insensitive: always lower-cased before they reach the store
Email = Annotated[str, Field(min_length=3, max_length=255), AfterValidator(_normalize_email)]


class UserResponse(BaseModel):
    """User details; the password hash is never serialized"""

    id: uuid.UUID
    name: str
    email: str
    is_superuser: bool
    is_owner: bool
    group_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    """All users in the system"""

    results: list[UserResponse]
    count: int


class AdminUserCreate(BaseModel):
    """Create a user under administrative authority"""

    name: str = Field(..., min_length=1, max_length=255)
    email: Email
    password: str = Field(..., min_length=1)
    is_superuser: bool = False
    group_id: uuid.UUID | None = Field(
        default=None, description="Target group; absent or nil means the caller's group"
    )


class AdminUserUpdate(BaseModel):
    """Update a user's details and superuser flag"""

    name: str = Field(..., min_length=1, max_length=255)
    email: Email
    is_superuser: bool


class SuperuserUpdate(BaseModel):
    """Set only the superuser flag (the retriable second update step)"""

    is_superuser: bool


class UserRegistration(BaseModel):
    """Self-registration; always creates a new group owned by the user"""

    name: str = Field(..., min_length=1, max_length=255)
    email: Email
    password: str = Field(..., min_length=1)


class UserSelfUpdate(BaseModel):
    """Update own name/email"""

    name: str = Field(..., min_length=1, max_length=255)
    email: Email


class ChangePassword(BaseModel):
    current: str = Field(..., min_length=1)
    new: str = Field(..., min_length=1)
