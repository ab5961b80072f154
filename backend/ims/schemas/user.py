"""User and auth schemas."""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ims.schemas.records import ApiModel, UserRole, UserStatus


class UserRegister(ApiModel):
    """Self-service registration request."""
    company_name: str = Field(min_length=1)
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    contact_person: str = ""


class UserRead(ApiModel):
    """User response. The password never leaves the service."""
    id: str
    company_name: str = ""
    username: str
    contact_person: str = ""
    role: UserRole
    status: UserStatus

    model_config = ConfigDict(extra="ignore")


class StatusUpdate(ApiModel):
    """Admin decision on a tenant."""
    status: Literal["Pending", "Approved", "Rejected", "Delete"]


class PasswordReset(ApiModel):
    password: str = Field(min_length=1)


class Token(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    """JWT token payload."""
    user_id: str | None = None
    username: str | None = None
    role: str | None = None
