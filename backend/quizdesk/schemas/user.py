"""User & authentication schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """POST /api/users/register"""

    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=4)
    full_name: str = Field(min_length=1, max_length=100)


class UserLogin(BaseModel):
    """POST /api/users/login"""

    username: str
    password: str


class UserRead(BaseModel):
    """User returned from the API; never exposes password."""

    id: int
    username: str
    full_name: str
    role: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Combined auth response: token + user profile."""

    access_token: str
    token_type: str = "bearer"
    user: UserRead
