"""
Pydantic schemas for user provisioning.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    role_name: str = Field(default="user", max_length=50)


class UserResponse(BaseModel):
    id: int
    username: str
    role_id: int
    role_name: str
    created_at: datetime
