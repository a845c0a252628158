"""
Pydantic schemas for activity operations.

activity_time arrives as text ("2025-06-01 09:30" or
"2025-06-01T09:30:00") and is parsed by the ActivityService,
so a malformed value is reported as an invalid activity time
rather than a generic schema error.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from volunteer_system.models.enums import ActivityStatus


# --- Request Schemas ---

class ActivityWrite(BaseModel):
    """Full set of editable fields. Used for both create and update."""
    dept_id: int
    category_id: int
    creator_id: int
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="")
    activity_time: str = Field(min_length=1)
    location: str = Field(min_length=1, max_length=255)
    max_people: int = Field(gt=0)


class DepartmentCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


# --- Response Schemas ---

class ActivityResponse(BaseModel):
    id: int
    dept_id: int
    category_id: int
    creator_id: int
    title: str
    description: str
    activity_time: datetime
    location: str
    max_people: int
    status: ActivityStatus

    model_config = {"from_attributes": True}


class ActivityDetailResponse(ActivityResponse):
    """Activity joined with its department, category and creator names."""
    dept_name: str
    category_name: str
    creator_name: str


class AvailableActivityResponse(BaseModel):
    id: int
    title: str
    description: str
    location: str
    activity_time: datetime
    max_people: int
    current_apply_count: int
    remaining_slots: int
    dept_name: str
    category_name: str


class LookupResponse(BaseModel):
    """Department or category row."""
    id: int
    name: str

    model_config = {"from_attributes": True}
