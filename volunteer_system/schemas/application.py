"""
Pydantic schemas for applications and their status log.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from volunteer_system.models.enums import ApplicationStatus


# --- Request Schemas ---

class ApplyRequest(BaseModel):
    user_id: int


class ApplicationStatusUpdate(BaseModel):
    """
    Request to set an application's status.

    status is kept as raw text; the service trims and
    lower-cases it and reports anything else as invalid.
    """
    status: str = Field(min_length=1, max_length=20)
    handler_id: int


# --- Response Schemas ---

class ApplicationResponse(BaseModel):
    id: int
    user_id: int
    activity_id: int
    apply_time: datetime
    current_status: ApplicationStatus

    model_config = {"from_attributes": True}


class StatusLogResponse(BaseModel):
    id: int
    application_id: int
    handler_id: int | None
    log_status: ApplicationStatus
    handle_time: datetime

    model_config = {"from_attributes": True}


class ActivityApplicationResponse(BaseModel):
    """An application to one activity, with the applicant's name."""
    id: int
    user_id: int
    username: str
    apply_time: datetime
    current_status: ApplicationStatus


class UserApplicationResponse(BaseModel):
    """One of a user's applications, with the activity it targets."""
    id: int
    activity_id: int
    title: str
    activity_time: datetime
    location: str
    current_status: ApplicationStatus
    apply_time: datetime
