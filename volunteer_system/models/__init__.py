"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from volunteer_system.models.base import Base
from volunteer_system.models.enums import (
    ActivityStatus,
    ApplicationStatus,
)
from volunteer_system.models.role import Role
from volunteer_system.models.user import User
from volunteer_system.models.department import Department, ActivityCategory
from volunteer_system.models.activity import Activity
from volunteer_system.models.application import Application
from volunteer_system.models.application_status_log import ApplicationStatusLog

__all__ = [
    "Base",
    "ActivityStatus",
    "ApplicationStatus",
    "Role",
    "User",
    "Department",
    "ActivityCategory",
    "Activity",
    "Application",
    "ApplicationStatusLog",
]
