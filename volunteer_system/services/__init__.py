"""Business logic services."""

from volunteer_system.services.locking import ActivityLocks
from volunteer_system.services.user_service import UserService
from volunteer_system.services.activity_service import ActivityService
from volunteer_system.services.application_service import ApplicationService
from volunteer_system.services.expiration_sweeper import ExpirationSweeper

__all__ = [
    "ActivityLocks",
    "UserService",
    "ActivityService",
    "ApplicationService",
    "ExpirationSweeper",
]
