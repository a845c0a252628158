"""
Error types raised by the services.

Rule violations and bad input raise VolunteerSystemError, which is
a ValueError so callers can treat every "bad request" failure the
same way. Database faults are wrapped in StorageError, which is not
a ValueError and maps to a server error instead.
"""

import enum


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    ALREADY_APPLIED = "already_applied"
    ACTIVITY_FULL = "activity_full"
    ACTIVITY_CLOSED = "activity_closed"
    ACTIVITY_EXPIRED = "activity_expired"
    INVALID_STATUS = "invalid_status"
    ACTIVITY_STARTED = "activity_started"
    STATUS_NOT_CANCELLABLE = "status_not_cancellable"
    INVALID_TIME = "invalid_time"
    DUPLICATE = "duplicate"
    STORAGE = "storage"


class VolunteerSystemError(ValueError):
    """A validation or business-rule failure. Nothing was written."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class NotFoundError(VolunteerSystemError):
    """A referenced user, activity or application does not exist."""

    def __init__(self, entity: str, entity_id: int | str):
        super().__init__(ErrorKind.NOT_FOUND, f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class StorageError(Exception):
    """The database rejected or failed a read or write."""

    kind = ErrorKind.STORAGE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
