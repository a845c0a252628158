"""
Shared API dependencies and error mapping.

Services raise NotFoundError, other ValueErrors for rule
violations, and StorageError for database faults. Endpoints
turn them into 404, 400 and 500 responses respectively.
"""

from fastapi import HTTPException, Request

from volunteer_system.errors import NotFoundError, StorageError
from volunteer_system.services.locking import ActivityLocks


def get_activity_locks(request: Request) -> ActivityLocks:
    """The process-wide activity lock registry created at startup."""
    return request.app.state.activity_locks


def to_http_exception(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, StorageError):
        return HTTPException(status_code=500, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))
