"""
Application endpoints: status review, cancellation and history.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from volunteer_system.api.deps import get_activity_locks, to_http_exception
from volunteer_system.errors import StorageError
from volunteer_system.models.base import get_db
from volunteer_system.services.application_service import ApplicationService
from volunteer_system.services.locking import ActivityLocks
from volunteer_system.schemas.application import (
    ApplicationStatusUpdate,
    ApplicationResponse,
    StatusLogResponse,
    UserApplicationResponse,
)

router = APIRouter(tags=["Applications"])


@router.get(
    "/users/{user_id}/applications",
    response_model=list[UserApplicationResponse],
)
def list_user_applications(
    user_id: int,
    db: Session = Depends(get_db),
    locks: ActivityLocks = Depends(get_activity_locks),
):
    return ApplicationService(db, locks).list_user_applications(user_id)


@router.post(
    "/applications/{application_id}/status",
    response_model=ApplicationResponse,
)
def update_application_status(
    application_id: int,
    request: ApplicationStatusUpdate,
    db: Session = Depends(get_db),
    locks: ActivityLocks = Depends(get_activity_locks),
):
    """
    Set an application's status (approved, rejected or pending).

    Approving re-checks the activity's capacity.
    """
    service = ApplicationService(db, locks)
    try:
        return service.update_status(
            application_id, request.status, request.handler_id
        )
    except (ValueError, StorageError) as e:
        db.rollback()
        raise to_http_exception(e)


@router.delete("/applications/{application_id}", status_code=204)
def cancel_application(
    application_id: int,
    db: Session = Depends(get_db),
    locks: ActivityLocks = Depends(get_activity_locks),
):
    """Withdraw an application before its activity starts."""
    service = ApplicationService(db, locks)
    try:
        service.cancel(application_id)
    except (ValueError, StorageError) as e:
        db.rollback()
        raise to_http_exception(e)


@router.get(
    "/applications/{application_id}/logs",
    response_model=list[StatusLogResponse],
)
def get_application_logs(
    application_id: int,
    db: Session = Depends(get_db),
    locks: ActivityLocks = Depends(get_activity_locks),
):
    """Status history of an application, oldest first."""
    service = ApplicationService(db, locks)
    try:
        return service.get_status_logs(application_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
