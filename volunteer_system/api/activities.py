"""
Activity endpoints.

The API layer is thin: it handles HTTP concerns and delegates
every rule to the ActivityService and ApplicationService.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from volunteer_system.api.deps import get_activity_locks, to_http_exception
from volunteer_system.errors import StorageError
from volunteer_system.models.base import get_db
from volunteer_system.services.activity_service import ActivityService
from volunteer_system.services.application_service import ApplicationService
from volunteer_system.services.locking import ActivityLocks
from volunteer_system.schemas.activity import (
    ActivityWrite,
    ActivityResponse,
    ActivityDetailResponse,
    AvailableActivityResponse,
    CategoryCreate,
    DepartmentCreate,
    LookupResponse,
)
from volunteer_system.schemas.application import (
    ApplyRequest,
    ApplicationResponse,
    ActivityApplicationResponse,
)

router = APIRouter(tags=["Activities"])


# --- Lookup Endpoints ---

@router.post("/departments", response_model=LookupResponse, status_code=201)
def create_department(
    request: DepartmentCreate,
    db: Session = Depends(get_db),
):
    service = ActivityService(db)
    try:
        department = service.create_department(request)
        db.commit()
        return department
    except StorageError as e:
        db.rollback()
        raise to_http_exception(e)


@router.post("/categories", response_model=LookupResponse, status_code=201)
def create_category(
    request: CategoryCreate,
    db: Session = Depends(get_db),
):
    service = ActivityService(db)
    try:
        category = service.create_category(request)
        db.commit()
        return category
    except StorageError as e:
        db.rollback()
        raise to_http_exception(e)


# --- Activity Endpoints ---

@router.get("/activities", response_model=list[ActivityResponse])
def list_activities(
    dept_id: int | None = None,
    category_id: int | None = None,
    db: Session = Depends(get_db),
):
    """List active activities, optionally filtered by department or category."""
    return ActivityService(db).list_activities(dept_id, category_id)


@router.get("/activities/search", response_model=list[ActivityResponse])
def search_activities(
    keyword: str = "",
    db: Session = Depends(get_db),
):
    """Search active activities by title."""
    if not keyword.strip():
        raise HTTPException(status_code=400, detail="keyword must not be empty")
    return ActivityService(db).search_activities(keyword.strip())


@router.get("/activities/available", response_model=list[AvailableActivityResponse])
def list_available_activities(
    user_id: int,
    db: Session = Depends(get_db),
):
    """Activities the user can still apply to."""
    return ActivityService(db).list_available_activities(user_id)


@router.get("/activities/{activity_id}", response_model=ActivityDetailResponse)
def get_activity(
    activity_id: int,
    db: Session = Depends(get_db),
):
    """Get activity details with department, category and creator names."""
    service = ActivityService(db)
    try:
        return service.get_activity_detail(activity_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/activities", response_model=ActivityResponse, status_code=201)
def create_activity(
    request: ActivityWrite,
    db: Session = Depends(get_db),
):
    """Create a new activity in active status."""
    service = ActivityService(db)
    try:
        activity = service.create_activity(request)
        db.commit()
        return activity
    except (ValueError, StorageError) as e:
        db.rollback()
        raise to_http_exception(e)


@router.put("/activities/{activity_id}", response_model=ActivityResponse)
def update_activity(
    activity_id: int,
    request: ActivityWrite,
    db: Session = Depends(get_db),
):
    """Replace all editable fields of an activity."""
    service = ActivityService(db)
    try:
        activity = service.update_activity(activity_id, request)
        db.commit()
        return activity
    except (ValueError, StorageError) as e:
        db.rollback()
        raise to_http_exception(e)


@router.delete("/activities/{activity_id}", status_code=204)
def delete_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    locks: ActivityLocks = Depends(get_activity_locks),
):
    """
    Delete an activity with its applications and status logs.

    All three deletes commit together.
    """
    service = ActivityService(db)
    try:
        with locks.hold(activity_id):
            service.delete_activity(activity_id)
            db.commit()
    except (ValueError, StorageError) as e:
        db.rollback()
        raise to_http_exception(e)


# --- Application Endpoints scoped to an activity ---

@router.post(
    "/activities/{activity_id}/apply",
    response_model=ApplicationResponse,
    status_code=201,
)
def apply_to_activity(
    activity_id: int,
    request: ApplyRequest,
    db: Session = Depends(get_db),
    locks: ActivityLocks = Depends(get_activity_locks),
):
    """Apply to an activity. The application starts as pending."""
    service = ApplicationService(db, locks)
    try:
        return service.apply(request.user_id, activity_id)
    except (ValueError, StorageError) as e:
        db.rollback()
        raise to_http_exception(e)


@router.get(
    "/activities/{activity_id}/applications",
    response_model=list[ActivityApplicationResponse],
)
def list_activity_applications(
    activity_id: int,
    db: Session = Depends(get_db),
    locks: ActivityLocks = Depends(get_activity_locks),
):
    return ApplicationService(db, locks).list_activity_applications(activity_id)
