"""
Activity service — creation, editing, deletion and listing of activities.

Rules enforced here:
1. The activity time must parse before anything is written
2. New activities start active; edits never touch the status
3. Deleting an activity removes its status logs, then its
   applications, then the activity itself
4. Listings only ever show active activities

The caller controls the commit. Because the three cascade
deletes are flushed in the caller's single transaction, a
failure in any of them rolls back all of them.
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from volunteer_system.errors import (
    ErrorKind,
    NotFoundError,
    StorageError,
    VolunteerSystemError,
)
from volunteer_system.models.activity import Activity
from volunteer_system.models.application import Application
from volunteer_system.models.application_status_log import ApplicationStatusLog
from volunteer_system.models.department import Department, ActivityCategory
from volunteer_system.models.enums import ActivityStatus
from volunteer_system.models.user import User
from volunteer_system.schemas.activity import (
    ActivityWrite,
    CategoryCreate,
    DepartmentCreate,
)
from volunteer_system.services.locking import lock_activity_row

logger = logging.getLogger(__name__)

ACTIVITY_TIME_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M")

# Activities starting closer than this to one the user already
# applied to are not offered as available.
SCHEDULE_CONFLICT_WINDOW = timedelta(hours=2)


def parse_activity_time(raw: str) -> datetime:
    """
    Parse "YYYY-MM-DD HH:MM[:SS]" in local time.

    A "T" separator is accepted and treated as a space.
    """
    value = (raw or "").strip().replace("T", " ")
    for fmt in ACTIVITY_TIME_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise VolunteerSystemError(
        ErrorKind.INVALID_TIME, f"invalid activity time: {raw!r}"
    )


class ActivityService:

    def __init__(self, db: Session):
        self.db = db

    # --- Lookups ---

    def create_department(self, request: DepartmentCreate) -> Department:
        department = Department(name=request.name)
        self.db.add(department)
        self._flush("failed to create department")
        return department

    def create_category(self, request: CategoryCreate) -> ActivityCategory:
        category = ActivityCategory(name=request.name)
        self.db.add(category)
        self._flush("failed to create category")
        return category

    # --- Writes ---

    def create_activity(self, request: ActivityWrite) -> Activity:
        """Create a new activity in ACTIVE status."""
        activity_time = parse_activity_time(request.activity_time)
        self._validate_references(request)

        activity = Activity(
            dept_id=request.dept_id,
            category_id=request.category_id,
            creator_id=request.creator_id,
            title=request.title,
            description=request.description,
            activity_time=activity_time,
            location=request.location,
            max_people=request.max_people,
            status=ActivityStatus.ACTIVE,
        )
        self.db.add(activity)
        self._flush("failed to create activity")
        logger.info(
            "activity_created",
            extra={"activity_id": activity.id, "user_id": activity.creator_id},
        )
        return activity

    def update_activity(self, activity_id: int, request: ActivityWrite) -> Activity:
        """
        Replace every editable field of an activity.

        The status is left alone: an expired activity stays
        expired even if it is moved into the future.
        """
        activity_time = parse_activity_time(request.activity_time)

        activity = self.get_activity(activity_id)
        self._validate_references(request)

        activity.dept_id = request.dept_id
        activity.category_id = request.category_id
        activity.creator_id = request.creator_id
        activity.title = request.title
        activity.description = request.description
        activity.activity_time = activity_time
        activity.location = request.location
        activity.max_people = request.max_people

        self._flush("failed to update activity")
        return activity

    def delete_activity(self, activity_id: int) -> None:
        """
        Delete an activity and everything that depends on it.

        Order matters for referential integrity: status logs
        first, then applications, then the activity row.
        """
        activity = lock_activity_row(self.db, activity_id)
        if not activity:
            raise NotFoundError("activity", activity_id)

        application_ids = select(Application.id).where(
            Application.activity_id == activity_id
        )
        try:
            logs = self.db.execute(
                delete(ApplicationStatusLog)
                .where(ApplicationStatusLog.application_id.in_(application_ids))
                .execution_options(synchronize_session="fetch")
            )
            applications = self.db.execute(
                delete(Application)
                .where(Application.activity_id == activity_id)
                .execution_options(synchronize_session="fetch")
            )
            self.db.delete(activity)
            self.db.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"failed to delete activity {activity_id}") from e

        logger.info(
            "activity_deleted applications=%s logs=%s",
            applications.rowcount,
            logs.rowcount,
            extra={"activity_id": activity_id},
        )

    # --- Reads ---

    def get_activity(self, activity_id: int) -> Activity:
        activity = self.db.get(Activity, activity_id)
        if not activity:
            raise NotFoundError("activity", activity_id)
        return activity

    def get_activity_detail(self, activity_id: int) -> dict:
        """Activity joined with department, category and creator names."""
        row = self.db.execute(
            select(
                Activity,
                func.coalesce(Department.name, ""),
                func.coalesce(ActivityCategory.name, ""),
                func.coalesce(User.username, ""),
            )
            .outerjoin(Department, Activity.dept_id == Department.id)
            .outerjoin(ActivityCategory, Activity.category_id == ActivityCategory.id)
            .outerjoin(User, Activity.creator_id == User.id)
            .where(Activity.id == activity_id)
        ).first()

        if row is None:
            raise NotFoundError("activity", activity_id)

        activity, dept_name, category_name, creator_name = row
        return {
            "id": activity.id,
            "dept_id": activity.dept_id,
            "category_id": activity.category_id,
            "creator_id": activity.creator_id,
            "title": activity.title,
            "description": activity.description,
            "activity_time": activity.activity_time,
            "location": activity.location,
            "max_people": activity.max_people,
            "status": activity.status,
            "dept_name": dept_name,
            "category_name": category_name,
            "creator_name": creator_name,
        }

    def list_activities(
        self,
        dept_id: int | None = None,
        category_id: int | None = None,
    ) -> list[Activity]:
        """Active activities, latest scheduled first."""
        query = select(Activity).where(Activity.status == ActivityStatus.ACTIVE)
        if dept_id is not None:
            query = query.where(Activity.dept_id == dept_id)
        if category_id is not None:
            query = query.where(Activity.category_id == category_id)

        activities = self.db.execute(
            query.order_by(Activity.activity_time.desc())
        ).scalars().all()
        return list(activities)

    def search_activities(self, keyword: str) -> list[Activity]:
        """Active activities whose title contains keyword, ignoring case."""
        activities = self.db.execute(
            select(Activity)
            .where(
                Activity.status == ActivityStatus.ACTIVE,
                func.lower(Activity.title).contains(keyword.lower(), autoescape=True),
            )
            .order_by(Activity.activity_time.desc())
        ).scalars().all()
        return list(activities)

    def list_available_activities(self, user_id: int) -> list[dict]:
        """
        Active activities a user could still apply to.

        Excludes activities the user already applied to, activities
        that start within two hours of an active activity the user
        applied to, and activities whose applications (of any status)
        already fill max_people. Soonest first.
        """
        applied_ids = select(Application.activity_id).where(
            Application.user_id == user_id
        )

        booked_times = self.db.execute(
            select(Activity.activity_time).where(
                Activity.id.in_(applied_ids),
                Activity.status == ActivityStatus.ACTIVE,
            )
        ).scalars().all()

        apply_counts = (
            select(
                Application.activity_id,
                func.count(Application.id).label("apply_count"),
            )
            .group_by(Application.activity_id)
            .subquery()
        )

        rows = self.db.execute(
            select(
                Activity,
                func.coalesce(apply_counts.c.apply_count, 0),
                func.coalesce(Department.name, "unassigned"),
                func.coalesce(ActivityCategory.name, "uncategorized"),
            )
            .outerjoin(apply_counts, Activity.id == apply_counts.c.activity_id)
            .outerjoin(Department, Activity.dept_id == Department.id)
            .outerjoin(ActivityCategory, Activity.category_id == ActivityCategory.id)
            .where(
                Activity.status == ActivityStatus.ACTIVE,
                Activity.id.not_in(applied_ids),
            )
            .order_by(Activity.activity_time.asc())
        ).all()

        available = []
        for activity, apply_count, dept_name, category_name in rows:
            remaining = activity.max_people - apply_count
            if remaining <= 0:
                continue
            if any(
                abs(activity.activity_time - booked) < SCHEDULE_CONFLICT_WINDOW
                for booked in booked_times
            ):
                continue
            available.append({
                "id": activity.id,
                "title": activity.title,
                "description": activity.description,
                "location": activity.location,
                "activity_time": activity.activity_time,
                "max_people": activity.max_people,
                "current_apply_count": apply_count,
                "remaining_slots": remaining,
                "dept_name": dept_name,
                "category_name": category_name,
            })
        return available

    def is_activity_expired(self, activity_id: int, now: datetime | None = None) -> bool:
        """True if the scheduled time has passed or the sweeper already expired it."""
        activity = self.get_activity(activity_id)
        now = now or datetime.now()
        return activity.activity_time < now or activity.status == ActivityStatus.EXPIRED

    # --- Helpers ---

    def _validate_references(self, request: ActivityWrite) -> None:
        if not self.db.get(Department, request.dept_id):
            raise NotFoundError("department", request.dept_id)
        if not self.db.get(ActivityCategory, request.category_id):
            raise NotFoundError("category", request.category_id)
        if not self.db.get(User, request.creator_id):
            raise NotFoundError("user", request.creator_id)

    def _flush(self, failure_message: str) -> None:
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            raise StorageError(failure_message) from e
