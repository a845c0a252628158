"""
Application service — the application lifecycle.

This service owns every change to an application's status:
1. apply creates it as pending
2. update_status moves it between pending, approved and rejected
3. cancel deletes it together with its whole audit trail

Every status that is set is also appended to the status log,
including the initial pending state and repeated settings of
the same status.

Capacity rule: the number of approved applications for an
activity never exceeds its max_people. The count and the write
that depends on it run under the activity's lock, and the
service commits, or rolls back on a rule failure, before releasing
that lock. That is why, unlike the activity service, this service
ends its own unit of work.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator

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
from volunteer_system.models.enums import (
    ActivityStatus,
    ApplicationStatus,
    CANCELLABLE_STATUSES,
)
from volunteer_system.models.user import User
from volunteer_system.services.locking import ActivityLocks, lock_activity_row

logger = logging.getLogger(__name__)


class ApplicationService:

    def __init__(self, db: Session, locks: ActivityLocks):
        self.db = db
        self.locks = locks

    # --- Lifecycle ---

    def apply(self, user_id: int, activity_id: int) -> Application:
        """
        Register a user for an activity.

        Checks, in order: the user exists, the activity exists,
        the activity is active, it has not started yet, the user
        has not applied before, and approved applications are
        still below max_people. The application and its first
        log entry are committed together or not at all.
        """
        if not self.db.get(User, user_id):
            raise NotFoundError("user", user_id)

        with self._serialized(activity_id):
            activity = lock_activity_row(self.db, activity_id)
            if not activity:
                raise NotFoundError("activity", activity_id)

            now = datetime.now()

            if activity.status != ActivityStatus.ACTIVE:
                raise VolunteerSystemError(ErrorKind.ACTIVITY_CLOSED, "activity closed")

            if activity.has_started(now):
                raise VolunteerSystemError(ErrorKind.ACTIVITY_EXPIRED, "activity expired")

            existing = self.db.execute(
                select(Application.id).where(
                    Application.user_id == user_id,
                    Application.activity_id == activity_id,
                )
            ).first()
            if existing:
                raise VolunteerSystemError(ErrorKind.ALREADY_APPLIED, "already applied")

            self._ensure_capacity(activity)

            application = Application(
                user_id=user_id,
                activity_id=activity_id,
                apply_time=now,
                current_status=ApplicationStatus.PENDING,
            )
            try:
                self.db.add(application)
                self.db.flush()
                self._append_log(application.id, user_id, ApplicationStatus.PENDING, now)
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                raise StorageError("failed to save application") from e

        logger.info(
            "application_created",
            extra={
                "application_id": application.id,
                "activity_id": activity_id,
                "user_id": user_id,
            },
        )
        return application

    def update_status(
        self, application_id: int, raw_status: str, handler_id: int
    ) -> Application:
        """
        Set an application's status and log who did it.

        Any status can follow any other. Capacity is re-checked
        only when moving into approved from another status, so
        approving an already approved application always works.
        """
        status = ApplicationStatus.parse(raw_status)
        if status is None:
            raise VolunteerSystemError(
                ErrorKind.INVALID_STATUS, f"invalid status: {raw_status!r}"
            )

        application = self.db.get(Application, application_id)
        if not application:
            raise NotFoundError("application", application_id)

        if not self.db.get(User, handler_id):
            raise NotFoundError("user", handler_id)

        activity_id = application.activity_id
        with self._serialized(activity_id):
            activity = lock_activity_row(self.db, activity_id)
            if not activity:
                raise NotFoundError("activity", activity_id)

            application = self._reload(application_id)

            if (
                status == ApplicationStatus.APPROVED
                and application.current_status != ApplicationStatus.APPROVED
            ):
                self._ensure_capacity(activity)

            previous = application.current_status
            now = datetime.now()
            try:
                application.current_status = status
                self.db.flush()
                self._append_log(application.id, handler_id, status, now)
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                raise StorageError("failed to update application status") from e

        logger.info(
            "application_status_changed from=%s",
            previous.value,
            extra={
                "application_id": application_id,
                "activity_id": activity_id,
                "handler_id": handler_id,
                "status": status.value,
            },
        )
        return application

    def cancel(self, application_id: int) -> None:
        """
        Withdraw an application before its activity starts.

        Only pending and approved applications can be withdrawn.
        The application and all of its log entries are deleted;
        the cancellation itself is not logged.
        """
        application = self.db.get(Application, application_id)
        if not application:
            raise NotFoundError("application", application_id)

        activity_id = application.activity_id
        with self._serialized(activity_id):
            activity = lock_activity_row(self.db, activity_id)
            if not activity:
                raise NotFoundError("activity", activity_id)

            application = self._reload(application_id)

            if activity.has_started(datetime.now()):
                raise VolunteerSystemError(
                    ErrorKind.ACTIVITY_STARTED,
                    "activity already started, cannot cancel",
                )

            if application.current_status not in CANCELLABLE_STATUSES:
                raise VolunteerSystemError(
                    ErrorKind.STATUS_NOT_CANCELLABLE,
                    "status does not allow cancellation",
                )

            try:
                self.db.execute(
                    delete(ApplicationStatusLog)
                    .where(ApplicationStatusLog.application_id == application_id)
                    .execution_options(synchronize_session="fetch")
                )
                self.db.delete(application)
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                raise StorageError("failed to cancel application") from e

        logger.info(
            "application_cancelled",
            extra={"application_id": application_id, "activity_id": activity_id},
        )

    # --- Reads ---

    def get_application(self, application_id: int) -> Application:
        application = self.db.get(Application, application_id)
        if not application:
            raise NotFoundError("application", application_id)
        return application

    def get_status_logs(self, application_id: int) -> list[ApplicationStatusLog]:
        """The application's audit trail, oldest first."""
        self.get_application(application_id)
        logs = self.db.execute(
            select(ApplicationStatusLog)
            .where(ApplicationStatusLog.application_id == application_id)
            .order_by(ApplicationStatusLog.handle_time, ApplicationStatusLog.id)
        ).scalars().all()
        return list(logs)

    def list_activity_applications(self, activity_id: int) -> list[dict]:
        """Applications to one activity with applicant names, newest first."""
        rows = self.db.execute(
            select(Application, User.username)
            .join(User, Application.user_id == User.id)
            .where(Application.activity_id == activity_id)
            .order_by(Application.apply_time.desc(), Application.id.desc())
        ).all()
        return [
            {
                "id": application.id,
                "user_id": application.user_id,
                "username": username,
                "apply_time": application.apply_time,
                "current_status": application.current_status,
            }
            for application, username in rows
        ]

    def list_user_applications(self, user_id: int) -> list[dict]:
        """A user's applications with the activities they target, newest first."""
        rows = self.db.execute(
            select(Application, Activity)
            .join(Activity, Application.activity_id == Activity.id)
            .where(Application.user_id == user_id)
            .order_by(Application.apply_time.desc(), Application.id.desc())
        ).all()
        return [
            {
                "id": application.id,
                "activity_id": activity.id,
                "title": activity.title,
                "activity_time": activity.activity_time,
                "location": activity.location,
                "current_status": application.current_status,
                "apply_time": application.apply_time,
            }
            for application, activity in rows
        ]

    def count_approved(self, activity_id: int) -> int:
        return self.db.execute(
            select(func.count(Application.id)).where(
                Application.activity_id == activity_id,
                Application.current_status == ApplicationStatus.APPROVED,
            )
        ).scalar_one()

    # --- Helpers ---

    @contextmanager
    def _serialized(self, activity_id: int) -> Iterator[None]:
        """
        Hold the activity's lock for a unit of work.

        A rule failure inside the block rolls back before the lock
        is released, so the row lock taken by lock_activity_row
        never outlives the in-process one.
        """
        with self.locks.hold(activity_id):
            try:
                yield
            except VolunteerSystemError:
                self.db.rollback()
                raise

    def _ensure_capacity(self, activity: Activity) -> None:
        """Must be called while holding the activity's lock."""
        if self.count_approved(activity.id) >= activity.max_people:
            raise VolunteerSystemError(ErrorKind.ACTIVITY_FULL, "activity full")

    def _reload(self, application_id: int) -> Application:
        application = self.db.execute(
            select(Application)
            .where(Application.id == application_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if not application:
            raise NotFoundError("application", application_id)
        return application

    def _append_log(
        self,
        application_id: int,
        handler_id: int | None,
        status: ApplicationStatus,
        handled_at: datetime,
    ) -> ApplicationStatusLog:
        log = ApplicationStatusLog(
            application_id=application_id,
            handler_id=handler_id,
            log_status=status,
            handle_time=handled_at,
        )
        self.db.add(log)
        self.db.flush()
        return log
