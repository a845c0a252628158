"""
Expiration sweeper — background job that expires past-due activities.

Every tick it loads the active activities and flips each one whose
scheduled time is before "now" to EXPIRED. A failure on one activity
is logged and the sweep carries on with the rest. Applications are
never touched: only new applications are blocked, by the active
status check in ApplicationService.apply.
"""

import logging
from datetime import datetime
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from volunteer_system.models.activity import Activity
from volunteer_system.models.enums import ActivityStatus

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "expire_activities"


class ExpirationSweeper:
    """
    Runs sweep() on a fixed interval in a background thread.

    The sweeper opens its own session for every tick from the
    session factory it was given. shutdown() stops the schedule.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        interval_seconds: int = 60,
    ):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.scheduler = BackgroundScheduler()

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self) -> None:
        if self.scheduler.running:
            return
        self.scheduler.add_job(
            func=self.sweep,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=SWEEP_JOB_ID,
            name="Expire past-due activities",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        logger.info("Expiration sweeper started (every %ss)", self.interval_seconds)

    def shutdown(self, wait: bool = True) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)
            logger.info("Expiration sweeper shutdown")

    def sweep(self, now: datetime | None = None) -> list[int]:
        """
        Run one tick. Returns the ids of the activities it expired.

        Running it again with nothing new past due is a no-op.
        """
        now = now or datetime.now()
        expired: list[int] = []

        db = self.session_factory()
        try:
            try:
                candidates = db.execute(
                    select(Activity.id, Activity.title, Activity.activity_time)
                    .where(Activity.status == ActivityStatus.ACTIVE)
                ).all()
            except SQLAlchemyError:
                logger.exception("Failed to load active activities")
                return expired

            for activity_id, title, activity_time in candidates:
                if not activity_time < now:
                    continue
                try:
                    changed = self._expire(db, activity_id)
                    db.commit()
                except SQLAlchemyError:
                    db.rollback()
                    logger.exception(
                        "Failed to expire activity",
                        extra={"activity_id": activity_id},
                    )
                    continue
                if changed:
                    expired.append(activity_id)
                    logger.info(
                        "Activity expired: %s",
                        title,
                        extra={"activity_id": activity_id},
                    )
        finally:
            db.close()

        logger.info("Sweep finished", extra={"expired_count": len(expired)})
        return expired

    def _expire(self, db: Session, activity_id: int) -> bool:
        """Flip one activity to EXPIRED if it is still ACTIVE."""
        result = db.execute(
            update(Activity)
            .where(
                Activity.id == activity_id,
                Activity.status == ActivityStatus.ACTIVE,
            )
            .values(status=ActivityStatus.EXPIRED)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
