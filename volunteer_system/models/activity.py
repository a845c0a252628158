"""
Activity model.

A volunteer event with a schedule and a capacity. The status
has a one-way state machine: an active activity is expired by
the sweeper once its scheduled time has passed, and there is
no way back.
"""

from datetime import datetime

from sqlalchemy import (
    String, Text, DateTime, ForeignKey, CheckConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from volunteer_system.models.base import Base
from volunteer_system.models.enums import ActivityStatus, enum_values


class Activity(Base):
    __tablename__ = "activities"
    __table_args__ = (
        CheckConstraint("max_people > 0", name="ck_activities_max_people_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    dept_id: Mapped[int] = mapped_column(
        ForeignKey("departments.id"), nullable=False, index=True
    )
    category_id: Mapped[int] = mapped_column(
        ForeignKey("activity_categories.id"), nullable=False, index=True
    )
    creator_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    activity_time: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, index=True
    )
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    max_people: Mapped[int] = mapped_column(nullable=False)
    status: Mapped[ActivityStatus] = mapped_column(
        SAEnum(
            ActivityStatus,
            name="activity_status_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=ActivityStatus.ACTIVE,
        index=True,
    )

    department: Mapped["Department"] = relationship()
    category: Mapped["ActivityCategory"] = relationship()
    creator: Mapped["User"] = relationship()

    def has_started(self, now: datetime) -> bool:
        """True once the scheduled time is not strictly in the future."""
        return self.activity_time <= now

    def __repr__(self) -> str:
        return f"<Activity {self.id} {self.title!r} ({self.status.value})>"
