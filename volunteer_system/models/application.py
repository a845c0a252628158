"""
Application model.

A user's request to attend one activity. At most one
application exists per (user, activity) pair; a second
apply is rejected rather than merged into the first.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from volunteer_system.models.base import Base
from volunteer_system.models.enums import ApplicationStatus, enum_values


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("user_id", "activity_id", name="uq_applications_user_activity"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    activity_id: Mapped[int] = mapped_column(
        ForeignKey("activities.id"), nullable=False, index=True
    )
    apply_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    current_status: Mapped[ApplicationStatus] = mapped_column(
        SAEnum(
            ApplicationStatus,
            name="application_status_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )

    user: Mapped["User"] = relationship()
    activity: Mapped["Activity"] = relationship()

    def __repr__(self) -> str:
        return (
            f"<Application {self.id} user={self.user_id} "
            f"activity={self.activity_id} ({self.current_status.value})>"
        )
