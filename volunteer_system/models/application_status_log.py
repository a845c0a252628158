"""
Application status log model.

One row is appended every time an application's status is set,
including the initial pending state. Rows are never updated;
they disappear only when their application is cancelled or its
activity is deleted.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from volunteer_system.models.base import Base
from volunteer_system.models.enums import ApplicationStatus, enum_values


class ApplicationStatusLog(Base):
    __tablename__ = "application_status_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    application_id: Mapped[int] = mapped_column(
        ForeignKey("applications.id"), nullable=False, index=True
    )
    # Nullable so system-initiated entries can be recorded without a user.
    handler_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    log_status: Mapped[ApplicationStatus] = mapped_column(
        SAEnum(
            ApplicationStatus,
            name="application_status_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
    )
    handle_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<ApplicationStatusLog application={self.application_id} "
            f"{self.log_status.value}>"
        )
