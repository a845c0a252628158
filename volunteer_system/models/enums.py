"""
Shared enumerations for database models.

Status columns are closed enumerations, so a typo such as
"aproved" can never be stored. Values are the lower-case
strings used on the wire and in the database.
"""

import enum


class ActivityStatus(str, enum.Enum):
    """Lifecycle of an activity. Only the sweeper moves it forward."""
    ACTIVE = "active"
    EXPIRED = "expired"


class ApplicationStatus(str, enum.Enum):
    """Review state of a user's application to an activity."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, raw: str) -> "ApplicationStatus | None":
        """Case-insensitive, whitespace-tolerant lookup. None if unknown."""
        value = (raw or "").strip().lower()
        for member in cls:
            if member.value == value:
                return member
        return None


# Statuses an applicant may still withdraw from.
CANCELLABLE_STATUSES = frozenset(
    {ApplicationStatus.PENDING, ApplicationStatus.APPROVED}
)


def enum_values(enum_cls) -> list[str]:
    """Persist enum values ("active") instead of member names ("ACTIVE")."""
    return [member.value for member in enum_cls]
