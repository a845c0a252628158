"""
Role model.

Roles group users (administrators and ordinary volunteers).
Authorization policy is not enforced here; the role is kept
so that user records carry it.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from volunteer_system.models.base import Base

DEFAULT_ROLE_NAMES = ("admin", "user")


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    users: Mapped[list["User"]] = relationship(back_populates="role")

    def __repr__(self) -> str:
        return f"<Role {self.name}>"
