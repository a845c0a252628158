"""
Department and activity category lookup tables.

Activities are filed under one department and one category.
Both are plain named rows referenced by id.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from volunteer_system.models.base import Base


class Department(Base):
    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<Department {self.name}>"


class ActivityCategory(Base):
    __tablename__ = "activity_categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<ActivityCategory {self.name}>"
