"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

# Both enum types are created once up front; the columns only reference them.
activity_status = postgresql.ENUM(
    "active", "expired", name="activity_status_enum", create_type=False
)
application_status = postgresql.ENUM(
    "pending", "approved", "rejected",
    name="application_status_enum", create_type=False,
)


def upgrade() -> None:
    bind = op.get_bind()
    activity_status.create(bind, checkfirst=True)
    application_status.create(bind, checkfirst=True)

    op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
    )
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("roles.id"), nullable=False),
        sa.Column("username", sa.String(100), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_role_id", "users", ["role_id"])
    op.create_table(
        "departments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
    )
    op.create_table(
        "activity_categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
    )
    op.create_table(
        "activities",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("dept_id", sa.Integer(), sa.ForeignKey("departments.id"), nullable=False),
        sa.Column(
            "category_id", sa.Integer(),
            sa.ForeignKey("activity_categories.id"), nullable=False,
        ),
        sa.Column("creator_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("activity_time", sa.DateTime(), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("max_people", sa.Integer(), nullable=False),
        sa.Column("status", activity_status, nullable=False),
        sa.CheckConstraint("max_people > 0", name="ck_activities_max_people_positive"),
    )
    op.create_index("ix_activities_dept_id", "activities", ["dept_id"])
    op.create_index("ix_activities_category_id", "activities", ["category_id"])
    op.create_index("ix_activities_creator_id", "activities", ["creator_id"])
    op.create_index("ix_activities_activity_time", "activities", ["activity_time"])
    op.create_index("ix_activities_status", "activities", ["status"])
    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "activity_id", sa.Integer(), sa.ForeignKey("activities.id"), nullable=False
        ),
        sa.Column("apply_time", sa.DateTime(), nullable=False),
        sa.Column("current_status", application_status, nullable=False),
        sa.UniqueConstraint(
            "user_id", "activity_id", name="uq_applications_user_activity"
        ),
    )
    op.create_index("ix_applications_user_id", "applications", ["user_id"])
    op.create_index("ix_applications_activity_id", "applications", ["activity_id"])
    op.create_table(
        "application_status_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "application_id", sa.Integer(),
            sa.ForeignKey("applications.id"), nullable=False,
        ),
        sa.Column("handler_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("log_status", application_status, nullable=False),
        sa.Column("handle_time", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_application_status_logs_application_id",
        "application_status_logs",
        ["application_id"],
    )


def downgrade() -> None:
    op.drop_table("application_status_logs")
    op.drop_table("applications")
    op.drop_table("activities")
    op.drop_table("activity_categories")
    op.drop_table("departments")
    op.drop_table("users")
    op.drop_table("roles")
    application_status.drop(op.get_bind(), checkfirst=True)
    activity_status.drop(op.get_bind(), checkfirst=True)
