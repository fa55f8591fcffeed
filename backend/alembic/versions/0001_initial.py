"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-01-12 00:00:00.000000

Creates the tables the idea statistics engine reads: users and groups,
projects, topics, idea statuses, ideas with their topics, and official
feedback.
"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

project_type = sa.Enum("IDEATION", "NATIVE_SURVEY", name="projecttype")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("is_global_admin", sa.Boolean(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "groups",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title_en", sa.String(), nullable=False),
        sa.Column("title_fr", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_groups_id", "groups", ["id"])

    op.create_table(
        "memberships",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "group_id", sa.Integer(), sa.ForeignKey("groups.id"), nullable=False
        ),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("user_id", "group_id", name="uq_membership_user_group"),
    )
    op.create_index("ix_memberships_id", "memberships", ["id"])
    op.create_index(
        "ix_memberships_group_user", "memberships", ["group_id", "user_id"]
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title_en", sa.String(), nullable=False),
        sa.Column("title_fr", sa.String(), nullable=False),
        sa.Column("project_type", project_type, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_projects_id", "projects", ["id"])

    op.create_table(
        "topics",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(50), nullable=False, unique=True),
        sa.Column("title_en", sa.String(), nullable=False),
        sa.Column("title_fr", sa.String(), nullable=False),
    )
    op.create_index("ix_topics_id", "topics", ["id"])

    op.create_table(
        "idea_statuses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(50), nullable=False, unique=True),
        sa.Column("title_en", sa.String(), nullable=False),
        sa.Column("title_fr", sa.String(), nullable=False),
        sa.Column("ordering", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "requires_feedback",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
    )
    op.create_index("ix_idea_statuses_id", "idea_statuses", ["id"])

    op.create_table(
        "ideas",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column(
            "project_id", sa.Integer(), sa.ForeignKey("projects.id"), nullable=False
        ),
        sa.Column("author_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column(
            "idea_status_id",
            sa.Integer(),
            sa.ForeignKey("idea_statuses.id"),
            nullable=False,
        ),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_ideas_id", "ideas", ["id"])
    op.create_index("ix_ideas_published_at", "ideas", ["published_at"])
    op.create_index(
        "ix_ideas_project_published", "ideas", ["project_id", "published_at"]
    )

    op.create_table(
        "idea_topics",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("idea_id", sa.Integer(), sa.ForeignKey("ideas.id"), nullable=False),
        sa.Column(
            "topic_id", sa.Integer(), sa.ForeignKey("topics.id"), nullable=False
        ),
        sa.UniqueConstraint("idea_id", "topic_id", name="uq_idea_topic"),
    )
    op.create_index("ix_idea_topics_id", "idea_topics", ["id"])
    op.create_index("ix_idea_topics_topic", "idea_topics", ["topic_id"])

    op.create_table(
        "official_feedbacks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("idea_id", sa.Integer(), sa.ForeignKey("ideas.id"), nullable=False),
        sa.Column("author_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_official_feedbacks_id", "official_feedbacks", ["id"])
    op.create_index("ix_official_feedbacks_idea", "official_feedbacks", ["idea_id"])


def downgrade() -> None:
    """Drop every table, dependents first.

    WARNING: This results in data loss.
    """
    op.drop_table("official_feedbacks")
    op.drop_table("idea_topics")
    op.drop_table("ideas")
    op.drop_table("idea_statuses")
    op.drop_table("topics")
    op.drop_table("projects")
    op.drop_table("memberships")
    op.drop_table("groups")
    op.drop_table("users")
    project_type.drop(op.get_bind(), checkfirst=True)
