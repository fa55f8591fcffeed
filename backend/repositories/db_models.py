"""
Database models using SQLAlchemy 2.0 style with Mapped type hints.

The statistics engine only ever reads these tables; they are written by
init_db.py, migrations and the rest of the platform.
"""

import enum
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repositories.database import Base


class ProjectType(str, enum.Enum):
    """Kind of participation a project collects."""

    IDEATION = "ideation"
    NATIVE_SURVEY = "native_survey"  # Items are form responses, not ideas


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    username: Mapped[str] = mapped_column(
        String, unique=True, index=True, nullable=False
    )
    display_name: Mapped[str] = mapped_column(String, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    is_global_admin: Mapped[bool] = mapped_column(Boolean, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    # Relationships
    ideas: Mapped[List["Idea"]] = relationship("Idea", back_populates="author")
    memberships: Mapped[List["Membership"]] = relationship(
        "Membership", back_populates="user", cascade="all, delete-orphan"
    )
    groups: Mapped[List["Group"]] = relationship(
        "Group", secondary="memberships", viewonly=True
    )


class Group(Base):
    """A set of users, used to filter ideas by author membership."""

    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title_en: Mapped[str] = mapped_column(String, nullable=False)
    title_fr: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    memberships: Mapped[List["Membership"]] = relationship(
        "Membership", back_populates="group", cascade="all, delete-orphan"
    )


class Membership(Base):
    __tablename__ = "memberships"
    __table_args__ = (
        UniqueConstraint("user_id", "group_id", name="uq_membership_user_group"),
        Index("ix_memberships_group_user", "group_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("groups.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    user: Mapped["User"] = relationship("User", back_populates="memberships")
    group: Mapped["Group"] = relationship("Group", back_populates="memberships")


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title_en: Mapped[str] = mapped_column(String, nullable=False)
    title_fr: Mapped[str] = mapped_column(String, nullable=False)
    project_type: Mapped[ProjectType] = mapped_column(
        Enum(ProjectType), default=ProjectType.IDEATION, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    ideas: Mapped[List["Idea"]] = relationship("Idea", back_populates="project")


class Topic(Base):
    __tablename__ = "topics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    title_en: Mapped[str] = mapped_column(String, nullable=False)
    title_fr: Mapped[str] = mapped_column(String, nullable=False)

    idea_topics: Mapped[List["IdeaTopic"]] = relationship(
        "IdeaTopic", back_populates="topic"
    )


class IdeaStatus(Base):
    """
    Workflow status an idea can be in.

    Whether a status expects an official answer is configuration carried by
    the row itself (`requires_feedback`), not by a subclass.
    """

    __tablename__ = "idea_statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    title_en: Mapped[str] = mapped_column(String, nullable=False)
    title_fr: Mapped[str] = mapped_column(String, nullable=False)
    ordering: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    requires_feedback: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    ideas: Mapped[List["Idea"]] = relationship("Idea", back_populates="status")


class Idea(Base):
    __tablename__ = "ideas"
    __table_args__ = (
        Index("ix_ideas_published_at", "published_at"),
        Index("ix_ideas_project_published", "project_id", "published_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id"), nullable=False
    )
    # Nullable: anonymous ideas have no author
    author_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    idea_status_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("idea_statuses.id"), nullable=False
    )
    # Drafts have no publication time and never count in statistics
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    # Relationships
    project: Mapped["Project"] = relationship("Project", back_populates="ideas")
    author: Mapped[Optional["User"]] = relationship("User", back_populates="ideas")
    status: Mapped["IdeaStatus"] = relationship("IdeaStatus", back_populates="ideas")
    idea_topics: Mapped[List["IdeaTopic"]] = relationship(
        "IdeaTopic", back_populates="idea", cascade="all, delete-orphan"
    )
    topics: Mapped[List["Topic"]] = relationship(
        "Topic", secondary="idea_topics", viewonly=True
    )
    official_feedbacks: Mapped[List["OfficialFeedback"]] = relationship(
        "OfficialFeedback", back_populates="idea", cascade="all, delete-orphan"
    )


class IdeaTopic(Base):
    __tablename__ = "idea_topics"
    __table_args__ = (
        UniqueConstraint("idea_id", "topic_id", name="uq_idea_topic"),
        Index("ix_idea_topics_topic", "topic_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    idea_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ideas.id"), nullable=False
    )
    topic_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("topics.id"), nullable=False
    )

    idea: Mapped["Idea"] = relationship("Idea", back_populates="idea_topics")
    topic: Mapped["Topic"] = relationship("Topic", back_populates="idea_topics")


class OfficialFeedback(Base):
    """An official answer posted on an idea by the organization."""

    __tablename__ = "official_feedbacks"
    __table_args__ = (Index("ix_official_feedbacks_idea", "idea_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    idea_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ideas.id"), nullable=False
    )
    author_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    idea: Mapped["Idea"] = relationship("Idea", back_populates="official_feedbacks")
