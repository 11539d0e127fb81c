# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the OpenEd catalog tables.

The catalog schema is owned by the OpenEd application; these models map
only the columns the catalog tools read. No migrations are managed here.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for catalog models."""


class Resource(Base):
    """A video, game or assessment in the catalog."""

    __tablename__ = "resources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str | None] = mapped_column(String(255))
    share_url: Mapped[str | None] = mapped_column(String(255))
    publisher_id: Mapped[int | None] = mapped_column(Integer)
    contribution_id: Mapped[int | None] = mapped_column(Integer)
    description: Mapped[str | None] = mapped_column(Text)
    resource_type_id: Mapped[int | None] = mapped_column(Integer)
    youtube_id: Mapped[str | None] = mapped_column(String(255))
    usage_count: Mapped[int | None] = mapped_column(Integer)
    min_grade: Mapped[int | None] = mapped_column(Integer)
    max_grade: Mapped[int | None] = mapped_column(Integer)

    def __repr__(self) -> str:
        return f"<Resource(id={self.id}, title={self.title!r})>"


class Standard(Base):
    """An educational standard, grouped under a category."""

    __tablename__ = "standards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    identifier: Mapped[str | None] = mapped_column(String(255))
    grade: Mapped[str | None] = mapped_column(String(255))
    title: Mapped[str | None] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)
    category_id: Mapped[int | None] = mapped_column(Integer)
    subject: Mapped[str | None] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<Standard(id={self.id}, identifier={self.identifier!r})>"


class Alignment(Base):
    """Alignment of a resource to a standard."""

    __tablename__ = "alignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    resource_id: Mapped[int] = mapped_column(ForeignKey("resources.id"), index=True)
    standard_id: Mapped[int] = mapped_column(ForeignKey("standards.id"), index=True)
    status: Mapped[int | None] = mapped_column(Integer)


class ResourceSubject(Base):
    """Many-to-many association between resources and subjects."""

    __tablename__ = "resources_subjects"

    resource_id: Mapped[int] = mapped_column(
        ForeignKey("resources.id"), primary_key=True
    )
    subject_id: Mapped[int] = mapped_column(Integer, primary_key=True)


class User(Base):
    """A catalog user (teacher or student)."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255))
    username: Mapped[str | None] = mapped_column(String(255))
    role: Mapped[str | None] = mapped_column(String(255))
    district_state: Mapped[str | None] = mapped_column(String(255))
    provider: Mapped[str | None] = mapped_column(String(255))
    grades_range: Mapped[str | None] = mapped_column(String(255))


class AssessmentRun(Base):
    """One user's attempt at an assessment resource."""

    __tablename__ = "assessment_runs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    assessment_id: Mapped[int] = mapped_column(ForeignKey("resources.id"))
    finished_at: Mapped[datetime | None] = mapped_column(DateTime)
    score: Mapped[float | None] = mapped_column(Float)
    first_run: Mapped[bool | None] = mapped_column(Boolean)
