"""
Translation ORM model.

One row per (project, key, locale). Rows are pre-materialized when a key
or locale is added, then updated by manual edits and translation jobs.
updated_at is the optimistic-concurrency token: every write must bump it
and conditional writes compare against it.

Dependencies: sqlalchemy, i18n_backend.boundary.db.base
System role: Shared translation store
"""

import enum
from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    ForeignKeyConstraint,
    String,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from i18n_backend.boundary.db.base import Base, utcnow, value_enum


class UpdateSource(str, enum.Enum):
    """
    Origin of the last write to a translation.

    USER: Manual edit
    SYSTEM: Machine translation written by a job
    """

    USER = "user"
    SYSTEM = "system"


class TranslationModel(Base):
    """
    Translation ORM model.

    Attributes:
        project_id: Owning project (part of primary key)
        key_id: Translated key (part of primary key)
        locale: Locale code (part of primary key)
        value: Translated text; NULL means missing
        is_machine_translated: True when written by a translation job
        updated_source: USER or SYSTEM
        updated_by_user_id: Editing user; NULL for system writes
        updated_at: Last write timestamp, used as the lock token
    """

    __tablename__ = "translations"
    __table_args__ = (
        ForeignKeyConstraint(
            ["project_id", "locale"],
            ["project_locales.project_id", "project_locales.locale"],
            ondelete="CASCADE",
        ),
        CheckConstraint("value IS NULL OR length(value) <= 250", name="translations_value_length"),
    )

    project_id: Mapped[UUID] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    )
    key_id: Mapped[UUID] = mapped_column(
        ForeignKey("keys.id", ondelete="CASCADE"),
        primary_key=True,
    )
    locale: Mapped[str] = mapped_column(String(8), primary_key=True)

    value: Mapped[str | None] = mapped_column(String(250), nullable=True)
    is_machine_translated: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    updated_source: Mapped[UpdateSource] = mapped_column(
        value_enum(UpdateSource),
        nullable=False,
        default=UpdateSource.USER,
    )
    updated_by_user_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
