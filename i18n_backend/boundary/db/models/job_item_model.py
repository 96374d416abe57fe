"""
Translation job item ORM model.

One row per (job, key). Created pending at admission and resolved exactly
once by the execution loop; items never reached before a cancellation
stay pending.

Dependencies: sqlalchemy, i18n_backend.boundary.db.base
System role: Per-key outcome tracking for translation jobs
"""

import enum
from uuid import UUID

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from i18n_backend.boundary.db.base import Base, TimestampMixin, UUIDMixin, value_enum


class ItemStatus(str, enum.Enum):
    """
    Job item outcome states.

    PENDING: Not processed yet
    COMPLETED: Translation written
    FAILED: Provider error after retries
    SKIPPED: Not written (concurrent edit, missing source or target row)
    """

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self is not ItemStatus.PENDING

    def can_transition_to(self, target: "ItemStatus") -> bool:
        """Only pending items can be resolved, and only to a terminal state."""
        return self is ItemStatus.PENDING and target.is_terminal


class ItemErrorCode(str, enum.Enum):
    """Error codes recorded on failed or skipped items."""

    SOURCE_NOT_FOUND = "SOURCE_NOT_FOUND"
    TARGET_NOT_FOUND = "TARGET_NOT_FOUND"
    LOCK_CONFLICT = "LOCK_CONFLICT"
    TRANSLATION_ERROR = "TRANSLATION_ERROR"
    INVALID_TRANSLATION = "INVALID_TRANSLATION"
    PROVIDER_TIMEOUT = "PROVIDER_TIMEOUT"
    RATE_LIMIT = "RATE_LIMIT"


class TranslationJobItemModel(Base, UUIDMixin, TimestampMixin):
    """
    Translation job item ORM model.

    Attributes:
        id: UUID primary key
        job_id: Owning job (cascade delete)
        key_id: Key to translate
        status: Outcome state
        error_code: Short error code for failed/skipped items
        error_message: Human-readable error detail

    Constraints:
        (job_id, key_id): UNIQUE
    """

    __tablename__ = "translation_job_items"
    __table_args__ = (
        UniqueConstraint("job_id", "key_id", name="translation_job_items_unique_per_job"),
    )

    job_id: Mapped[UUID] = mapped_column(
        ForeignKey("translation_jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    key_id: Mapped[UUID] = mapped_column(
        ForeignKey("keys.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[ItemStatus] = mapped_column(
        value_enum(ItemStatus),
        nullable=False,
        default=ItemStatus.PENDING,
    )
    error_code: Mapped[str | None] = mapped_column(String(32), nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    job = relationship("TranslationJobModel", back_populates="items")
