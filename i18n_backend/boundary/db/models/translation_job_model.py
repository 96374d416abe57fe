"""
Translation job ORM model.

One row per bulk translation request. Holds the aggregate counters and
the job status state machine:

    pending -> running -> {completed | failed | cancelled}

A job with no keys goes straight from pending to completed, and a job can
be cancelled (or fail) before it is picked up. Terminal states never change.

Dependencies: sqlalchemy, i18n_backend.boundary.db.base
System role: Job ledger for the translation pipeline
"""

import enum
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from i18n_backend.boundary.db.base import Base, TimestampMixin, UUIDMixin, value_enum


class TranslationMode(str, enum.Enum):
    """
    Key selection modes.

    ALL: Every key in the project
    SELECTED: An explicit, non-empty list of keys
    SINGLE: Exactly one key
    """

    ALL = "all"
    SELECTED = "selected"
    SINGLE = "single"


class JobStatus(str, enum.Enum):
    """
    Translation job lifecycle states.

    PENDING: Admitted, waiting for the execution loop
    RUNNING: Execution loop is processing items
    COMPLETED: Every item was attempted (some may have failed)
    FAILED: Aborted by a persistence fault
    CANCELLED: Stopped by a cancel request
    """

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        """Pending or running."""
        return self in ACTIVE_JOB_STATUSES

    @property
    def is_terminal(self) -> bool:
        """Completed, failed or cancelled."""
        return self in TERMINAL_JOB_STATUSES

    def can_transition_to(self, target: "JobStatus") -> bool:
        """Whether the state machine allows moving from self to target."""
        return target in _JOB_TRANSITIONS[self]


ACTIVE_JOB_STATUSES = frozenset({JobStatus.PENDING, JobStatus.RUNNING})
TERMINAL_JOB_STATUSES = frozenset(
    {JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED}
)

_JOB_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset(
        {JobStatus.RUNNING, JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED}
    ),
    JobStatus.RUNNING: frozenset(
        {JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED}
    ),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
    JobStatus.CANCELLED: frozenset(),
}

_ACTIVE_WHERE = text("status IN ('pending', 'running')")


class TranslationJobModel(Base, UUIDMixin, TimestampMixin):
    """
    Translation job ORM model.

    Attributes:
        id: UUID primary key
        project_id: Owning project
        mode: Key selection mode
        source_locale: Project default locale at admission time
        target_locale: Locale being produced
        status: Current lifecycle state
        provider: Provider backend identifier
        model: Model identifier
        params: Provider parameters (see models.translation_job.TranslationJobParams)
        total_keys: Number of job items; fixed at admission
        completed_keys: Items written successfully
        failed_keys: Items failed or skipped
        estimated_cost_usd: Cost estimate at admission (NULL when unpriced)
        actual_cost_usd: Summed provider cost at completion (NULL when unpriced)
        started_at: Pickup time
        finished_at: Terminal transition time

    Constraints:
        One pending/running job per project (partial unique index)
        completed_keys + failed_keys <= total_keys
        target_locale <> source_locale
    """

    __tablename__ = "translation_jobs"
    __table_args__ = (
        CheckConstraint(
            "completed_keys + failed_keys <= total_keys",
            name="translation_jobs_counters_within_total",
        ),
        CheckConstraint(
            "completed_keys >= 0 AND failed_keys >= 0 AND total_keys >= 0",
            name="translation_jobs_counters_non_negative",
        ),
        CheckConstraint(
            "target_locale <> source_locale",
            name="translation_jobs_target_differs_from_source",
        ),
        Index(
            "translation_jobs_one_active_per_project",
            "project_id",
            unique=True,
            postgresql_where=_ACTIVE_WHERE,
            sqlite_where=_ACTIVE_WHERE,
        ),
        Index("translation_jobs_project_created_at", "project_id", "created_at"),
    )

    project_id: Mapped[UUID] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    mode: Mapped[TranslationMode] = mapped_column(
        value_enum(TranslationMode),
        nullable=False,
    )
    source_locale: Mapped[str] = mapped_column(String(8), nullable=False)
    target_locale: Mapped[str] = mapped_column(String(8), nullable=False)
    status: Mapped[JobStatus] = mapped_column(
        value_enum(JobStatus),
        nullable=False,
        default=JobStatus.PENDING,
    )

    provider: Mapped[str | None] = mapped_column(String(64), nullable=True)
    model: Mapped[str | None] = mapped_column(String(128), nullable=True)
    params: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    total_keys: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed_keys: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failed_keys: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    estimated_cost_usd: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 4),
        nullable=True,
    )
    actual_cost_usd: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 4),
        nullable=True,
    )

    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    finished_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    items = relationship(
        "TranslationJobItemModel",
        back_populates="job",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
