"""
Project, project locale and key ORM models.

Read-only collaborators of the job pipeline: admission checks that the
project exists, that the target locale is enabled for it and that every
requested key belongs to it. Their CRUD lives elsewhere in the product.

Dependencies: sqlalchemy, i18n_backend.boundary.db.base
System role: Project catalog persistence consumed by admission
"""

from uuid import UUID

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from i18n_backend.boundary.db.base import Base, TimestampMixin, UUIDMixin


class ProjectModel(Base, UUIDMixin, TimestampMixin):
    """
    Project ORM model.

    Attributes:
        id: UUID primary key
        name: Project name
        default_locale: Source locale every translation job reads from
    """

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    default_locale: Mapped[str] = mapped_column(String(8), nullable=False)

    locales = relationship(
        "ProjectLocaleModel",
        back_populates="project",
        cascade="all, delete-orphan",
    )
    keys = relationship(
        "KeyModel",
        back_populates="project",
        cascade="all, delete-orphan",
    )


class ProjectLocaleModel(Base, TimestampMixin):
    """Locale enabled for a project (composite primary key)."""

    __tablename__ = "project_locales"

    project_id: Mapped[UUID] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    )
    locale: Mapped[str] = mapped_column(String(8), primary_key=True)

    project = relationship("ProjectModel", back_populates="locales")


class KeyModel(Base, UUIDMixin, TimestampMixin):
    """Translation key belonging to a project."""

    __tablename__ = "keys"
    __table_args__ = (
        UniqueConstraint("project_id", "name", name="keys_unique_name_per_project"),
    )

    project_id: Mapped[UUID] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)

    project = relationship("ProjectModel", back_populates="keys")
