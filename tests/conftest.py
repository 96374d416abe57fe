"""
Shared test fixtures and configuration for entire test suite.

Provides: SQLite async database, session factory, project/key/translation
seeding, test settings and fake translation providers
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Awaitable, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from i18n_backend.boundary.db.base import Base
from i18n_backend.boundary.db.models import (
    KeyModel,
    ProjectLocaleModel,
    ProjectModel,
    TranslationModel,
)
from i18n_backend.boundary.llm import ProviderResult, TokenUsage
from i18n_backend.configs.jobs import JobSettings
from i18n_backend.configs.provider import ProviderSettings
from i18n_backend.configs.settings import Settings
from i18n_backend.core.exceptions import ProviderError


@pytest.fixture
async def engine(tmp_path):
    """
    File-backed SQLite engine with all tables created.

    A file (not :memory:) so every session gets its own connection, the
    way the execution loop uses the database in production.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'i18n.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    """Session for arranging and asserting database state."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def settings() -> Settings:
    """Settings with instant retries and sequential execution."""
    return Settings(
        provider=ProviderSettings(
            provider="google_genai",
            model="gemini-test",
            max_attempts=3,
            timeout_seconds=5.0,
            retry_initial_seconds=0.0,
            retry_max_seconds=0.0,
            retry_jitter_seconds=0.0,
        ),
        jobs=JobSettings(worker_concurrency=1, persistence_timeout_seconds=5.0),
    )


@dataclass
class SeededProject:
    """Ids created by seed_project."""

    project_id: uuid.UUID
    key_ids: list[uuid.UUID] = field(default_factory=list)
    default_locale: str = "en"


async def seed_project(
    session_factory: async_sessionmaker[AsyncSession],
    key_count: int = 3,
    locales: tuple[str, ...] = ("en", "pl"),
    default_locale: str = "en",
    source_values: dict[int, str | None] | None = None,
    missing_target_keys: tuple[int, ...] = (),
) -> SeededProject:
    """
    Create a project with keys and pre-materialized translation rows.

    Every key gets a source value "Value {i}" (unless overridden through
    source_values) and an empty row in each other locale, except for key
    indexes listed in missing_target_keys.
    """
    source_values = source_values or {}
    project = SeededProject(project_id=uuid.uuid4(), default_locale=default_locale)
    async with session_factory() as session:
        session.add(
            ProjectModel(id=project.project_id, name="Test project", default_locale=default_locale)
        )
        for locale in locales:
            session.add(ProjectLocaleModel(project_id=project.project_id, locale=locale))
        await session.flush()

        for index in range(key_count):
            key_id = uuid.uuid4()
            project.key_ids.append(key_id)
            session.add(KeyModel(id=key_id, project_id=project.project_id, name=f"key_{index:03d}"))
            await session.flush()
            for locale in locales:
                if locale == default_locale:
                    value = source_values.get(index, f"Value {index}")
                elif index in missing_target_keys:
                    continue
                else:
                    value = None
                session.add(
                    TranslationModel(
                        project_id=project.project_id,
                        key_id=key_id,
                        locale=locale,
                        value=value,
                    )
                )
        await session.commit()
    return project


@pytest.fixture
def seed(session_factory):
    """Seed helper bound to the test session factory."""

    async def _seed(**kwargs) -> SeededProject:
        return await seed_project(session_factory, **kwargs)

    return _seed


class FakeTranslationProvider:
    """
    Deterministic provider: "Value 1" in pl becomes "[pl] Value 1".

    failures maps a source text to the ProviderError raised for it;
    on_call runs before each result is returned (1-based call number).
    """

    def __init__(
        self,
        failures: dict[str, ProviderError] | None = None,
        cost_usd: Decimal | None = None,
        on_call: Callable[[int], Awaitable[None]] | None = None,
    ) -> None:
        self.failures = failures or {}
        self.cost_usd = cost_usd
        self.on_call = on_call
        self.calls: list[tuple[str, str, str]] = []

    async def translate(self, text: str, source_locale: str, target_locale: str) -> ProviderResult:
        self.calls.append((text, source_locale, target_locale))
        if self.on_call is not None:
            await self.on_call(len(self.calls))
        if text in self.failures:
            raise self.failures[text]
        return ProviderResult(
            translated_text=f"[{target_locale}] {text}",
            usage=TokenUsage(input_tokens=40, output_tokens=10),
            cost_usd=self.cost_usd,
        )


@pytest.fixture
def fake_provider() -> FakeTranslationProvider:
    """Provider that translates everything successfully."""
    return FakeTranslationProvider()


class RecordingDispatcher:
    """Dispatcher that only records job ids."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.dispatched: list[uuid.UUID] = []

    async def dispatch(self, job_id: uuid.UUID) -> None:
        if self.error is not None:
            raise self.error
        self.dispatched.append(job_id)


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    """Dispatcher that records admitted jobs without running them."""
    return RecordingDispatcher()


@pytest.fixture
def make_provider() -> type[FakeTranslationProvider]:
    """FakeTranslationProvider class, for tests that configure failures or hooks."""
    return FakeTranslationProvider


@pytest.fixture
def make_dispatcher() -> type[RecordingDispatcher]:
    """RecordingDispatcher class, for tests that need a failing dispatcher."""
    return RecordingDispatcher
