"""
Translation job execution loop.

Runs one admitted job to a terminal state:

    1. pending -> running (guarded; a job cancelled before pickup is left alone)
    2. pending items are processed by ``worker_concurrency`` workers; before
       taking an item each worker re-reads the job status and stops once the
       job is no longer running (cooperative cancellation)
    3. per item: read source value and target lock token, call the provider
       with no transaction open, then write the translation with the token
       and resolve the item + bump the job counters in one transaction
    4. running -> completed (guarded, so a concurrent cancel wins)

Provider errors and lock conflicts only affect their item. A persistence
failure stops every worker and moves the job to failed, and so does
cancelling the task running the job (for example on worker shutdown).

Dependencies: sqlalchemy, i18n_backend.boundary.db, i18n_backend.boundary.llm
System role: Background execution of translation jobs
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar
from uuid import UUID

from pydantic import TypeAdapter
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from i18n_backend.boundary.db.base import next_lock_token, utcnow
from i18n_backend.boundary.db.CRUD import (
    job_item_crud,
    translation_crud,
    translation_job_crud,
)
from i18n_backend.boundary.db.models import (
    ItemErrorCode,
    ItemStatus,
    JobStatus,
    UpdateSource,
)
from i18n_backend.boundary.llm import (
    RetryingTranslationProvider,
    TranslationProvider,
    get_translation_provider,
    wrap_with_retries,
)
from i18n_backend.configs.settings import Settings
from i18n_backend.core.exceptions import PersistenceError, ProviderError
from i18n_backend.core.job_execution.outcomes import (
    JobContext,
    JobRunSummary,
    PendingItem,
    RunState,
)
from i18n_backend.core.values import truncate_error_message
from i18n_backend.models.translation_job import TranslationJobParams
from i18n_backend.observability.correlation import (
    clear_correlation_id,
    set_correlation_id,
)
from i18n_backend.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_params_adapter = TypeAdapter(TranslationJobParams)


class TranslationJobExecutor:
    """
    Execution loop for translation jobs.

    Every database interaction opens its own short session from the
    factory, so the executor never holds a transaction across a provider
    call and can run independently of any request.

    Usage:
        executor = TranslationJobExecutor(get_async_session_factory(), get_settings())
        summary = await executor.run(job_id)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings,
        provider: TranslationProvider | None = None,
    ) -> None:
        """
        Initialize executor.

        Args:
            session_factory: Factory for short-lived sessions
            settings: Application settings
            provider: Provider used for every job; when None one is built per
                job from its params. Providers without a retry policy get the
                configured timeout and retries applied.
        """
        self._session_factory = session_factory
        self._settings = settings
        if provider is not None and not isinstance(provider, RetryingTranslationProvider):
            provider = wrap_with_retries(provider, settings.provider)
        self._provider = provider

    async def run(self, job_id: UUID) -> JobRunSummary:
        """
        Execute a job until it reaches a terminal state or is cancelled.

        Args:
            job_id: Job UUID

        Returns:
            JobRunSummary with the final status and items processed

        Raises:
            PersistenceError: If the job could not be moved to failed after
                a persistence fault
            asyncio.CancelledError: Re-raised once the job has been failed
        """
        set_correlation_id(str(job_id))
        try:
            return await self._run(job_id)
        finally:
            clear_correlation_id()

    async def _run(self, job_id: UUID) -> JobRunSummary:
        # The pickup may have committed before the error surfaced, so both
        # pending and running are moved to failed.
        unstarted = [JobStatus.PENDING, JobStatus.RUNNING]
        try:
            job = await self._in_transaction(
                "start_job",
                lambda session: translation_job_crud.transition_status(
                    session,
                    job_id,
                    from_statuses=[JobStatus.PENDING],
                    to_status=JobStatus.RUNNING,
                    started_at=utcnow(),
                ),
            )
        except PersistenceError as e:
            return await self._fail(job_id, None, RunState(), e, from_statuses=unstarted)
        except asyncio.CancelledError as e:
            await asyncio.shield(
                self._fail(job_id, None, RunState(), e, from_statuses=unstarted)
            )
            raise
        if job is None:
            status = await self._read_status(job_id)
            log_with_context(
                logger,
                logging.INFO,
                "Job not picked up; it is no longer pending",
                job_id=job_id,
                status=status.value if status else None,
            )
            return JobRunSummary(job_id=job_id, status=status)

        context = JobContext(
            job_id=job.id,
            project_id=job.project_id,
            source_locale=job.source_locale,
            target_locale=job.target_locale,
        )
        log_with_context(
            logger,
            logging.INFO,
            "Job started",
            job_id=job.id,
            project_id=job.project_id,
            target_locale=job.target_locale,
            total_keys=job.total_keys,
        )

        state = RunState()
        try:
            provider = self._provider or get_translation_provider(
                self._settings.provider,
                _params_adapter.validate_python(job.params) if job.params else None,
                max_length=self._settings.jobs.max_value_length,
            )
            pending = await self._in_transaction(
                "load_items",
                lambda session: job_item_crud.get_pending_for_job(session, job_id),
            )
            items = [PendingItem(item_id=item.id, key_id=item.key_id) for item in pending]
            await self._process_items(context, items, provider, state)
            if state.cancelled:
                return await self._record_cancelled(context, state)
            return await self._complete(context, state)
        except PersistenceError as e:
            return await self._fail(context.job_id, context.project_id, state, e)
        except asyncio.CancelledError as e:
            await asyncio.shield(self._fail(context.job_id, context.project_id, state, e))
            raise
        except Exception as e:
            await self._fail(context.job_id, context.project_id, state, e)
            raise

    async def _process_items(
        self,
        context: JobContext,
        items: list[PendingItem],
        provider: TranslationProvider,
        state: RunState,
    ) -> None:
        queue: asyncio.Queue[PendingItem] = asyncio.Queue()
        for item in items:
            queue.put_nowait(item)

        async def worker() -> None:
            while not state.stop.is_set():
                try:
                    item = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                if not await self._still_running(context):
                    state.cancelled = True
                    state.stop.set()
                    return
                try:
                    await self._process_item(context, item, provider, state)
                except BaseException:
                    state.stop.set()
                    raise

        concurrency = max(1, min(self._settings.jobs.worker_concurrency, len(items)))
        results = await asyncio.gather(
            *(worker() for _ in range(concurrency)),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

    async def _still_running(self, context: JobContext) -> bool:
        status = await self._read_status(context.job_id)
        if status is JobStatus.RUNNING:
            return True
        log_with_context(
            logger,
            logging.INFO,
            "Job no longer running; workers stop taking items",
            job_id=context.job_id,
            project_id=context.project_id,
            status=status.value if status else None,
        )
        return False

    async def _process_item(
        self,
        context: JobContext,
        item: PendingItem,
        provider: TranslationProvider,
        state: RunState,
    ) -> None:
        async def read(session: AsyncSession):
            source = await translation_crud.get(
                session, context.project_id, item.key_id, context.source_locale
            )
            target = await translation_crud.get(
                session, context.project_id, item.key_id, context.target_locale
            )
            return (
                source.value if source is not None else None,
                target is not None,
                target.updated_at if target is not None else None,
            )

        source_value, target_exists, lock_token = await self._in_transaction("read_item", read)

        if not source_value:
            await self._resolve(
                context,
                item,
                state,
                ItemStatus.SKIPPED,
                ItemErrorCode.SOURCE_NOT_FOUND,
                f"No {context.source_locale} value to translate",
            )
            return
        if not target_exists:
            await self._resolve(
                context,
                item,
                state,
                ItemStatus.SKIPPED,
                ItemErrorCode.TARGET_NOT_FOUND,
                f"No {context.target_locale} translation row for key",
            )
            return

        try:
            result = await provider.translate(
                source_value,
                context.source_locale,
                context.target_locale,
            )
        except ProviderError as e:
            await self._resolve(
                context,
                item,
                state,
                ItemStatus.FAILED,
                e.error_code,
                e.message,
            )
            return
        state.add_cost(result.cost_usd)

        async def write(session: AsyncSession) -> ItemStatus | None:
            written = await translation_crud.update_with_lock(
                session,
                context.project_id,
                item.key_id,
                context.target_locale,
                expected_updated_at=lock_token,
                value=result.translated_text,
                is_machine_translated=True,
                updated_source=UpdateSource.SYSTEM,
                updated_by_user_id=None,
                updated_at=next_lock_token(lock_token),
            )
            if written is None:
                return await self._resolve_in_session(
                    session,
                    item,
                    context,
                    ItemStatus.SKIPPED,
                    ItemErrorCode.LOCK_CONFLICT,
                    "Translation was modified by another writer",
                )
            return await self._resolve_in_session(session, item, context, ItemStatus.COMPLETED)

        outcome = await self._in_transaction("write_item", write)
        self._log_outcome(context, item, state, outcome, None)

    async def _resolve(
        self,
        context: JobContext,
        item: PendingItem,
        state: RunState,
        status: ItemStatus,
        error_code: ItemErrorCode | str | None = None,
        error_message: str | None = None,
    ) -> None:
        outcome = await self._in_transaction(
            "resolve_item",
            lambda session: self._resolve_in_session(
                session, item, context, status, error_code, error_message
            ),
        )
        self._log_outcome(context, item, state, outcome, error_code)

    async def _resolve_in_session(
        self,
        session: AsyncSession,
        item: PendingItem,
        context: JobContext,
        status: ItemStatus,
        error_code: ItemErrorCode | str | None = None,
        error_message: str | None = None,
    ) -> ItemStatus | None:
        """Resolve the item and bump the matching counter in the same transaction."""
        if isinstance(error_code, ItemErrorCode):
            error_code = error_code.value
        if error_message is not None:
            error_message = truncate_error_message(
                error_message, self._settings.jobs.max_error_message_length
            )
        resolved = await job_item_crud.resolve(
            session,
            item.item_id,
            status,
            error_code=error_code,
            error_message=error_message,
        )
        if resolved is None:
            return None
        completed = 1 if status is ItemStatus.COMPLETED else 0
        await translation_job_crud.increment_counters(
            session,
            context.job_id,
            completed=completed,
            failed=1 - completed,
        )
        return status

    def _log_outcome(
        self,
        context: JobContext,
        item: PendingItem,
        state: RunState,
        outcome: ItemStatus | None,
        error_code: ItemErrorCode | str | None,
    ) -> None:
        if outcome is None:
            log_with_context(
                logger,
                logging.WARNING,
                "Item was already resolved; counters unchanged",
                job_id=context.job_id,
                item_id=item.item_id,
                key_id=item.key_id,
            )
            return
        state.processed += 1
        if isinstance(error_code, ItemErrorCode):
            error_code = error_code.value
        log_with_context(
            logger,
            logging.INFO if outcome is ItemStatus.COMPLETED else logging.WARNING,
            "Item processed",
            job_id=context.job_id,
            project_id=context.project_id,
            key_id=item.key_id,
            item_status=outcome.value,
            error_code=error_code,
        )

    async def _complete(self, context: JobContext, state: RunState) -> JobRunSummary:
        job = await self._in_transaction(
            "complete_job",
            lambda session: translation_job_crud.transition_status(
                session,
                context.job_id,
                from_statuses=[JobStatus.RUNNING],
                to_status=JobStatus.COMPLETED,
                finished_at=utcnow(),
                actual_cost_usd=state.actual_cost_usd,
            ),
        )
        if job is None:
            return await self._record_cancelled(context, state)
        log_with_context(
            logger,
            logging.INFO,
            "Job completed",
            job_id=job.id,
            project_id=job.project_id,
            completed_keys=job.completed_keys,
            failed_keys=job.failed_keys,
            actual_cost_usd=job.actual_cost_usd,
        )
        return JobRunSummary(
            job_id=job.id,
            status=JobStatus.COMPLETED,
            processed=state.processed,
            actual_cost_usd=state.actual_cost_usd,
        )

    async def _record_cancelled(self, context: JobContext, state: RunState) -> JobRunSummary:
        """Attach the cost of calls made before the cancellation was observed."""
        cost = state.actual_cost_usd

        async def record(session: AsyncSession) -> JobStatus | None:
            status = await translation_job_crud.get_status(session, context.job_id)
            if status is JobStatus.CANCELLED and cost is not None:
                await translation_job_crud.update_by_id(
                    session, context.job_id, actual_cost_usd=cost
                )
            return status

        status = await self._in_transaction("record_cancelled", record)
        log_with_context(
            logger,
            logging.INFO,
            "Job stopped before completion",
            job_id=context.job_id,
            project_id=context.project_id,
            status=status.value if status else None,
            processed=state.processed,
        )
        return JobRunSummary(
            job_id=context.job_id,
            status=status,
            processed=state.processed,
            actual_cost_usd=cost,
        )

    async def _fail(
        self,
        job_id: UUID,
        project_id: UUID | None,
        state: RunState,
        error: BaseException,
        from_statuses: list[JobStatus] | None = None,
    ) -> JobRunSummary:
        """
        Move an aborted run's job to failed so it stops blocking its project.

        Also used when the run task is cancelled (worker shutdown); a job
        that was already cancelled or finished is left as it is.
        """
        if isinstance(error, asyncio.CancelledError):
            message = "Job run interrupted; aborting job"
        else:
            message = "Fatal error; aborting job"
        log_exception_with_context(
            logger,
            message,
            error,
            job_id=job_id,
            project_id=project_id,
        )
        try:
            job = await self._in_transaction(
                "fail_job",
                lambda session: translation_job_crud.transition_status(
                    session,
                    job_id,
                    from_statuses=from_statuses or [JobStatus.RUNNING],
                    to_status=JobStatus.FAILED,
                    finished_at=utcnow(),
                    actual_cost_usd=state.actual_cost_usd,
                ),
            )
        except PersistenceError as e:
            log_exception_with_context(
                logger,
                "Could not mark job failed",
                e,
                job_id=job_id,
            )
            raise e from error
        status = JobStatus.FAILED if job is not None else await self._read_status(job_id)
        return JobRunSummary(
            job_id=job_id,
            status=status,
            processed=state.processed,
            actual_cost_usd=state.actual_cost_usd,
        )

    async def _read_status(self, job_id: UUID) -> JobStatus | None:
        return await self._in_transaction(
            "read_status",
            lambda session: translation_job_crud.get_status(session, job_id),
        )

    async def _in_transaction(
        self,
        operation: str,
        work: Callable[[AsyncSession], Awaitable[T]],
    ) -> T:
        """
        Run work in its own committed transaction with a bounded duration.

        Raises:
            PersistenceError: On any SQLAlchemy error or timeout
        """

        async def execute() -> T:
            async with self._session_factory() as session:
                async with session.begin():
                    return await work(session)

        try:
            return await asyncio.wait_for(
                execute(),
                timeout=self._settings.jobs.persistence_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise PersistenceError(
                f"{operation} timed out",
                operation=operation,
            ) from e
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"{operation} failed: {e}",
                operation=operation,
            ) from e
