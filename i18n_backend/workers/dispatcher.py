"""
Job dispatchers.

Hand an admitted job to the execution loop without waiting for it.
InProcessJobDispatcher runs the executor as an asyncio task in the API
process; CeleryJobDispatcher enqueues it for a worker process.

Dependencies: asyncio, celery, i18n_backend.core.job_execution
System role: Decouples admission from execution
"""

import asyncio
import logging
from typing import Callable, Protocol
from uuid import UUID

from fastapi.concurrency import run_in_threadpool

from i18n_backend.core.job_execution import TranslationJobExecutor
from i18n_backend.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
)

logger = logging.getLogger(__name__)


class JobDispatcher(Protocol):
    """Schedules a job for background execution."""

    async def dispatch(self, job_id: UUID) -> None:
        ...


class InProcessJobDispatcher:
    """
    Runs jobs as asyncio tasks owned by the dispatcher.

    Tasks are kept in a set until they finish so they are not garbage
    collected mid-run and can be awaited on shutdown. Failures are logged.
    """

    def __init__(self, executor_factory: Callable[[], TranslationJobExecutor]) -> None:
        """
        Initialize dispatcher.

        Args:
            executor_factory: Builds the executor for each job
        """
        self._executor_factory = executor_factory
        self._tasks: set[asyncio.Task] = set()

    @property
    def active_tasks(self) -> int:
        return len(self._tasks)

    async def dispatch(self, job_id: UUID) -> None:
        executor = self._executor_factory()
        task = asyncio.create_task(executor.run(job_id), name=f"translation-job-{job_id}")
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        log_with_context(logger, logging.INFO, "Job dispatched in-process", job_id=job_id)

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Translation job task cancelled", extra={"task_name": task.get_name()})
            return
        exc = task.exception()
        if exc is not None:
            log_exception_with_context(
                logger,
                "Translation job task failed",
                exc,
                task_name=task.get_name(),
            )

    async def wait_idle(self) -> None:
        """Wait until every dispatched job has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self, timeout: float = 10.0) -> None:
        """
        Wait for running jobs, then cancel what is left.

        A cancelled run moves its job to failed before its task ends, so
        no project is left blocked by a job nobody is executing.
        """
        if not self._tasks:
            return
        done, pending = await asyncio.wait(list(self._tasks), timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            logger.warning(
                "Cancelled unfinished translation job tasks on shutdown",
                extra={"count": len(pending)},
            )
            await asyncio.gather(*pending, return_exceptions=True)


class CeleryJobDispatcher:
    """Enqueues jobs on the Celery translation queue."""

    def __init__(self, queue: str | None = None) -> None:
        self._queue = queue

    async def dispatch(self, job_id: UUID) -> None:
        from i18n_backend.workers.tasks.translation import run_translation_job

        result = await run_in_threadpool(
            run_translation_job.apply_async,
            args=[str(job_id)],
            queue=self._queue,
        )
        log_with_context(
            logger,
            logging.INFO,
            "Job dispatched to Celery",
            job_id=job_id,
            task_id=result.id,
        )
