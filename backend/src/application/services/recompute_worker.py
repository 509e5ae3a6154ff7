"""
Recompute Worker - Background worker for activity recomputes
Processes last_activity_at recomputes queued by stage, interview and conversation writes
"""
import asyncio
from typing import Optional, Set
from uuid import UUID

from loguru import logger

from core.config import settings
from application.services.lifecycle.interfaces import IRecomputeTrigger
from application.services.lifecycle.triggers import RecomputeFn, SleepFn, run_with_backoff


class RecomputeWorker(IRecomputeTrigger):
    """Background worker for processing queued recomputes

    At most one recompute per application runs at a time. A trigger that
    arrives while its application is being recomputed marks it dirty, and
    the application is queued again once the running pass finishes, so the
    last pass always observes every event committed before its trigger.
    """

    def __init__(
        self,
        recompute: RecomputeFn,
        max_concurrent_tasks: int = settings.RECOMPUTE_WORKER_CONCURRENCY,
        max_retries: int = settings.RECOMPUTE_MAX_RETRIES,
        backoff_base: float = settings.RECOMPUTE_BACKOFF_BASE_SECONDS,
        sleep: SleepFn = asyncio.sleep,
    ):
        """
        Initialize recompute worker

        Args:
            recompute: Coroutine running one recompute in its own session
            max_concurrent_tasks: Number of consumer tasks
            max_retries: Attempts per recompute before giving up
            backoff_base: First retry delay in seconds, doubled per attempt
        """
        self._recompute = recompute
        self.max_concurrent_tasks = max_concurrent_tasks
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self._sleep = sleep

        self._queue: "asyncio.Queue[UUID]" = asyncio.Queue()
        self._pending: Set[UUID] = set()
        self._in_progress: Set[UUID] = set()
        self._dirty: Set[UUID] = set()
        self._consumers: Set[asyncio.Task] = set()
        self.running = False

    @property
    def backlog(self) -> int:
        return len(self._pending) + len(self._in_progress)

    async def trigger(self, application_id: UUID) -> None:
        self.enqueue(application_id)

    def enqueue(self, application_id: UUID) -> None:
        """Queue a recompute, coalescing with one already queued or running"""
        if application_id in self._in_progress:
            self._dirty.add(application_id)
            return
        if application_id in self._pending:
            return
        self._pending.add(application_id)
        self._queue.put_nowait(application_id)

    async def start(self):
        """Start the consumer tasks"""
        if self.running:
            return
        self.running = True
        for _ in range(self.max_concurrent_tasks):
            consumer = asyncio.create_task(self._consume())
            self._consumers.add(consumer)
            consumer.add_done_callback(self._consumers.discard)
        logger.info(f"🚀 Recompute worker started (max_concurrent={self.max_concurrent_tasks})")

    async def drain(self, timeout: Optional[float] = None):
        """Wait until every queued recompute, including re-queued dirty ones, is done"""
        await asyncio.wait_for(self._queue.join(), timeout=timeout)

    async def stop(self, timeout: Optional[float] = 10.0):
        """Stop the worker after finishing queued work"""
        logger.info("Stopping recompute worker...")
        if self.running and self.backlog:
            logger.info(f"Waiting for {self.backlog} recompute(s) to complete...")
            try:
                await self.drain(timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Recompute worker stopped with {self.backlog} recompute(s) outstanding")

        self.running = False
        consumers = list(self._consumers)
        for consumer in consumers:
            consumer.cancel()
        await asyncio.gather(*consumers, return_exceptions=True)
        logger.info("🛑 Recompute worker stopped")

    async def _consume(self):
        while True:
            application_id = await self._queue.get()
            try:
                await self._process(application_id)
            except Exception as e:
                logger.error(f"❌ Recompute worker error for application {application_id}: {e}")
            finally:
                self._queue.task_done()

    async def _process(self, application_id: UUID):
        self._pending.discard(application_id)
        self._in_progress.add(application_id)
        try:
            await run_with_backoff(
                self._recompute,
                application_id,
                self.max_retries,
                self.backoff_base,
                self._sleep,
            )
        finally:
            self._in_progress.discard(application_id)
            if application_id in self._dirty:
                self._dirty.discard(application_id)
                self.enqueue(application_id)


_worker: Optional[RecomputeWorker] = None


def get_recompute_worker() -> Optional[RecomputeWorker]:
    """Process-wide worker, None until configured"""
    return _worker


def set_recompute_worker(worker: Optional[RecomputeWorker]) -> None:
    global _worker
    _worker = worker
