"""
Recompute Triggers
Run activity recomputes decoupled from the write that caused them
"""
import asyncio
from typing import Awaitable, Callable
from uuid import UUID

from loguru import logger

from core.config import settings
from core.exceptions import RecomputeFailure, ResourceNotFoundException
from .interfaces import IRecomputeTrigger


RecomputeFn = Callable[[UUID], Awaitable[bool]]
SleepFn = Callable[[float], Awaitable[None]]


def backoff_delay(attempt: int, base: float) -> float:
    """Exponential backoff: base, 2*base, 4*base, ..."""
    return base * (2 ** (attempt - 1))


async def run_with_backoff(
    recompute: RecomputeFn,
    application_id: UUID,
    max_retries: int,
    backoff_base: float,
    sleep: SleepFn = asyncio.sleep,
) -> bool:
    """
    Run one recompute with retries

    Returns:
        True if a recompute attempt succeeded, False if it was given up.
        Never raises for recompute errors; the last one is logged as RecomputeFailure.
    """
    last_error: Exception = RuntimeError("recompute not attempted")
    for attempt in range(1, max_retries + 1):
        try:
            await recompute(application_id)
            return True
        except ResourceNotFoundException as e:
            # Not transient
            logger.warning(f"Skipping recompute: {e}")
            return False
        except Exception as e:
            last_error = e
            if attempt < max_retries:
                delay = backoff_delay(attempt, backoff_base)
                logger.warning(
                    f"Recompute attempt {attempt}/{max_retries} for application {application_id} failed: {e}. "
                    f"Retrying in {delay:.2f}s"
                )
                await sleep(delay)

    failure = RecomputeFailure(application_id, max_retries, last_error)
    logger.error(str(failure))
    return False


async def fire_trigger(trigger: IRecomputeTrigger, application_id: UUID) -> None:
    """Call a trigger without letting its errors reach the caller's write path"""
    try:
        await trigger.trigger(application_id)
    except Exception as e:
        logger.error(f"Recompute trigger failed for application {application_id}: {e}")


class InlineRecomputeTrigger(IRecomputeTrigger):
    """Recompute immediately, in the caller's task"""

    def __init__(
        self,
        recompute: RecomputeFn,
        max_retries: int = settings.RECOMPUTE_MAX_RETRIES,
        backoff_base: float = settings.RECOMPUTE_BACKOFF_BASE_SECONDS,
        sleep: SleepFn = asyncio.sleep,
    ):
        self._recompute = recompute
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self._sleep = sleep

    async def trigger(self, application_id: UUID) -> None:
        await run_with_backoff(
            self._recompute,
            application_id,
            self.max_retries,
            self.backoff_base,
            self._sleep,
        )
