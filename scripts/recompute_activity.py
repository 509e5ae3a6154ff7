"""
Backfill last_activity_at for every application

Usage (from the repository root):
    python scripts/recompute_activity.py [--batch-size 500] [--dry-run]
"""
import argparse
import asyncio
import os
import sys

# Add backend/src to path
sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "backend", "src"))

from loguru import logger

from core.config import settings
from core.database import close_db, get_db_session
from application.services.lifecycle import ActivityRecomputer, default_activity_sources, run_with_backoff
from infrastructure.persistence.repositories.application import SQLAlchemyApplicationRepository
from infrastructure.persistence.repositories.conversation import SQLAlchemyConversationRepository
from infrastructure.persistence.repositories.interview_round import SQLAlchemyInterviewRoundRepository
from infrastructure.persistence.repositories.stage_history import SQLAlchemyStageHistoryRepository
from infrastructure.persistence.unit_of_work import SQLAlchemyUnitOfWork


def _recomputer(session) -> ActivityRecomputer:
    return ActivityRecomputer(
        SQLAlchemyApplicationRepository(session),
        default_activity_sources(
            SQLAlchemyConversationRepository(session),
            SQLAlchemyStageHistoryRepository(session),
            SQLAlchemyInterviewRoundRepository(session),
        ),
        SQLAlchemyUnitOfWork(session),
    )


async def _recompute_one(application_id) -> bool:
    async with get_db_session() as session:
        return await _recomputer(session).recompute(application_id)


async def _report_one(application_id) -> None:
    async with get_db_session() as session:
        recomputer = _recomputer(session)
        application = await recomputer.application_repo.get_by_id(application_id)
        derived = await recomputer.compute(application_id)
        if application is not None and derived != application.last_activity_at:
            print(f"  {application_id}: {application.last_activity_at.isoformat()} -> {derived.isoformat()}")


async def backfill(batch_size: int, dry_run: bool) -> int:
    """Recompute every application; returns how many were processed"""
    processed = 0
    offset = 0

    while True:
        async with get_db_session() as session:
            ids = await SQLAlchemyApplicationRepository(session).list_ids(limit=batch_size, offset=offset)
        if not ids:
            break

        for application_id in ids:
            if dry_run:
                await _report_one(application_id)
            else:
                await run_with_backoff(
                    _recompute_one,
                    application_id,
                    settings.RECOMPUTE_MAX_RETRIES,
                    settings.RECOMPUTE_BACKOFF_BASE_SECONDS,
                )
            processed += 1

        offset += len(ids)
        print(f"🔄 Processed {processed} application(s)...")

    return processed


async def main(batch_size: int, dry_run: bool):
    try:
        processed = await backfill(batch_size, dry_run)
        print(f"✅ Done: {processed} application(s) {'checked' if dry_run else 'recomputed'}")
    finally:
        await close_db()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Recompute last_activity_at for all applications")
    parser.add_argument("--batch-size", type=int, default=500)
    parser.add_argument("--dry-run", action="store_true", help="Only print applications whose value would change")
    args = parser.parse_args()

    try:
        asyncio.run(main(args.batch_size, args.dry_run))
    except Exception as e:
        logger.error(f"Backfill failed: {e}")
        sys.exit(1)
