"""
Audit applications affected by the interviewing -> interview_round_1 collapse

Lists applications whose history suggests several interview rounds were
folded into interview_round_1, so they can be split by hand.

Usage (from the repository root):
    python scripts/audit_interview_rounds.py
"""
import asyncio
import os
import sys

# Add backend/src to path
sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "backend", "src"))

from sqlalchemy import text

from core.database import close_db, get_db_session


FIRST_ROUND_STAGE = "interview_round_1"

# Entered interview_round_1 more than once
REENTERED_QUERY = text("""
    SELECT application_id, COUNT(*) AS entries
    FROM stage_history
    WHERE to_stage = :stage
    GROUP BY application_id
    HAVING COUNT(*) > 1
    ORDER BY entries DESC
""")

# Reached interview_round_1 with no interview round rows recorded
MISSING_ROUNDS_QUERY = text("""
    SELECT DISTINCT h.application_id
    FROM stage_history h
    LEFT JOIN interview_rounds r ON r.application_id = h.application_id
    WHERE h.to_stage = :stage AND r.id IS NULL
""")


async def audit():
    async with get_db_session() as session:
        reentered = (await session.execute(REENTERED_QUERY, {"stage": FIRST_ROUND_STAGE})).all()
        missing = (await session.execute(MISSING_ROUNDS_QUERY, {"stage": FIRST_ROUND_STAGE})).all()

    print(f"🔍 Applications that entered {FIRST_ROUND_STAGE} more than once: {len(reentered)}")
    for row in reentered:
        print(f"  {row.application_id}: {row.entries} entries")

    print(f"🔍 Applications in or past {FIRST_ROUND_STAGE} without interview rounds: {len(missing)}")
    for row in missing:
        print(f"  {row.application_id}")

    return len(reentered) + len(missing)


async def main():
    try:
        flagged = await audit()
    finally:
        await close_db()
    return flagged


if __name__ == "__main__":
    try:
        flagged = asyncio.run(main())
        print("✅ Nothing to review" if flagged == 0 else f"⚠️ {flagged} finding(s) to review")
    except Exception as e:
        print(f"[!] Audit failed: {e}")
        sys.exit(1)
