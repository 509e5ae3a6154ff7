"""collapse legacy interviewing stage into interview_round_1

Revision ID: 5f2b9c3e8d14
Revises: a1c4e7d20b91
Create Date: 2026-10-01 09:30:00.000000

Rows imported from the single-stage interview model carry the stage
'interviewing'. They become interview_round_1. Applications that went
through several rounds under the old model cannot be told apart here;
scripts/audit_interview_rounds.py lists them for review.
"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '5f2b9c3e8d14'
down_revision: Union[str, None] = 'a1c4e7d20b91'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


LEGACY_STAGE = 'interviewing'
FIRST_ROUND_STAGE = 'interview_round_1'


def upgrade() -> None:
    op.execute(
        f"UPDATE applications SET stage = '{FIRST_ROUND_STAGE}', milestone = 'interviewing' "
        f"WHERE stage = '{LEGACY_STAGE}'"
    )
    op.execute(
        f"UPDATE stage_history SET from_stage = '{FIRST_ROUND_STAGE}' WHERE from_stage = '{LEGACY_STAGE}'"
    )
    op.execute(
        f"UPDATE stage_history SET to_stage = '{FIRST_ROUND_STAGE}' WHERE to_stage = '{LEGACY_STAGE}'"
    )


def downgrade() -> None:
    # Every round maps back onto the single legacy stage
    op.execute(
        f"UPDATE applications SET stage = '{LEGACY_STAGE}' WHERE stage LIKE 'interview\\_round\\_%'"
    )
    op.execute(
        f"UPDATE stage_history SET from_stage = '{LEGACY_STAGE}' WHERE from_stage LIKE 'interview\\_round\\_%'"
    )
    op.execute(
        f"UPDATE stage_history SET to_stage = '{LEGACY_STAGE}' WHERE to_stage LIKE 'interview\\_round\\_%'"
    )
