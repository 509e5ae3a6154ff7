"""create application lifecycle tables

Revision ID: a1c4e7d20b91
Revises:
Create Date: 2026-10-01 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = 'a1c4e7d20b91'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'applications',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('platform_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('role', sa.String(length=500), nullable=False),
        sa.Column('job_url', sa.Text(), nullable=True),
        sa.Column('source', sa.String(length=50), nullable=True),
        # Text, not an enum: interview_round_<n> is open-ended
        sa.Column('stage', sa.Text(), nullable=False),
        sa.Column('milestone', sa.String(length=50), nullable=False),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('last_activity_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_applications_id', 'applications', ['id'])
    op.create_index('ix_applications_user_id', 'applications', ['user_id'])
    op.create_index('ix_applications_company_id', 'applications', ['company_id'])
    op.create_index('ix_applications_platform_id', 'applications', ['platform_id'])
    op.create_index('ix_applications_stage', 'applications', ['stage'])
    op.create_index('ix_applications_milestone', 'applications', ['milestone'])
    op.create_index('ix_applications_is_archived', 'applications', ['is_archived'])
    op.create_index('ix_applications_last_activity_at', 'applications', ['last_activity_at'])
    op.create_index('idx_applications_user_activity', 'applications', ['user_id', 'last_activity_at'])

    op.create_table(
        'stage_history',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('seq', sa.BigInteger(), sa.Identity(always=True), nullable=False, unique=True),
        sa.Column('application_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('applications.id'), nullable=False),
        sa.Column('from_stage', sa.Text(), nullable=False),
        sa.Column('to_stage', sa.Text(), nullable=False),
        sa.Column('actor', sa.String(length=20), nullable=False, server_default='user'),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_stage_history_application_id', 'stage_history', ['application_id'])
    op.create_index('idx_stage_history_app_changed', 'stage_history', ['application_id', 'changed_at', 'seq'])

    op.create_table(
        'interview_rounds',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('application_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('applications.id'), nullable=False),
        sa.Column('round_index', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False, server_default='other'),
        sa.Column('custom_name', sa.Text(), nullable=True),
        sa.Column('mode', sa.String(length=20), nullable=False, server_default='online'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='unscheduled'),
        sa.Column('scheduled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rescheduled_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('result', sa.String(length=20), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.UniqueConstraint('application_id', 'round_index', name='uq_interview_round_app_index'),
        sa.CheckConstraint('round_index > 0', name='ck_interview_round_index_positive'),
    )
    op.create_index('ix_interview_rounds_id', 'interview_rounds', ['id'])
    op.create_index('ix_interview_rounds_application_id', 'interview_rounds', ['application_id'])
    op.create_index('ix_interview_rounds_status', 'interview_rounds', ['status'])

    op.create_table(
        'conversations',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('application_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('applications.id'), nullable=False),
        sa.Column('contact_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('medium', sa.String(length=20), nullable=False),
        sa.Column('direction', sa.String(length=20), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('occurred_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_conversations_application_id', 'conversations', ['application_id'])
    op.create_index('idx_conversations_app_occurred', 'conversations', ['application_id', 'occurred_at'])


def downgrade() -> None:
    op.drop_table('conversations')
    op.drop_table('interview_rounds')
    op.drop_table('stage_history')
    op.drop_table('applications')
