"""Value Objects - Immutable objects defined by their attributes"""

from .stage import (
    StandardStage,
    Milestone,
    INITIAL_STAGE,
    is_valid_stage,
    parse_interview_round,
    format_interview_round,
    require_valid_stage,
    derive_milestone,
    stage_display_name,
    initial_stage_for_source,
)
from .interview_status import (
    InterviewRoundStatus,
    InterviewRoundType,
    InterviewRoundResult,
    InterviewMode,
    can_transition_status,
)
from .timestamps import ensure_aware, utc_now
__all__ = [
    "StandardStage",
    "Milestone",
    "INITIAL_STAGE",
    "is_valid_stage",
    "parse_interview_round",
    "format_interview_round",
    "require_valid_stage",
    "derive_milestone",
    "stage_display_name",
    "initial_stage_for_source",
    "InterviewRoundStatus",
    "InterviewRoundType",
    "InterviewRoundResult",
    "InterviewMode",
    "can_transition_status",
    "ensure_aware",
    "utc_now",
]
