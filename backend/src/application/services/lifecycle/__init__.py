"""Application lifecycle: stage machine, interview rounds, derived activity"""

from .interfaces import (
    IActivityNotifier,
    IActivityRecomputer,
    IApplicationStageMachine,
    IConversationService,
    IInterviewRoundManager,
    IRecomputeTrigger,
    TransitionResult,
)
from .activity import (
    ActivityRecomputer,
    ActivitySource,
    default_activity_sources,
    reduce_last_activity,
)
from .stage_machine import ApplicationStageMachine
from .interview_rounds import InterviewRoundManager
from .conversations import ConversationService
from .triggers import InlineRecomputeTrigger, run_with_backoff

__all__ = [
    "IActivityNotifier",
    "IActivityRecomputer",
    "IApplicationStageMachine",
    "IConversationService",
    "IInterviewRoundManager",
    "IRecomputeTrigger",
    "TransitionResult",
    "ActivityRecomputer",
    "ActivitySource",
    "default_activity_sources",
    "reduce_last_activity",
    "ApplicationStageMachine",
    "InterviewRoundManager",
    "ConversationService",
    "InlineRecomputeTrigger",
    "run_with_backoff",
]
