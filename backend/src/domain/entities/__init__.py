"""Domain Entities - Core business objects"""

from .application import Application
from .stage_transition import StageTransition
from .interview_round import InterviewRound
from .conversation import ConversationEvent
__all__ = ["Application", "StageTransition", "InterviewRound", "ConversationEvent"]
