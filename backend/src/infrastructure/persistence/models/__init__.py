"""ORM Models Package"""

from .application import ApplicationModel
from .stage_history import StageHistoryModel
from .interview_round import InterviewRoundModel
from .conversation import ConversationModel

__all__ = [
    "ApplicationModel",
    "StageHistoryModel",
    "InterviewRoundModel",
    "ConversationModel",
]
