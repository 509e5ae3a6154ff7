"""
Interview Round Enums
Status lifecycle and descriptive enumerations for interview rounds
"""
from enum import Enum
from typing import Dict, FrozenSet


class InterviewRoundStatus(str, Enum):
    """Scheduling lifecycle of a single interview round"""
    UNSCHEDULED = "unscheduled"
    SCHEDULED = "scheduled"
    RESCHEDULED = "rescheduled"
    COMPLETED = "completed"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def is_booked(self) -> bool:
        """Round has a live date on the calendar"""
        return self in (InterviewRoundStatus.SCHEDULED, InterviewRoundStatus.RESCHEDULED)


class InterviewRoundType(str, Enum):
    """Kind of interview"""
    SCREEN = "screen"
    DSA = "dsa"
    SYSTEM_DESIGN = "system_design"
    CODING = "coding"
    HM = "hm"
    BAR_RAISER = "bar_raiser"
    OTHER = "other"


class InterviewRoundResult(str, Enum):
    """Outcome recorded when a round completes"""
    PASSED = "passed"
    REJECTED = "rejected"
    NO_SHOW = "no_show"
    PENDING = "pending"


class InterviewMode(str, Enum):
    ONLINE = "online"
    ONSITE = "onsite"


TERMINAL_STATUSES: FrozenSet[InterviewRoundStatus] = frozenset({
    InterviewRoundStatus.COMPLETED,
    InterviewRoundStatus.REJECTED,
    InterviewRoundStatus.WITHDRAWN,
})

ALLOWED_STATUS_TRANSITIONS: Dict[InterviewRoundStatus, FrozenSet[InterviewRoundStatus]] = {
    InterviewRoundStatus.UNSCHEDULED: frozenset({
        InterviewRoundStatus.SCHEDULED,
        InterviewRoundStatus.REJECTED,
        InterviewRoundStatus.WITHDRAWN,
    }),
    InterviewRoundStatus.SCHEDULED: frozenset({
        InterviewRoundStatus.RESCHEDULED,
        InterviewRoundStatus.COMPLETED,
        InterviewRoundStatus.REJECTED,
        InterviewRoundStatus.WITHDRAWN,
    }),
    InterviewRoundStatus.RESCHEDULED: frozenset({
        InterviewRoundStatus.RESCHEDULED,
        InterviewRoundStatus.COMPLETED,
        InterviewRoundStatus.REJECTED,
        InterviewRoundStatus.WITHDRAWN,
    }),
    InterviewRoundStatus.COMPLETED: frozenset(),
    InterviewRoundStatus.REJECTED: frozenset(),
    InterviewRoundStatus.WITHDRAWN: frozenset(),
}

INTERVIEW_TYPE_DISPLAY_NAMES: Dict[InterviewRoundType, str] = {
    InterviewRoundType.SCREEN: "Phone Screen",
    InterviewRoundType.DSA: "Data Structures & Algorithms",
    InterviewRoundType.SYSTEM_DESIGN: "System Design",
    InterviewRoundType.CODING: "Coding Interview",
    InterviewRoundType.HM: "Hiring Manager Round",
    InterviewRoundType.BAR_RAISER: "Bar Raiser Round",
    InterviewRoundType.OTHER: "Interview Round",
}


def can_transition_status(current: InterviewRoundStatus, target: InterviewRoundStatus) -> bool:
    """Check if a round can move from ``current`` to ``target``"""
    return target in ALLOWED_STATUS_TRANSITIONS.get(current, frozenset())
