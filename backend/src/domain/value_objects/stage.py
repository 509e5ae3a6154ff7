"""
Stage Value Object
Single validation authority for application stage identifiers.

Stages are persisted as plain strings. The legal set is the closed list of
standard stages plus the open-ended ``interview_round_<n>`` pattern, where
``n`` is a positive integer written without sign or leading zeros.
"""
import re
from enum import Enum
from typing import Optional

from core.exceptions import InvalidRoundException, InvalidStageException


INTERVIEW_ROUND_PREFIX = "interview_round_"
_INTERVIEW_ROUND_PATTERN = re.compile(r"interview_round_([1-9][0-9]*)")


class StandardStage(str, Enum):
    """Fixed, non-interview stages"""
    WISHLIST = "wishlist"
    RECRUITER_REACHOUT = "recruiter_reachout"
    SELF_REVIEW = "self_review"
    HR_SHORTLIST = "hr_shortlist"
    HM_SHORTLIST = "hm_shortlist"
    OFFER = "offer"


class Milestone(str, Enum):
    """Coarse grouping of stages used for filtering and reporting"""
    EXPLORATION = "exploration"
    INTERVIEWING = "interviewing"
    POST_INTERVIEW = "post_interview"


STANDARD_STAGES = frozenset(s.value for s in StandardStage)

INITIAL_STAGE = StandardStage.WISHLIST.value

STAGE_DISPLAY_NAMES = {
    StandardStage.WISHLIST.value: "Wishlist",
    StandardStage.RECRUITER_REACHOUT.value: "Recruiter Reachout",
    StandardStage.SELF_REVIEW.value: "Self Review",
    StandardStage.HR_SHORTLIST.value: "HR Shortlist",
    StandardStage.HM_SHORTLIST.value: "Manager Shortlist",
    StandardStage.OFFER.value: "Offer",
}

_SOURCE_INITIAL_STAGES = {
    "applied_self": StandardStage.SELF_REVIEW.value,
    "applied_referral": StandardStage.SELF_REVIEW.value,
    "recruiter_outreach": StandardStage.RECRUITER_REACHOUT.value,
}


def parse_interview_round(stage: object) -> Optional[int]:
    """Return the round number of an interview-round stage, else None"""
    if not isinstance(stage, str):
        return None
    match = _INTERVIEW_ROUND_PATTERN.fullmatch(stage)
    if match is None:
        return None
    return int(match.group(1))


def format_interview_round(round_number: int) -> str:
    """Build the stage identifier for an interview round"""
    if isinstance(round_number, bool) or not isinstance(round_number, int) or round_number <= 0:
        raise InvalidRoundException(round_number)
    return f"{INTERVIEW_ROUND_PREFIX}{round_number}"


def is_valid_stage(stage: object) -> bool:
    """Check a raw stage string against the standard set and the round pattern"""
    if not isinstance(stage, str):
        return False
    return stage in STANDARD_STAGES or parse_interview_round(stage) is not None


def require_valid_stage(stage: object) -> str:
    """Return the stage unchanged or raise InvalidStageException"""
    if not is_valid_stage(stage):
        raise InvalidStageException(stage)
    return stage


def derive_milestone(stage: str) -> Milestone:
    """Map a valid stage to its milestone"""
    require_valid_stage(stage)
    if parse_interview_round(stage) is not None:
        return Milestone.INTERVIEWING
    if stage == StandardStage.OFFER.value:
        return Milestone.POST_INTERVIEW
    return Milestone.EXPLORATION


def stage_display_name(stage: str) -> str:
    round_number = parse_interview_round(stage)
    if round_number is not None:
        return f"Interview Round {round_number}"
    return STAGE_DISPLAY_NAMES.get(stage, stage)


def initial_stage_for_source(source: Optional[str]) -> str:
    """Starting stage for a new application given how it was sourced"""
    if source is None:
        return INITIAL_STAGE
    return _SOURCE_INITIAL_STAGES.get(source, INITIAL_STAGE)
