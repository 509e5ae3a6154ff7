"""
Domain Enums
Business enumerations for applications and their activity streams
"""
from enum import Enum


class StageActor(str, Enum):
    """Who moved an application to a new stage"""
    USER = "user"
    SYSTEM = "system"


class ApplicationSource(str, Enum):
    """How the user came to pursue the role"""
    APPLIED_SELF = "applied_self"
    APPLIED_REFERRAL = "applied_referral"
    RECRUITER_OUTREACH = "recruiter_outreach"


class ConversationMedium(str, Enum):
    EMAIL = "email"
    LINKEDIN = "linkedin"
    PHONE = "phone"
    WHATSAPP = "whatsapp"
    OTHER = "other"


class ConversationDirection(str, Enum):
    OUTBOUND = "outbound"
    INBOUND = "inbound"
