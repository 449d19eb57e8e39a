# Models module
from .user import User, UserWorkStatus, PrivacySettings, LeaderboardScore
from .organization import Agency, Member
from .job import JobRequest
from .resume import SavedResume
from .application import Application
from .assessment import DiscPersonalitySession, TypingHeroSession
from .analysis import AiAnalysisResult, JobMatchResult
from .log import Log

__all__ = [
    "User",
    "UserWorkStatus",
    "PrivacySettings",
    "LeaderboardScore",
    "Agency",
    "Member",
    "JobRequest",
    "SavedResume",
    "Application",
    "DiscPersonalitySession",
    "TypingHeroSession",
    "AiAnalysisResult",
    "JobMatchResult",
    "Log",
]
