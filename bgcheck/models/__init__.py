"""Pydantic models for bgcheck."""

from bgcheck.models.blacklist import (
    BlacklistedFriend,
    BlacklistedGroup,
    BlacklistResult,
    CrossDivisionEntry,
)
from bgcheck.models.profile import (
    BadgeEntry,
    FriendEntry,
    GroupEntry,
    Profile,
    UsernameHistoryEntry,
)
from bgcheck.models.result import (
    Counts,
    EvaluationResult,
    LookupOutcome,
    LookupResult,
    Verification,
)
from bgcheck.models.risk import Requirements, RiskLevel, RiskResult

__all__ = [
    "Profile",
    "FriendEntry",
    "GroupEntry",
    "BadgeEntry",
    "UsernameHistoryEntry",
    "Requirements",
    "RiskLevel",
    "RiskResult",
    "BlacklistedGroup",
    "BlacklistedFriend",
    "CrossDivisionEntry",
    "BlacklistResult",
    "Verification",
    "LookupResult",
    "LookupOutcome",
    "Counts",
    "EvaluationResult",
]
