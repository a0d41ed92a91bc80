"""Aggregate lookup and evaluation result models."""

from datetime import datetime

from pydantic import BaseModel, Field

from bgcheck.models.blacklist import BlacklistResult
from bgcheck.models.profile import (
    BadgeEntry,
    FriendEntry,
    GroupEntry,
    Profile,
    UsernameHistoryEntry,
)
from bgcheck.models.risk import Requirements, RiskResult


class Verification(BaseModel):
    """Which secondary sources were fetched completely."""

    age_verified: bool = True
    friends_verified: bool = True
    groups_verified: bool = True
    badges_verified: bool = True
    username_history_verified: bool = True


class LookupResult(BaseModel):
    """Everything fetched for one account, plus its base risk."""

    profile: Profile
    friends: list[FriendEntry] = []
    groups: list[GroupEntry] = []
    badges: list[BadgeEntry] = []
    username_history: list[UsernameHistoryEntry] = []
    verification: Verification = Field(default_factory=Verification)
    risk: RiskResult
    requirements: Requirements = Field(default_factory=Requirements)
    fetched_at: datetime
    duration_ms: float = 0.0


class Counts(BaseModel):
    """The four scored metrics as reported for an evaluation."""

    account_age_days: int
    friends_count: int
    groups_count: int
    total_badges: int


class EvaluationResult(BaseModel):
    """Risk evaluation including the blacklist layer."""

    division: str
    blacklist: BlacklistResult
    risk: RiskResult
    requirements: Requirements = Field(default_factory=Requirements)
    counts: Counts


class LookupOutcome(BaseModel):
    """Per-account outcome of a batch lookup."""

    account_id: int
    success: bool
    result: LookupResult | None = None
    error_message: str | None = None
    status_code: int | None = None
