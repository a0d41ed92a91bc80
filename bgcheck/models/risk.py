"""Risk evaluation models."""

from enum import Enum

from pydantic import BaseModel, Field


class RiskLevel(str, Enum):
    """Ordinal risk classification."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS = {RiskLevel.LOW: 0, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 2}


class Requirements(BaseModel):
    """Minimum-activity thresholds an account is checked against."""

    min_age_days: int = 60
    min_badges: int = 300
    min_friends: int = 20
    min_groups: int = 10


class RiskResult(BaseModel):
    """Outcome of scoring an account."""

    level: RiskLevel
    score: int = Field(ge=0)
    factors: list[str] = []
    warnings: list[str] = []
