"""Blacklist tables and the cross-reference risk layer."""

from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ValidationError

from bgcheck.config import CheckerConfig
from bgcheck.core.scorer import ScoringPolicy
from bgcheck.exceptions import ConfigError
from bgcheck.models.blacklist import (
    BlacklistedFriend,
    BlacklistedGroup,
    BlacklistResult,
    CrossDivisionEntry,
)
from bgcheck.models.risk import RiskLevel, RiskResult

DEFAULT_DIVISION = "default"

DIVISION_NAMES: dict[str, str] = {
    "default": "Default",
    "navy": "Navy / Fleet",
    "intel": "Intelligence",
    "sf": "Special Forces",
}

# Score added per match
GROUP_WEIGHT = 3
FRIEND_WEIGHT = 2
CROSS_DIVISION_WEIGHT = 4


def normalize_division(division: str | None) -> str:
    """Lowercase a division tag, falling back to the default division."""
    if division is None or not division.strip():
        return DEFAULT_DIVISION
    return division.strip().lower()


def division_name(division: str) -> str:
    return DIVISION_NAMES.get(division, division)


class BlacklistRepository(BaseModel):
    """
    In-memory blacklist tables keyed by account or group ID.

    The tables are empty unless loaded from a JSON file shaped like::

        {
          "groups": [{"id": 1, "name": "...", "reason": "..."}],
          "friends": [{"id": 2, "username": "...", "reason": "..."}],
          "cross_division": {"123": ["navy", "intel"]}
        }
    """

    groups: list[BlacklistedGroup] = []
    friends: list[BlacklistedFriend] = []
    cross_division: dict[str, list[str]] = {}

    @classmethod
    def load(cls, path: str | Path) -> "BlacklistRepository":
        """
        Load tables from a JSON file.

        Raises:
            ConfigError: If the file is missing or malformed
        """
        file_path = Path(path)
        if not file_path.exists():
            raise ConfigError(f"Blacklist file not found: {file_path}")
        try:
            return cls.model_validate_json(file_path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise ConfigError(f"Invalid blacklist file {file_path}: {e}") from e

    @classmethod
    def from_config(cls, config: CheckerConfig) -> "BlacklistRepository":
        if config.blacklist_path:
            return cls.load(config.blacklist_path)
        return cls()

    def find_groups(self, group_ids: Iterable[int]) -> list[BlacklistedGroup]:
        wanted = set(group_ids)
        return [g for g in self.groups if g.id in wanted]

    def find_friends(self, friend_ids: Iterable[int]) -> list[BlacklistedFriend]:
        wanted = set(friend_ids)
        return [f for f in self.friends if f.id in wanted]

    def divisions_for(self, account_id: int) -> list[str]:
        return [normalize_division(d) for d in self.cross_division.get(str(account_id), [])]


def cross_reference(
    account_id: int,
    group_ids: Iterable[int],
    friend_ids: Iterable[int],
    division: str,
    repository: BlacklistRepository,
) -> BlacklistResult:
    """
    Look up an account's groups, friends and ID in the blacklist tables.

    Entries for the evaluating division itself are not cross-division hits.
    """
    division = normalize_division(division)
    seen: set[str] = set()
    entries: list[CrossDivisionEntry] = []
    for other in repository.divisions_for(account_id):
        if other == division or other in seen:
            continue
        seen.add(other)
        entries.append(CrossDivisionEntry(division_id=other, division_name=division_name(other)))

    return BlacklistResult(
        blacklisted_groups=repository.find_groups(group_ids),
        blacklisted_friends=repository.find_friends(friend_ids),
        cross_division=entries,
    )


def apply_blacklist(
    base: RiskResult,
    blacklist: BlacklistResult,
    policy: ScoringPolicy | None = None,
) -> RiskResult:
    """
    Layer blacklist matches on top of a base risk result.

    The returned score and level are never lower than the base ones, and
    any match rules out Low.
    """
    if not blacklist.has_matches:
        return base

    policy = policy or ScoringPolicy.default()
    factors = list(base.factors)
    warnings = list(base.warnings)
    added = 0

    if blacklist.blacklisted_groups:
        added += len(blacklist.blacklisted_groups) * GROUP_WEIGHT
        factors.append("Member of blacklisted groups")
    if blacklist.blacklisted_friends:
        added += len(blacklist.blacklisted_friends) * FRIEND_WEIGHT
        factors.append("Friends with blacklisted users")
    if blacklist.cross_division:
        added += len(blacklist.cross_division) * CROSS_DIVISION_WEIGHT
        factors.append("Blacklisted in other divisions")
        warnings.append("Cross-division blacklist detected")

    score = policy.clamp(base.score + added)
    level = RiskLevel.HIGH if score >= policy.high_score else RiskLevel.MEDIUM
    if base.level.rank > level.rank:
        level = base.level

    return RiskResult(level=level, score=score, factors=factors, warnings=warnings)
