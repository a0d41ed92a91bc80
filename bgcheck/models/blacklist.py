"""Blacklist table and match models."""

from pydantic import BaseModel


class BlacklistedGroup(BaseModel):
    """A group whose members are flagged."""

    id: int
    name: str
    reason: str = ""


class BlacklistedFriend(BaseModel):
    """An account whose friends are flagged."""

    id: int
    username: str
    reason: str = ""


class CrossDivisionEntry(BaseModel):
    """Marks the account as blacklisted by another division."""

    division_id: str
    division_name: str


class BlacklistResult(BaseModel):
    """Blacklist matches for a single account."""

    blacklisted_groups: list[BlacklistedGroup] = []
    blacklisted_friends: list[BlacklistedFriend] = []
    cross_division: list[CrossDivisionEntry] = []

    @property
    def has_matches(self) -> bool:
        return bool(self.blacklisted_groups or self.blacklisted_friends or self.cross_division)
