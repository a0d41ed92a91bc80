"""Profile and list-entry data models."""

from datetime import datetime

from pydantic import BaseModel, Field


class Profile(BaseModel):
    """Public profile of a platform account, fetched fresh per lookup."""

    user_id: int
    username: str
    display_name: str
    description: str = ""
    created: datetime | None = None
    is_banned: bool = False
    avatar_url: str | None = None

    friends_count: int = Field(default=0, ge=0)
    followers_count: int = Field(default=0, ge=0)
    following_count: int = Field(default=0, ge=0)
    groups_count: int = Field(default=0, ge=0)
    total_badges: int = Field(default=0, ge=0)
    account_age_days: int | None = Field(default=None, ge=0)


class FriendEntry(BaseModel):
    """A friend of the checked account."""

    id: int
    username: str
    display_name: str


class GroupEntry(BaseModel):
    """A group membership with the account's role in it."""

    id: int
    name: str
    role: str = ""


class BadgeEntry(BaseModel):
    """An awarded badge."""

    id: int
    name: str


class UsernameHistoryEntry(BaseModel):
    """A previous username."""

    name: str
    created: datetime | None = None
