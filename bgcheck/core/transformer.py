"""Normalization of raw upstream records into models."""

from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter, ValidationError

from bgcheck.exceptions import InvalidAccountIdError
from bgcheck.models.profile import (
    BadgeEntry,
    FriendEntry,
    GroupEntry,
    Profile,
    UsernameHistoryEntry,
)

# Ordered fallbacks per entity: the first path holding a non-empty value wins.
# Dotted paths walk nested objects ("group.id" -> raw["group"]["id"]).
PROFILE_FIELDS: dict[str, tuple[str, ...]] = {
    "user_id": ("id", "userId"),
    "username": ("name", "username"),
    "display_name": ("displayName", "name", "username"),
    "description": ("description",),
    "created": ("created",),
    "is_banned": ("isBanned",),
}

FRIEND_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("id", "userId"),
    # The friends endpoint reports the username as "name"
    "username": ("name", "username"),
    "display_name": ("displayName", "name", "username"),
}

GROUP_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("group.id", "id"),
    "name": ("group.name", "name"),
    "role": ("role.name", "role"),
}

BADGE_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "name": ("name", "displayName"),
}

USERNAME_HISTORY_FIELDS: dict[str, tuple[str, ...]] = {
    "name": ("name", "username"),
    "created": ("created",),
}


def resolve_path(raw: dict, path: str) -> Any:
    """Walk a dotted path through nested dicts, None if any step is missing."""
    value: Any = raw
    for key in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def pick(raw: dict, paths: tuple[str, ...], default: Any = None) -> Any:
    """Return the value of the first path that is neither None nor empty."""
    for path in paths:
        value = resolve_path(raw, path)
        if value is not None and value != "":
            return value
    return default


def normalize_record(raw: dict, table: dict[str, tuple[str, ...]]) -> dict[str, Any]:
    """Apply a fallback table to a raw record."""
    return {name: pick(raw, paths) for name, paths in table.items()}


def to_int(value: Any) -> int | None:
    """
    Coerce an upstream number to int.

    Examples:
        5 -> 5
        "12" -> 12
        "abc" -> None
        True -> None
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


_DATETIME = TypeAdapter(datetime)


def parse_created(value: Any) -> datetime | None:
    """
    Parse an upstream ISO 8601 timestamp into an aware UTC datetime.

    Examples:
        "2015-03-14T18:22:10.123Z" -> datetime(2015, 3, 14, 18, 22, 10, 123000, tzinfo=UTC)
        "2006-02-27T21:06:40.3Z" -> datetime(2006, 2, 27, 21, 6, 40, 300000, tzinfo=UTC)
        "not a date" -> None
    """
    if not value or not isinstance(value, str):
        return None

    try:
        parsed = _DATETIME.validate_python(value.strip())
    except ValidationError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def account_age_days(created: datetime | None, now: datetime | None = None) -> int | None:
    """Whole days since creation, never negative; None when unknown."""
    if created is None:
        return None
    now = now or datetime.now(timezone.utc)
    return max(0, (now - created).days)


def parse_count(payload: Any) -> int | None:
    """Read ``{"count": n}`` from the count endpoints."""
    if not isinstance(payload, dict):
        return None
    count = to_int(payload.get("count"))
    if count is None or count < 0:
        return None
    return count


def extract_avatar_url(payload: Any) -> str | None:
    """First ``imageUrl`` of a thumbnails response."""
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        return None
    return data[0].get("imageUrl") or None


def transform_friend(raw: dict) -> FriendEntry | None:
    """Normalize a friends page record; records without an id are skipped."""
    fields = normalize_record(raw, FRIEND_FIELDS)
    friend_id = to_int(fields["id"])
    if friend_id is None:
        return None
    return FriendEntry(
        id=friend_id,
        username=str(fields["username"] or ""),
        display_name=str(fields["display_name"] or ""),
    )


def transform_group(raw: dict) -> GroupEntry | None:
    """Normalize a group-roles record."""
    fields = normalize_record(raw, GROUP_FIELDS)
    group_id = to_int(fields["id"])
    if group_id is None:
        return None
    return GroupEntry(
        id=group_id,
        name=str(fields["name"] or ""),
        role=str(fields["role"] or ""),
    )


def transform_badge(raw: dict) -> BadgeEntry | None:
    """Normalize a badges page record."""
    fields = normalize_record(raw, BADGE_FIELDS)
    badge_id = to_int(fields["id"])
    if badge_id is None:
        return None
    return BadgeEntry(id=badge_id, name=str(fields["name"] or ""))


def transform_username(raw: dict) -> UsernameHistoryEntry | None:
    """Normalize a username-history record."""
    fields = normalize_record(raw, USERNAME_HISTORY_FIELDS)
    if not fields["name"]:
        return None
    return UsernameHistoryEntry(
        name=str(fields["name"]),
        created=parse_created(fields["created"]),
    )


def transform_profile(
    raw: dict,
    account_id: int,
    *,
    avatar_url: str | None = None,
    friends_count: int = 0,
    followers_count: int = 0,
    following_count: int = 0,
    groups_count: int = 0,
    total_badges: int = 0,
    now: datetime | None = None,
) -> Profile:
    """
    Build the Profile model from the raw profile record and fetched counts.

    Args:
        raw: Raw profile dict from the users endpoint
        account_id: Requested ID, used if the record carries none
        avatar_url: Headshot URL or None
        now: Reference time for account age (defaults to current UTC time)

    Returns:
        Validated Profile model
    """
    fields = normalize_record(raw, PROFILE_FIELDS)
    created = parse_created(fields["created"])
    username = str(fields["username"] or "")

    return Profile(
        user_id=to_int(fields["user_id"]) or account_id,
        username=username,
        display_name=str(fields["display_name"] or username),
        description=str(fields["description"] or ""),
        created=created,
        is_banned=bool(fields["is_banned"]),
        avatar_url=avatar_url,
        friends_count=friends_count,
        followers_count=followers_count,
        following_count=following_count,
        groups_count=groups_count,
        total_badges=total_badges,
        account_age_days=account_age_days(created, now),
    )


def parse_account_id(raw: str | int | None) -> int:
    """
    Validate a user-supplied account ID.

    Examples:
        " 1457018669 " -> 1457018669
        "abc" -> InvalidAccountIdError
        "0" -> InvalidAccountIdError

    Raises:
        InvalidAccountIdError: If missing, non-numeric or not positive
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise InvalidAccountIdError("Missing 'id' query parameter")

    if isinstance(raw, int) and not isinstance(raw, bool):
        account_id = raw
    else:
        text = str(raw).strip()
        if not (text.isascii() and text.isdigit()):
            raise InvalidAccountIdError("Invalid 'id' query parameter")
        account_id = int(text)

    if account_id <= 0:
        raise InvalidAccountIdError("Invalid 'id' query parameter")
    return account_id
