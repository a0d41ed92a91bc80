"""Shared fixtures: a stub of the platform's REST endpoints built on httpx.MockTransport."""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import httpx
import pytest

from bgcheck.config import CheckerConfig, LogFormat


FIXTURES_DIR = Path(__file__).parent / "fixtures"

ACCOUNT_ID = 1457018669

_UNSET = object()


def load_fixture(name: str) -> Any:
    """Load a JSON fixture by file name."""
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


def paths(account_id: int = ACCOUNT_ID) -> dict[str, str]:
    """URL paths of every upstream endpoint for an account."""
    return {
        "profile": f"/v1/users/{account_id}",
        "avatar": "/v1/users/avatar-headshot",
        "friends": f"/v1/users/{account_id}/friends",
        "followers": f"/v1/users/{account_id}/followers/count",
        "following": f"/v1/users/{account_id}/followings/count",
        "groups": f"/v2/users/{account_id}/groups/roles",
        "badges": f"/v1/users/{account_id}/badges",
        "history": f"/v1/users/{account_id}/username-history",
    }


def make_friends(count: int, start: int = 1) -> list[dict]:
    return [
        {"id": i, "name": f"friend{i}", "displayName": f"Friend {i}", "isOnline": False}
        for i in range(start, start + count)
    ]


def make_groups(count: int, start: int = 1001) -> list[dict]:
    return [
        {
            "group": {"id": i, "name": f"Group {i}", "memberCount": 50},
            "role": {"id": 1, "name": "Member", "rank": 1},
        }
        for i in range(start, start + count)
    ]


def make_badges(count: int, start: int = 1) -> list[dict]:
    return [{"id": i, "name": f"Badge {i}", "enabled": True} for i in range(start, start + count)]


def chunk(items: list, size: int) -> list[list]:
    """Split records into pages; an empty list still yields one page."""
    return [items[i:i + size] for i in range(0, len(items), size)] or [[]]


def created_days_ago(days: int) -> str:
    created = datetime.now(timezone.utc) - timedelta(days=days, hours=1)
    return created.isoformat().replace("+00:00", "Z")


class StubUpstream:
    """Serves canned JSON by URL path and ``cursor`` query parameter."""

    def __init__(self):
        self.routes: dict[str, dict[str | None, tuple[int, Any]]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, body: Any = None, status: int = 200, cursor: str | None = None) -> None:
        self.routes.setdefault(path, {})[cursor] = (status, body)

    def add_pages(self, path: str, pages: list[list[dict]], total: int | None = None) -> None:
        """Register pages linked by cursors "page1", "page2", ..."""
        for i, items in enumerate(pages):
            cursor = None if i == 0 else f"page{i}"
            next_cursor = f"page{i + 1}" if i < len(pages) - 1 else None
            body: dict[str, Any] = {
                "previousPageCursor": cursor,
                "nextPageCursor": next_cursor,
                "data": items,
            }
            if total is not None:
                body["total"] = total
            self.add(path, body, cursor=cursor)

    def fail(self, path: str, status: int = 503, cursor: str | None = None) -> None:
        self.add(
            path,
            {"errors": [{"code": 0, "message": "Service unavailable"}]},
            status=status,
            cursor=cursor,
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        pages = self.routes.get(request.url.path)
        if pages is None:
            return httpx.Response(404, json={"errors": [{"code": 3, "message": "Not found"}]})
        cursor = request.url.params.get("cursor")
        if cursor not in pages:
            return httpx.Response(400, json={"errors": [{"code": 1, "message": "Invalid cursor"}]})
        status, body = pages[cursor]
        return httpx.Response(status, json=body)

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def register_account(
    upstream: StubUpstream,
    account_id: int = ACCOUNT_ID,
    *,
    created: Any = _UNSET,
    friends: int = 25,
    groups: int = 12,
    badges: int = 320,
    followers: int = 41,
    following: int = 17,
) -> dict[str, str]:
    """
    Register a complete, healthy account on the stub.

    Defaults meet every requirement; pass smaller counts to build a
    riskier account, or ``created=None`` to drop the creation date.
    """
    p = paths(account_id)

    profile = load_fixture("user_profile.json")
    profile["id"] = account_id
    if created is not _UNSET:
        profile["created"] = created
    upstream.add(p["profile"], profile)

    upstream.add(p["avatar"], load_fixture("avatar_headshot.json"))
    upstream.add_pages(p["friends"], chunk(make_friends(friends), 10))
    upstream.add(p["followers"], {"count": followers})
    upstream.add(p["following"], {"count": following})
    upstream.add_pages(p["groups"], [make_groups(groups)])
    upstream.add_pages(p["badges"], chunk(make_badges(badges), 100))
    upstream.add(p["history"], load_fixture("username_history.json"))
    return p


@pytest.fixture
def upstream() -> StubUpstream:
    return StubUpstream()


@pytest.fixture
def config() -> CheckerConfig:
    return CheckerConfig(log_level="WARNING", log_format=LogFormat.JSON, blacklist_path=None)
