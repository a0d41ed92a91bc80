"""httpx-based fetcher for the platform's public REST endpoints."""

from dataclasses import dataclass
from typing import Any

import httpx

from bgcheck.config import CheckerConfig
from bgcheck.exceptions import ProfileNotFoundError, UpstreamError


@dataclass
class FetchResult:
    """Result of a single JSON fetch."""

    data: Any
    success: bool
    error: str | None = None
    response_status: int | None = None


DEFAULT_USER_AGENT = "bgcheck/0.1 (+background check lookup)"


@dataclass(frozen=True)
class Endpoints:
    """URL builders for every upstream endpoint the aggregator reads."""

    users: str
    thumbnails: str
    friends: str
    groups: str
    badges: str

    @classmethod
    def from_config(cls, config: CheckerConfig) -> "Endpoints":
        return cls(
            users=config.users_api_url.rstrip("/"),
            thumbnails=config.thumbnails_api_url.rstrip("/"),
            friends=config.friends_api_url.rstrip("/"),
            groups=config.groups_api_url.rstrip("/"),
            badges=config.badges_api_url.rstrip("/"),
        )

    def profile(self, account_id: int) -> str:
        return f"{self.users}/v1/users/{account_id}"

    def avatar(self) -> str:
        return f"{self.thumbnails}/v1/users/avatar-headshot"

    def friend_list(self, account_id: int) -> str:
        return f"{self.friends}/v1/users/{account_id}/friends"

    def followers_count(self, account_id: int) -> str:
        return f"{self.friends}/v1/users/{account_id}/followers/count"

    def following_count(self, account_id: int) -> str:
        return f"{self.friends}/v1/users/{account_id}/followings/count"

    def group_roles(self, account_id: int) -> str:
        return f"{self.groups}/v2/users/{account_id}/groups/roles"

    def badge_list(self, account_id: int) -> str:
        return f"{self.badges}/v1/users/{account_id}/badges"

    def username_history(self, account_id: int) -> str:
        return f"{self.users}/v1/users/{account_id}/username-history"


def avatar_params(account_id: int) -> dict[str, str]:
    """Query parameters for a 150x150 PNG headshot."""
    return {
        "userIds": str(account_id),
        "size": "150x150",
        "format": "Png",
        "isCircular": "false",
    }


def create_client(
    config: CheckerConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Build the shared async HTTP client.

    Args:
        config: CheckerConfig with timeout and user agent
        transport: Optional transport override (e.g. httpx.MockTransport)

    Returns:
        Configured httpx.AsyncClient
    """
    return httpx.AsyncClient(
        timeout=config.http_timeout_seconds,
        follow_redirects=True,
        headers={
            "Accept": "application/json",
            "User-Agent": config.user_agent or DEFAULT_USER_AGENT,
        },
        transport=transport,
    )


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, Any] | None = None,
) -> FetchResult:
    """
    GET a URL once and decode its JSON body.

    Never raises for HTTP, transport or decoding failures; those come back
    as an unsuccessful FetchResult so callers can degrade.

    Args:
        client: Shared AsyncClient
        url: Absolute endpoint URL
        params: Query parameters

    Returns:
        FetchResult with decoded JSON or error details
    """
    try:
        response = await client.get(url, params=params)
    except httpx.HTTPError as e:
        return FetchResult(data=None, success=False, error=f"Transport error: {e}")

    status = response.status_code
    if not response.is_success:
        return FetchResult(
            data=None,
            success=False,
            error=f"HTTP {status}",
            response_status=status,
        )

    try:
        data = response.json()
    except ValueError:
        return FetchResult(
            data=None,
            success=False,
            error="Invalid JSON body",
            response_status=status,
        )

    return FetchResult(data=data, success=True, response_status=status)


async def fetch_profile(
    client: httpx.AsyncClient,
    endpoints: Endpoints,
    account_id: int,
) -> dict:
    """
    Fetch the primary profile record, which every lookup depends on.

    Args:
        client: Shared AsyncClient
        endpoints: Endpoint URL builders
        account_id: Numeric account ID

    Returns:
        Raw profile dict

    Raises:
        ProfileNotFoundError: If the upstream answers 404
        UpstreamError: Any other failure, carrying the upstream status
            (502 when there was no HTTP response at all)
    """
    result = await fetch_json(client, endpoints.profile(account_id))

    if not result.success:
        if result.response_status == 404:
            raise ProfileNotFoundError(f"Account {account_id} not found")
        raise UpstreamError(
            f"Failed to fetch account {account_id}: {result.error}",
            status_code=result.response_status or 502,
        )

    if not isinstance(result.data, dict):
        raise UpstreamError(f"Malformed profile response for account {account_id}")

    return result.data
