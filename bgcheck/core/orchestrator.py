"""Lookup orchestrator - coordinates fetching, normalization and scoring."""

import asyncio
from datetime import datetime, timezone

import httpx

from bgcheck.config import CheckerConfig
from bgcheck.core.blacklist import (
    BlacklistRepository,
    apply_blacklist,
    cross_reference,
    normalize_division,
)
from bgcheck.core.fetcher import Endpoints, avatar_params, create_client, fetch_json, fetch_profile
from bgcheck.core.paginator import PageCollection, collect_pages
from bgcheck.core.scorer import ScoringPolicy, score_risk
from bgcheck.core.transformer import (
    extract_avatar_url,
    parse_count,
    transform_badge,
    transform_friend,
    transform_group,
    transform_profile,
    transform_username,
)
from bgcheck.exceptions import BgcheckError, InvalidAccountIdError, UpstreamError
from bgcheck.logging import account_context, configure_logging, get_logger
from bgcheck.models.result import (
    Counts,
    EvaluationResult,
    LookupOutcome,
    LookupResult,
    Verification,
)


class Checker:
    """
    High-level lookup interface over the platform's public endpoints.

    Example:
        async with Checker() as checker:
            result = await checker.lookup(1457018669)
            print(result.risk.level)
    """

    def __init__(
        self,
        config: CheckerConfig | None = None,
        blacklist: BlacklistRepository | None = None,
        policy: ScoringPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize checker with optional configuration.

        Args:
            config: CheckerConfig instance, uses defaults if None
            blacklist: Blacklist tables, loaded from config.blacklist_path if None
            policy: Scoring policy, ScoringPolicy.default() if None
            transport: httpx transport override, used by tests
        """
        self.config = config or CheckerConfig()
        self.policy = policy or ScoringPolicy.default()
        self.endpoints = Endpoints.from_config(self.config)
        self.blacklist = blacklist
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._log = get_logger("checker")

    async def __aenter__(self) -> "Checker":
        """Async context manager entry - open the HTTP client."""
        configure_logging(self.config)
        if self.blacklist is None:
            self.blacklist = BlacklistRepository.from_config(self.config)
        self._client = create_client(self.config, self._transport)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise BgcheckError("Checker must be used as an async context manager")
        return self._client

    async def lookup(self, account_id: int) -> LookupResult:
        """
        Fetch and aggregate everything public about one account.

        Only the profile fetch is fatal; every other source degrades to
        empty/zero/null and clears its verification flag.

        Args:
            account_id: Positive numeric account ID

        Returns:
            LookupResult with profile, lists, verification and base risk

        Raises:
            InvalidAccountIdError: If account_id is not positive
            UpstreamError: If the profile fetch fails
        """
        if account_id <= 0:
            raise InvalidAccountIdError(f"Invalid account id: {account_id}")

        with account_context(account_id):
            return await self._lookup(account_id)

    async def _lookup(self, account_id: int) -> LookupResult:
        self._log.info("lookup_start")
        start = datetime.now()
        cfg = self.config

        raw_user = await fetch_profile(self.client, self.endpoints, account_id)

        avatar_url = await self._fetch_avatar(account_id)

        friends = await collect_pages(
            self.client,
            self.endpoints.friend_list(account_id),
            transform_friend,
            limit=cfg.friends_page_limit,
            sort_order="Asc",
            max_pages=cfg.max_pages,
        )
        self._check_collection("friends", friends)

        followers_count, following_count = await self._fetch_follow_counts(account_id)

        groups = await collect_pages(
            self.client,
            self.endpoints.group_roles(account_id),
            transform_group,
            max_pages=cfg.max_pages,
        )
        self._check_collection("groups", groups)

        badges = await collect_pages(
            self.client,
            self.endpoints.badge_list(account_id),
            transform_badge,
            limit=cfg.badges_page_limit,
            sort_order="Desc",
            max_pages=cfg.max_pages,
        )
        self._check_collection("badges", badges)

        history = await collect_pages(
            self.client,
            self.endpoints.username_history(account_id),
            transform_username,
            limit=cfg.username_history_page_limit,
            sort_order="Desc",
            max_pages=cfg.max_pages,
        )
        self._check_collection("username_history", history)

        total_badges = badges.total or len(badges.items)

        profile = transform_profile(
            raw_user,
            account_id,
            avatar_url=avatar_url,
            friends_count=len(friends.items),
            followers_count=followers_count,
            following_count=following_count,
            groups_count=len(groups.items),
            total_badges=total_badges,
        )

        verification = Verification(
            age_verified=profile.account_age_days is not None,
            friends_verified=friends.complete,
            groups_verified=groups.complete,
            badges_verified=badges.complete,
            username_history_verified=history.complete,
        )

        risk = score_risk(
            profile.account_age_days,
            total_badges if badges.complete else None,
            len(friends.items) if friends.complete else None,
            len(groups.items) if groups.complete else None,
            self.policy,
        )

        duration_ms = (datetime.now() - start).total_seconds() * 1000
        self._log.info(
            "lookup_complete",
            username=profile.username,
            friends=len(friends.items),
            groups=len(groups.items),
            badges=total_badges,
            risk_level=risk.level.value,
            duration_ms=duration_ms,
        )

        return LookupResult(
            profile=profile,
            friends=friends.items,
            groups=groups.items,
            badges=badges.items,
            username_history=history.items,
            verification=verification,
            risk=risk,
            requirements=self.policy.requirements,
            fetched_at=datetime.now(timezone.utc),
            duration_ms=duration_ms,
        )

    def evaluate_lookup(self, lookup: LookupResult, division: str | None = None) -> EvaluationResult:
        """
        Layer the blacklist cross-reference on an existing lookup.

        Args:
            lookup: Result of lookup()
            division: Evaluating division tag, "default" if None

        Returns:
            EvaluationResult with blacklist matches and combined risk
        """
        division = normalize_division(division)
        repository = self.blacklist if self.blacklist is not None else BlacklistRepository()
        profile = lookup.profile

        blacklist = cross_reference(
            profile.user_id,
            [g.id for g in lookup.groups],
            [f.id for f in lookup.friends],
            division,
            repository,
        )
        risk = apply_blacklist(lookup.risk, blacklist, self.policy)

        if blacklist.has_matches:
            self._log.warning(
                "blacklist_match",
                account_id=profile.user_id,
                division=division,
                groups=len(blacklist.blacklisted_groups),
                friends=len(blacklist.blacklisted_friends),
                cross_division=len(blacklist.cross_division),
            )

        return EvaluationResult(
            division=division,
            blacklist=blacklist,
            risk=risk,
            requirements=lookup.requirements,
            counts=Counts(
                account_age_days=profile.account_age_days or 0,
                friends_count=profile.friends_count,
                groups_count=profile.groups_count,
                total_badges=profile.total_badges,
            ),
        )

    async def evaluate(self, account_id: int, division: str | None = None) -> EvaluationResult:
        """Look up an account and evaluate it for a division."""
        lookup = await self.lookup(account_id)
        return self.evaluate_lookup(lookup, division)

    async def lookup_many(self, account_ids: list[int]) -> list[LookupOutcome]:
        """
        Look up several accounts one after another.

        Failures are reported per account instead of aborting the batch.

        Returns:
            List of LookupOutcome in the same order as input
        """
        outcomes = []
        for account_id in account_ids:
            try:
                result = await self.lookup(account_id)
            except UpstreamError as e:
                self._log.error("lookup_failed", account_id=account_id, error=str(e))
                outcomes.append(LookupOutcome(
                    account_id=account_id,
                    success=False,
                    error_message=str(e),
                    status_code=e.status_code,
                ))
            except InvalidAccountIdError as e:
                outcomes.append(LookupOutcome(
                    account_id=account_id,
                    success=False,
                    error_message=str(e),
                    status_code=400,
                ))
            else:
                outcomes.append(LookupOutcome(account_id=account_id, success=True, result=result))
        return outcomes

    async def _fetch_avatar(self, account_id: int) -> str | None:
        result = await fetch_json(
            self.client,
            self.endpoints.avatar(),
            avatar_params(account_id),
        )
        if not result.success:
            self._log.warning("secondary_fetch_failed", source="avatar", error=result.error)
            return None
        return extract_avatar_url(result.data)

    async def _fetch_count(self, source: str, url: str) -> int:
        result = await fetch_json(self.client, url)
        count = parse_count(result.data) if result.success else None
        if count is None:
            self._log.warning(
                "secondary_fetch_failed",
                source=source,
                error=result.error or "Malformed count",
            )
            return 0
        return count

    async def _fetch_follow_counts(self, account_id: int) -> tuple[int, int]:
        followers = self._fetch_count("followers_count", self.endpoints.followers_count(account_id))
        following = self._fetch_count("following_count", self.endpoints.following_count(account_id))

        if self.config.concurrent_counts:
            followers_count, following_count = await asyncio.gather(followers, following)
            return followers_count, following_count
        return await followers, await following

    def _check_collection(self, source: str, collection: PageCollection) -> None:
        if not collection.complete:
            self._log.warning(
                "secondary_fetch_failed",
                source=source,
                collected=len(collection.items),
                pages=collection.pages,
                error=collection.error,
            )
