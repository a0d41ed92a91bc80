"""FastAPI web server for bgcheck lookups."""

from contextlib import asynccontextmanager
from datetime import datetime

import httpx
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from bgcheck import Checker, CheckerConfig, __version__
from bgcheck.core.exporter import to_dict
from bgcheck.core.transformer import parse_account_id
from bgcheck.exceptions import InvalidAccountIdError, UpstreamError
from bgcheck.logging import get_logger

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str


class ConfigResponse(BaseModel):
    """Current lookup configuration with descriptions."""

    users_api_url: str = Field(..., description="Base URL of the users API (profile, username history).")
    friends_api_url: str = Field(..., description="Base URL of the friends API (friends, follower counts).")
    groups_api_url: str = Field(..., description="Base URL of the groups API.")
    badges_api_url: str = Field(..., description="Base URL of the badges API.")
    thumbnails_api_url: str = Field(..., description="Base URL of the avatar thumbnails API.")
    http_timeout_seconds: float = Field(
        ...,
        description="Timeout for each upstream request. Every request is attempted once.",
        json_schema_extra={"example": 15.0},
    )
    friends_page_limit: int = Field(..., description="Page size for the friends list.")
    badges_page_limit: int = Field(..., description="Page size for the badge list.")
    username_history_page_limit: int = Field(..., description="Page size for username history.")
    max_pages: int = Field(
        ...,
        description="Maximum pages fetched per list; a list cut off here is reported unverified.",
    )
    concurrent_counts: bool = Field(
        ...,
        description="Fetch follower and following counts concurrently.",
    )
    blacklist_loaded: bool = Field(..., description="Whether blacklist tables were loaded from a file.")
    log_level: str = Field(
        ...,
        description="Logging verbosity level.",
        json_schema_extra={"enum": ["DEBUG", "INFO", "WARNING", "ERROR"]},
    )


def create_app(
    config: CheckerConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        config: CheckerConfig, read from the environment if None
        transport: httpx transport override for the shared Checker

    Returns:
        FastAPI application
    """
    log = get_logger("api")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage the shared Checker lifecycle."""
        checker = Checker(config or CheckerConfig(), transport=transport)
        async with checker:
            app.state.checker = checker
            yield

    app = FastAPI(
        title="bgcheck API",
        description="Background check lookups over public profile data",
        version=__version__,
        lifespan=lifespan,
    )

    @app.exception_handler(InvalidAccountIdError)
    async def invalid_id_handler(request: Request, exc: InvalidAccountIdError):
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(UpstreamError)
    async def upstream_handler(request: Request, exc: UpstreamError):
        log.warning("primary_fetch_failed", path=request.url.path, status=exc.status_code, error=str(exc))
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unexpected_handler(request: Request, exc: Exception):
        log.exception("unexpected_error", path=request.url.path)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check():
        """Check API health status."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            timestamp=datetime.now().isoformat(),
        )

    @app.get("/api/roblox/user", tags=["Lookup"])
    async def lookup_user(
        request: Request,
        account_id: str | None = Query(None, alias="id", description="Numeric account ID"),
    ):
        """
        Fetch profile, avatar, friends, groups, badges and username history.

        Secondary sources that fail come back empty and flagged in
        `verification`; only a failed profile fetch fails the request.
        """
        user_id = parse_account_id(account_id)
        result = await request.app.state.checker.lookup(user_id)
        return JSONResponse(to_dict(result), headers=NO_STORE_HEADERS)

    @app.get("/api/evaluate", tags=["Lookup"])
    async def evaluate_user(
        request: Request,
        account_id: str | None = Query(None, alias="id", description="Numeric account ID"),
        division: str = Query("default", description="Evaluating division"),
    ):
        """
        Score an account and cross-reference it against the blacklists.

        Returns `{blacklist, risk, requirements, counts, division}`.
        """
        user_id = parse_account_id(account_id)
        result = await request.app.state.checker.evaluate(user_id, division)
        return JSONResponse(to_dict(result), headers=NO_STORE_HEADERS)

    @app.get(
        "/api/config",
        response_model=ConfigResponse,
        tags=["System"],
        summary="Get current configuration",
    )
    async def get_config(request: Request):
        """
        Get the active lookup configuration.

        **Configuration is set via environment variables** with the `BGCHECK_` prefix:
        - `BGCHECK_HTTP_TIMEOUT_SECONDS=10`
        - `BGCHECK_BLACKLIST_PATH=blacklist.json`
        - `BGCHECK_CONCURRENT_COUNTS=true`
        """
        checker: Checker = request.app.state.checker
        cfg = checker.config
        return ConfigResponse(
            users_api_url=cfg.users_api_url,
            friends_api_url=cfg.friends_api_url,
            groups_api_url=cfg.groups_api_url,
            badges_api_url=cfg.badges_api_url,
            thumbnails_api_url=cfg.thumbnails_api_url,
            http_timeout_seconds=cfg.http_timeout_seconds,
            friends_page_limit=cfg.friends_page_limit,
            badges_page_limit=cfg.badges_page_limit,
            username_history_page_limit=cfg.username_history_page_limit,
            max_pages=cfg.max_pages,
            concurrent_counts=cfg.concurrent_counts,
            blacklist_loaded=cfg.blacklist_path is not None,
            log_level=cfg.log_level,
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
