"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic_settings import BaseSettings


class LogFormat(str, Enum):
    """Log output format."""
    JSON = "json"
    CONSOLE = "console"


class CheckerConfig(BaseSettings):
    """Configuration for the bgcheck lookup service."""

    # Upstream endpoints
    users_api_url: str = "https://users.roblox.com"
    thumbnails_api_url: str = "https://thumbnails.roblox.com"
    friends_api_url: str = "https://friends.roblox.com"
    groups_api_url: str = "https://groups.roblox.com"
    badges_api_url: str = "https://badges.roblox.com"

    # HTTP settings
    http_timeout_seconds: float = 15.0
    user_agent: str | None = None

    # Pagination
    friends_page_limit: int = 200
    badges_page_limit: int = 100
    username_history_page_limit: int = 50
    max_pages: int = 100

    # Fetch followers/following counts concurrently
    concurrent_counts: bool = False

    # Blacklist tables (JSON file), empty tables when unset
    blacklist_path: str | None = None

    # Logging
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE

    model_config = {
        "env_prefix": "BGCHECK_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
