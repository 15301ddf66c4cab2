"""Application configuration."""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # API settings
    host: str = "0.0.0.0"
    port: int = 8001

    # Prediction market REST API
    api_url: str = "http://localhost:8000/api"
    api_token: Optional[str] = None
    request_timeout: float = 30.0

    # 429 backoff: retry_delay, then doubled, up to max_retries attempts
    max_retries: int = 2
    retry_delay: float = 1.0

    # Leaderboard pipeline limits
    leaderboard_limit: int = 50
    page_size: int = 100
    max_pages: int = 1000
    trades_page_size: int = 1000
    trades_max_pages: int = 100
    trades_max_items: Optional[int] = 10000

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        max_items = os.getenv("TRADES_MAX_ITEMS", "10000")
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8001")),
            api_url=os.getenv(
                "MARKETBOARD_API_URL",
                "http://localhost:8000/api"
            ),
            api_token=os.getenv("MARKETBOARD_API_TOKEN") or None,
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "30")),
            max_retries=int(os.getenv("MAX_RETRIES", "2")),
            retry_delay=float(os.getenv("RETRY_DELAY", "1.0")),
            leaderboard_limit=int(os.getenv("LEADERBOARD_LIMIT", "50")),
            page_size=int(os.getenv("PAGE_SIZE", "100")),
            max_pages=int(os.getenv("MAX_PAGES", "1000")),
            trades_page_size=int(os.getenv("TRADES_PAGE_SIZE", "1000")),
            trades_max_pages=int(os.getenv("TRADES_MAX_PAGES", "100")),
            # 0 disables the item cap
            trades_max_items=int(max_items) or None,
        )
