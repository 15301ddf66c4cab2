"""Abstract base class for data sources."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from marketboard.models import Page, UserId, UserProfile


class DataSource(ABC):
    """
    Abstract interface for the prediction market backend.

    This abstraction allows swapping the live REST client for an in-memory
    source in tests and tooling without touching the services.
    """

    @abstractmethod
    async def get_page(
        self,
        endpoint: str,
        page: int,
        page_size: int,
        params: Optional[dict[str, Any]] = None,
    ) -> Page:
        """
        Retrieve one page of a page-numbered list endpoint.

        Args:
            endpoint: Endpoint path, e.g. "/trades/"
            page: 1-based page number
            page_size: Items per page
            params: Extra query parameters (filters)

        Returns:
            The response normalized into a Page (paginated, list or single)
        """
        pass

    @abstractmethod
    async def get_user(self, user_id: UserId) -> UserProfile:
        """
        Retrieve a user's profile.

        Args:
            user_id: Backend user id

        Returns:
            UserProfile for the user

        Raises:
            NotFoundError: If the user does not exist
        """
        pass

    @abstractmethod
    async def get_analytics(self, period: str, cursor: Optional[str] = None) -> Any:
        """
        Retrieve a server-side leaderboard page.

        Args:
            period: "weekly" or "monthly"
            cursor: Continuation token from a previous page, None for the first page

        Returns:
            Raw JSON payload (paginated envelope or bare array)
        """
        pass

    @abstractmethod
    async def get_user_rank(self, user_id: UserId) -> dict:
        """Retrieve the backend's rank summary for one user."""
        pass

    async def close(self) -> None:
        """
        Clean up resources (e.g., close HTTP sessions).

        Override this if the data source holds resources that need cleanup.
        """
        pass
