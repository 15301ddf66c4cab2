"""Call-site state for a leaderboard view that switches timeframes."""

import logging
from typing import Optional

from marketboard.models import LeaderboardResult
from .cancellation import CancellationToken, OperationCancelled
from .leaderboard_service import LeaderboardService, LeaderboardTimeframe

logger = logging.getLogger(__name__)


class LeaderboardLoader:
    """
    Holds the leaderboard currently on display.

    Each ``load`` supersedes the previous one. Runs are independent and may
    finish in any order; only the latest run's result is committed.
    """

    def __init__(self, service: LeaderboardService, limit: Optional[int] = None):
        self.service = service
        self.limit = limit
        self.current: Optional[LeaderboardResult] = None
        self._token: Optional[CancellationToken] = None

    @property
    def loading(self) -> bool:
        return self._token is not None

    async def load(self, timeframe: LeaderboardTimeframe) -> Optional[LeaderboardResult]:
        """
        Run the leaderboard for ``timeframe`` and commit it.

        Returns:
            The committed result, or None if a newer load superseded this one
        """
        if self._token is not None:
            self._token.cancel()
        token = CancellationToken()
        self._token = token

        try:
            result = await self.service.get_leaderboard(
                timeframe,
                limit=self.limit,
                cancel_token=token,
            )
            token.raise_if_cancelled()
        except OperationCancelled:
            logger.debug(f"Discarded superseded {LeaderboardTimeframe(timeframe).value} leaderboard run")
            return None
        finally:
            if self._token is token:
                self._token = None

        self.current = result
        return result

    def close(self) -> None:
        """Cancel any in-flight run; its result will not be committed."""
        if self._token is not None:
            self._token.cancel()
            self._token = None
