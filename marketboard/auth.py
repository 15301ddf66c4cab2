"""Authentication context for the REST client."""

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class AuthSession:
    """
    Bearer token holder passed explicitly into the data source.

    The token is set on login (or at startup from config) and cleared on
    logout. Requests read it when they are built, so a pipeline run sees
    whatever token was present when each call went out.
    """

    token: Optional[str] = None

    def login(self, token: str) -> None:
        """Install a new bearer token."""
        if not token:
            raise ValueError("token must be a non-empty string")
        self.token = token
        logger.info("Auth session started")

    def logout(self) -> None:
        """Drop the bearer token."""
        if self.token:
            logger.info("Auth session cleared")
        self.token = None

    def headers(self) -> dict[str, str]:
        """Authorization headers for the current token, if any."""
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
