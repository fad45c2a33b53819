"""
Directory service client: user lookup and tag-expression resolution.

Async HTTP via httpx. Fail-fast: any transport or HTTP error surfaces as
DirectoryError, there is no fallback or retry.
"""

import logging
from typing import Any

import httpx

from auth.types import Distribution, User

logger = logging.getLogger(__name__)


class DirectoryError(Exception):
    """Raised when a directory request fails."""


class DirectoryClient:
    """Resolves user ids and `@tag:org` expressions against the directory API."""

    USERS_PATH = "/v1/user/"
    TAGMATH_PATH = "/v1/tagmath/"

    def __init__(
        self,
        base_url: str,
        api_token: str,
        timeout_seconds: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            base_url: Root URL of the directory service
            api_token: Token sent in the Authorization header
            timeout_seconds: Per-request timeout
            transport: Optional httpx transport (used by tests)

        Raises:
            ValueError: If any credential is empty
        """
        if not base_url:
            raise ValueError("base_url is required")
        if not api_token:
            raise ValueError("api_token is required")

        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Token {api_token}"},
            timeout=timeout_seconds,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Directory returned {e.response.status_code} for {path}")
            raise DirectoryError(f"Directory request failed: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Directory connection failed: {e}")
            raise DirectoryError(f"Directory request failed: {e}") from e
        return response.json()

    async def get_users(self, ids: list[str]) -> list[User]:
        """
        Fetch users by id.

        Returns users in the order of `ids`; unknown ids are skipped.
        """
        if not ids:
            return []
        data = await self._request("GET", self.USERS_PATH, params={"id_in": ",".join(ids)})
        by_id = {}
        for record in data.get("results", []):
            user = User.model_validate(record)
            by_id[user.id] = user
        return [by_id[uid] for uid in ids if uid in by_id]

    async def resolve_tags(self, expression: str) -> Distribution:
        """Resolve a tag expression such as `@alice:acme + @bob:acme`."""
        data = await self._request("POST", self.TAGMATH_PATH, json={"expressions": [expression]})
        results = data.get("results") or [{}]
        return Distribution.model_validate(results[0])

    async def close(self) -> None:
        await self._client.aclose()
