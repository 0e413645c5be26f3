# last_game/services/chesscom_client.py
"""
Provides an asynchronous adapter to the Chess.com Published-Data API.

This module encapsulates every network interaction of the application: the
per-player archive index, the monthly archives it points to, and the public
leaderboards. Responses are translated into domain objects by
`core.archive_parser`, so no caller ever handles raw JSON. The client keeps no
cache and performs no retries; every call is a single GET, and any
non-success response is raised as an `ArchiveFetchError`.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import structlog

from last_game.config.settings import AppSettings
from last_game.core.archive_parser import parse_archive_index, parse_archive_month
from last_game.exceptions import ArchiveFetchError, ArchivePayloadError
from last_game.types import ArchiveUrl, Game, normalize_username
from last_game.utils import metrics

logger = structlog.get_logger(__name__)


class ChessComClient:
    """A thin, stateless client for the Chess.com public API."""

    def __init__(self, settings: AppSettings, http_client: Optional[httpx.AsyncClient] = None):
        """
        Initializes the client.

        Args:
            settings: Application settings (base URL, user agent, timeout).
            http_client: An optional pre-built `httpx.AsyncClient`. Tests pass
                one backed by `httpx.MockTransport`. When omitted, the client
                creates and owns its own.
        """
        self._base_url = settings.api_base_url.rstrip("/")
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.request_timeout_s,
            follow_redirects=True,
        )

    async def __aenter__(self) -> "ChessComClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Closes the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    def archive_index_url(self, username: str) -> str:
        return f"{self._base_url}/player/{quote(username, safe='')}/games/archives"

    async def _get_json(self, url: str, endpoint: str) -> Any:
        """
        Issues a GET and decodes the JSON body.

        Raises:
            ArchiveFetchError: On transport failures, malformed URLs or any non-200 status.
            ArchivePayloadError: If the body is not valid JSON.
        """
        metrics.API_REQUESTS_TOTAL.labels(endpoint=endpoint).inc()
        try:
            response = await self._http.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            metrics.API_REQUEST_FAILURES_TOTAL.labels(endpoint=endpoint, status="transport").inc()
            logger.warning("Chess.com request failed.", url=url, error=str(e))
            raise ArchiveFetchError(url, message=f"Request failed for {url}: {e}") from e

        if response.status_code != 200:
            metrics.API_REQUEST_FAILURES_TOTAL.labels(endpoint=endpoint, status=str(response.status_code)).inc()
            logger.warning("Chess.com returned a non-success status.", url=url, status=response.status_code)
            raise ArchiveFetchError(url, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ArchivePayloadError(f"Invalid JSON from {url}: {e}") from e

    async def get_archive_index(self, username: str) -> List[ArchiveUrl]:
        """
        Fetches the archive URLs for a player, oldest first.

        The username is trimmed and lowercased. An empty username returns an
        empty list without touching the network.
        """
        normalized = normalize_username(username)
        if not normalized:
            return []
        url = self.archive_index_url(normalized)
        payload = await self._get_json(url, endpoint="archive_index")
        archives = parse_archive_index(payload, url)
        logger.debug("Fetched archive index.", username=normalized, num_archives=len(archives))
        return archives

    async def get_archive_month(self, archive_url: ArchiveUrl) -> List[Game]:
        """Fetches the games of one monthly archive, in published order."""
        payload = await self._get_json(archive_url, endpoint="archive_month")
        games = parse_archive_month(payload, archive_url)
        logger.debug("Fetched archive month.", archive_url=archive_url, num_games=len(games))
        return games

    async def get_leaderboards(self) -> Dict[str, Any]:
        """Fetches the public leaderboards, a mapping of category to entry lists."""
        url = f"{self._base_url}/leaderboards"
        payload = await self._get_json(url, endpoint="leaderboards")
        if not isinstance(payload, dict):
            raise ArchivePayloadError(f"Unexpected leaderboards payload from {url}")
        return payload
