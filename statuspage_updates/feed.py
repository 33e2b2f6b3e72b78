
# StatuspageFeed: the feed collaborator consumed by UpdatePoller.

# responsibilities:
#   - build endpoint URLs for one statuspage.io page
#   - fetch incidents through the shared conditional HTTP client
#   - re-serve the last parsed snapshot when the server answers 304
#   - turn every network / HTTP / timeout / decoding failure into FetchError

import asyncio
import logging

import aiohttp

from statuspage_updates.config import STATUSPAGE_API_TEMPLATE
from statuspage_updates.errors import FetchError
from statuspage_updates.http_client import ConditionalHTTPClient
from statuspage_updates.models import Snapshot
from statuspage_updates.parser import parse_snapshot

log = logging.getLogger(__name__)


class StatuspageFeed:
    """
    Typed access to a page's incident endpoints.

    All requests go through ConditionalHTTPClient, so each fetch is bounded
    by the client's total timeout.
    """

    INCIDENTS = "/incidents.json"
    UNRESOLVED_INCIDENTS = "/incidents/unresolved.json"

    def __init__(
        self,
        page_id: str,
        http_client: ConditionalHTTPClient,
        api_base: str | None = None,
    ) -> None:
        self.page_id = page_id
        self.api_base = (api_base or STATUSPAGE_API_TEMPLATE.format(page_id=page_id)).rstrip("/")
        self._http = http_client
        self._last: dict[str, Snapshot] = {}   # url → last parsed snapshot

    def url_for(self, endpoint: str) -> str:
        return f"{self.api_base}{endpoint}"

    async def fetch_latest_incidents(self) -> Snapshot:
        """The 50 most recent incidents, resolved ones included."""
        return await self._fetch_snapshot(self.INCIDENTS)

    async def fetch_unresolved_incidents(self) -> Snapshot:
        """Incidents still investigating, identified or monitoring."""
        return await self._fetch_snapshot(self.UNRESOLVED_INCIDENTS)

    async def _fetch_snapshot(self, endpoint: str, retried: bool = False) -> Snapshot:
        url = self.url_for(endpoint)
        try:
            changed, data = await self._http.get_json_if_changed(url)
        except aiohttp.ClientResponseError as exc:
            raise FetchError(url, f"HTTP {exc.status}", exc) from exc
        except asyncio.TimeoutError as exc:
            raise FetchError(url, "request timed out", exc) from exc
        except aiohttp.ClientError as exc:
            raise FetchError(url, f"network error: {exc}", exc) from exc
        except ValueError as exc:
            # body was not valid JSON
            raise FetchError(url, "could not decode response", exc) from exc

        if not changed:
            cached = self._last.get(url)
            if cached is not None:
                log.debug("304 Not Modified — reusing snapshot for %s", url)
                return cached
            if retried:
                raise FetchError(url, "304 Not Modified on an unconditional request")
            # 304 without a snapshot to reuse: retry once unconditionally
            self._http.forget(url)
            return await self._fetch_snapshot(endpoint, retried=True)

        try:
            snapshot = parse_snapshot(self.page_id, data)
        except ValueError as exc:
            self._http.forget(url)
            raise FetchError(url, f"malformed payload: {exc}", exc) from exc

        self._last[url] = snapshot
        return snapshot
