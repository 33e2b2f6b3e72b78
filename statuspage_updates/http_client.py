
# Conditional GET layer under StatuspageFeed.

# contract with the feed:
#   get_json_if_changed(url) answers either (True, body) or (False, None).
#   (False, None) means the page replied 304 to our If-None-Match, and the
#   feed re-serves the Snapshot it parsed last time for that URL. The poller
#   then sees the same latest update id twice and reports no update.
#
#   An ETag is remembered only once its body decoded as JSON, and the feed
#   calls forget(url) when that body turns out not to be an incidents
#   document, so a bad response is never pinned behind a 304.
#
#   ClientTimeout(total=...) bounds every request; a hung page costs one
#   cycle, not the poll loop.

import asyncio
import logging
from typing import Any

import aiohttp

from statuspage_updates.config import REQUEST_TIMEOUT_SECONDS

log = logging.getLogger(__name__)


class ConditionalHTTPClient:
    """
    ETag bookkeeping over a borrowed aiohttp.ClientSession.

    The session (and its connection pool) belongs to the caller; StatusMonitor
    hands every feed the same client, keyed per URL.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._etags: dict[str, str] = {}   # url → last received ETag

    def forget(self, url: str) -> None:
        """Drop the stored ETag so the next GET is unconditional."""
        self._etags.pop(url, None)

    async def get_json_if_changed(self, url: str) -> tuple[bool, Any]:
        """
        GET url, sending the stored ETag as If-None-Match when there is one.

        Returns:
            (True, body)   — 2xx, body decoded as JSON
            (False, None)  — 304, reuse whatever was parsed last time

        Raises:
            aiohttp.ClientResponseError  on non-2xx / non-304 responses
            aiohttp.ClientError          on connection / payload errors
            asyncio.TimeoutError         on request timeout
        """
        headers: dict[str, str] = {}
        if url in self._etags:
            headers["If-None-Match"] = self._etags[url]

        try:
            async with self._session.get(url, headers=headers, timeout=self._timeout) as resp:
                if resp.status == 304:
                    return False, None

                resp.raise_for_status()

                # content_type=None: some status pages serve JSON as text/plain
                data = await resp.json(content_type=None)

                etag = resp.headers.get("ETag")
                if etag:
                    self._etags[url] = etag
                return True, data

        except aiohttp.ClientResponseError as exc:
            log.warning("HTTP error fetching %s: %s %s", url, exc.status, exc.message)
            raise
        except asyncio.TimeoutError:
            log.warning("Timeout fetching %s", url)
            raise
