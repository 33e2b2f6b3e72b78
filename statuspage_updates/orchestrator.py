
# StatusMonitor: the top-level orchestrator.

# Responsibilities:
#   - Create a shared aiohttp session and connection pool
#   - Build one StatuspageFeed + UpdatePoller per configured page
#   - Attach the console handler to every poller
#   - Provide a clean stop() for graceful shutdown
#
# Concurrency model:
#   Each poller owns one timer task; all of them share one event loop and
#   one connection pool, yielding while awaiting I/O.

import asyncio
import logging

import aiohttp

from statuspage_updates.config import PollerConfig
from statuspage_updates.events import Event
from statuspage_updates.feed import StatuspageFeed
from statuspage_updates.handlers import ConsoleEventHandler
from statuspage_updates.http_client import ConditionalHTTPClient
from statuspage_updates.poller import UpdatePoller

log = logging.getLogger(__name__)


class StatusMonitor:

    def __init__(self, configs: list[PollerConfig]) -> None:
        self._configs = configs
        self.pollers: list[UpdatePoller] = []
        self._done = asyncio.Event()

    async def run(self) -> None:
        """Start every poller and block until stop() has drained them."""
        connector = aiohttp.TCPConnector(limit=50)  # shared connection pool with limit 50
        async with aiohttp.ClientSession(
            connector=connector,
            headers={"User-Agent": "statuspage-updates/1.0"},
        ) as session:

            http_client = ConditionalHTTPClient(session)

            for config in self._configs:
                feed    = StatuspageFeed(config.page_id, http_client, api_base=config.base_url)
                poller  = UpdatePoller(config, feed)
                handler = ConsoleEventHandler(label=config.page_id)
                poller.on(Event.INCIDENT_UPDATE, handler.handle)
                poller.on(Event.FETCH_ERROR, handler.handle_fetch_error)
                self.pollers.append(poller)

            await asyncio.gather(*(p.start() for p in self.pollers))
            log.info(
                "StatusMonitor running — watching %d page(s). Press Ctrl+C to stop.",
                len(self.pollers),
            )

            await self._done.wait()
            # no-op for pollers already stopped; catches a stop() that landed during startup
            await asyncio.gather(*(p.stop() for p in self.pollers))
            await asyncio.gather(*(p.wait_stopped() for p in self.pollers))

    async def stop(self) -> None:
        """Stop every poller; run() returns once in-flight cycles finish."""
        await asyncio.gather(*(p.stop() for p in self.pollers))
        self._done.set()
