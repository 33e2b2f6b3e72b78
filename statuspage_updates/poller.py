
# UpdatePoller: watches one statuspage.io page for new incident updates.

# responsibilities:
#   - run a fetch → compare → emit → record cycle on a fixed interval
#   - keep the previous and current snapshots
#   - surface each distinct latest update to listeners exactly once,
#     using a bounded history of already-emitted update ids
#   - report fetch failures as `fetch_error` events without stopping

# Concurrency model:
#   Everything runs on one asyncio event loop. The timer task sleeps for the
#   interval, runs a cycle to completion, then sleeps again, so cycles never
#   overlap and a slow fetch simply delays the next tick.
#   stop() only signals the timer task; a cycle already awaiting its fetch
#   finishes normally and its events are still emitted.

import asyncio
import logging
from typing import Protocol

from statuspage_updates.config import PollerConfig
from statuspage_updates.differ import detect_update
from statuspage_updates.errors import FetchError
from statuspage_updates.events import Event, EventEmitter, Listener, PollingState, PollingStatus
from statuspage_updates.history import BoundedHistory
from statuspage_updates.models import Snapshot


class IncidentFeed(Protocol):
    async def fetch_latest_incidents(self) -> Snapshot: ...


class UpdatePoller:
    """
    Idle → Running (start) → Idle (stop).

    start() while Running and stop() while Idle are no-ops that return
    False and emit nothing.
    """

    def __init__(self, config: PollerConfig, feed: IncidentFeed) -> None:
        self.config = config
        self._feed = feed
        self._events = EventEmitter()
        self._emitted: BoundedHistory[str] = BoundedHistory(config.history_capacity)

        self._previous: Snapshot | None = None
        self._current: Snapshot | None = None

        self._running = False
        self._stop_event: asyncio.Event | None = None
        self._timer: asyncio.Task | None = None
        self._cycle_lock = asyncio.Lock()
        self._log = logging.getLogger(f"poller.{config.page_id.lower()}")

    # ─── state (read-only views) ──────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._running

    @property
    def previous(self) -> Snapshot | None:
        return self._previous

    @property
    def current(self) -> Snapshot | None:
        return self._current

    @property
    def emitted(self) -> list[str]:
        """Ids of updates already emitted, oldest first."""
        return self._emitted.to_list()

    # ─── listener registration ────────────────────────────────────────────

    def on(self, event: Event | str, listener: Listener) -> Listener:
        return self._events.on(event, listener)

    def once(self, event: Event | str, listener: Listener) -> Listener:
        return self._events.once(event, listener)

    def off(self, event: Event | str, listener: Listener) -> bool:
        return self._events.off(event, listener)

    def listener_count(self, event: Event | str) -> int:
        return self._events.listener_count(event)

    # ─── lifecycle ────────────────────────────────────────────────────────

    async def start(self) -> bool:
        """
        Emit `started`, run one cycle immediately, then arm the timer.

        Returns once the first cycle has completed.
        """
        if self._running:
            self._log.debug("start() ignored, already running")
            return False

        self._running = True
        stop_event = asyncio.Event()
        self._stop_event = stop_event
        self._log.info(
            "Started polling %s every %dms",
            self.config.page_id, self.config.poll_interval_millis,
        )
        await self._events.emit(Event.STARTED, PollingStatus.now(PollingState.STARTED))

        # a timer left over from before the last stop() may still be finishing its cycle
        await self.wait_stopped()
        await self._tick()

        # stop() may have been called while the first cycle was in flight
        if not stop_event.is_set():
            self._timer = asyncio.create_task(
                self._run_timer(stop_event),
                name=f"poller-{self.config.page_id.lower()}",
            )
        return True

    async def stop(self) -> bool:
        """Disarm the timer and emit `stopped`. An in-flight cycle is left to finish."""
        if not self._running:
            return False

        self._running = False
        if self._stop_event is not None:
            self._stop_event.set()
        self._log.info("Stopped polling %s", self.config.page_id)
        await self._events.emit(Event.STOPPED, PollingStatus.now(PollingState.STOPPED))
        return True

    async def wait_stopped(self) -> None:
        """Wait for the timer task to exit, including any cycle still in flight."""
        timer = self._timer
        if timer is not None:
            await asyncio.gather(timer, return_exceptions=True)
            if self._timer is timer:
                self._timer = None

    async def _run_timer(self, stop_event: asyncio.Event) -> None:
        interval = self.config.poll_interval_seconds
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval)
                break   # stop() was called during the wait
            except asyncio.TimeoutError:
                pass
            await self._tick()

    async def _tick(self) -> None:
        try:
            await self.run_cycle()
        except asyncio.CancelledError:
            self._log.info("Poller for %s cancelled.", self.config.page_id)
            raise
        except Exception as exc:
            self._log.exception("Unexpected error polling %s: %s", self.config.page_id, exc)

    # ─── fetch / compare / emit ───────────────────────────────────────────

    async def run_cycle(self) -> bool:
        """
        One fetch-compare cycle. Returns True if an incident update was emitted.

        A failed fetch leaves previous/current and the emitted history
        untouched, so the next successful cycle compares against the last
        good snapshot. Cycles are serialised: a call made while another cycle
        is in flight waits for it to finish.
        """
        async with self._cycle_lock:
            return await self._fetch_and_compare()

    async def _fetch_and_compare(self) -> bool:
        try:
            snapshot = await self._feed.fetch_latest_incidents()
        except FetchError as exc:
            self._log.warning("Fetch failed for %s: %s", self.config.page_id, exc)
            await self._events.emit(Event.FETCH_ERROR, exc)
            return False

        self._previous, self._current = self._current, snapshot
        await self._events.emit(Event.RAN, PollingStatus.now(PollingState.RUNNING))
        return await self.check_update()

    async def check_update(self) -> bool:
        """Compare current against previous; emit and record a new update if there is one."""
        incident = detect_update(self._previous, self._current, self._emitted)
        if incident is None:
            self._log.debug("No new update for %s", self.config.page_id)
            return False

        update = incident.latest_update
        self._log.info(
            "New update %s (%s) on incident %r for %s",
            update.update_id, update.status, incident.name, self.config.page_id,
        )
        # record before emitting so a re-entrant check cannot emit it twice
        self._emitted.insert(update.update_id)
        await self._events.emit(Event.INCIDENT_UPDATE, incident)
        return True
