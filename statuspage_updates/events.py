
# typed observer registry for poller events.

# Listeners are plain callables taking one payload argument. They may be
# sync or async; coroutine results are awaited in registration order, so a
# slow listener delays the ones after it (and the poll cycle that emitted).

# A listener that raises is logged with its traceback and the remaining
# listeners still run. Nothing a listener does can stop the poll loop.

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

log = logging.getLogger(__name__)

Listener = Callable[[Any], Awaitable[None] | None]


class Event(str, Enum):
    STARTED = "started"
    RAN = "ran"
    STOPPED = "stopped"
    INCIDENT_UPDATE = "incident_update"
    FETCH_ERROR = "fetch_error"


class PollingState(str, Enum):
    STARTED = "started"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class PollingStatus:
    """Payload of the started / ran / stopped lifecycle events."""
    state: PollingState
    time: datetime

    @classmethod
    def now(cls, state: PollingState) -> "PollingStatus":
        return cls(state=state, time=datetime.now(tz=timezone.utc))


class EventEmitter:

    def __init__(self) -> None:
        # event → [(listener, once)]
        self._listeners: dict[Event, list[tuple[Listener, bool]]] = {e: [] for e in Event}

    def on(self, event: Event | str, listener: Listener) -> Listener:
        """Register listener for every emission. Returns it, so usable as a decorator."""
        self._listeners[Event(event)].append((listener, False))
        return listener

    def once(self, event: Event | str, listener: Listener) -> Listener:
        """Register listener for the next emission only."""
        self._listeners[Event(event)].append((listener, True))
        return listener

    def off(self, event: Event | str, listener: Listener) -> bool:
        """Remove the first registration of listener. False if it was not registered."""
        entries = self._listeners[Event(event)]
        for i, (registered, _) in enumerate(entries):
            if registered is listener:
                del entries[i]
                return True
        return False

    def listener_count(self, event: Event | str) -> int:
        return len(self._listeners[Event(event)])

    async def emit(self, event: Event | str, payload: Any) -> int:
        """Deliver payload to every listener of event. Returns how many were called."""
        event = Event(event)
        entries = list(self._listeners[event])
        # drop one-shot listeners before calling, so re-entrant emits skip them
        self._listeners[event] = [entry for entry in entries if not entry[1]]

        for listener, _ in entries:
            try:
                result = listener(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                log.exception("Listener %r failed on %s event", listener, event.value)
        return len(entries)
