"""Snapshot builders and fake feeds shared by the tests."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

from statuspage_updates.models import Incident, IncidentUpdate, Snapshot

T0 = datetime(2026, 2, 21, 12, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    return T0 + timedelta(minutes=minutes)


def make_snapshot(
    update_id: str = "u1",
    updated_at: datetime | None = T0,
    incident_id: str = "inc1",
    status: str = "investigating",
) -> Snapshot:
    """A one-incident snapshot whose latest update is (update_id, updated_at)."""
    update = IncidentUpdate(
        update_id=update_id,
        incident_id=incident_id,
        status=status,
        body=f"body of {update_id}",
        updated_at=updated_at,
    )
    incident = Incident(
        incident_id=incident_id,
        name="Degraded API",
        status=status,
        impact="minor",
        updates=(update,),
    )
    return Snapshot(page_id="page", incidents=(incident,))


def empty_snapshot() -> Snapshot:
    return Snapshot(page_id="page", incidents=())


class ScriptedFeed:
    """Returns (or raises) the scripted items in order, repeating the last one."""

    def __init__(self, *items: Snapshot | Exception) -> None:
        self._items = list(items)
        self.calls = 0

    async def fetch_latest_incidents(self) -> Snapshot:
        item = self._items[min(self.calls, len(self._items) - 1)]
        self.calls += 1
        if isinstance(item, Exception):
            raise item
        return item


class GatedFeed:
    """First call returns immediately; later calls wait for `gate` to open."""

    def __init__(self, first: Snapshot, later: Snapshot) -> None:
        self._first = first
        self._later = later
        self.gate = asyncio.Event()
        self.waiting = asyncio.Event()
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_latest_incidents(self) -> Snapshot:
        self.calls += 1
        if self.calls == 1:
            return self._first
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            self.waiting.set()
            await self.gate.wait()
            return self._later
        finally:
            self.in_flight -= 1


class Recorder:
    """Collects every payload passed to it, in order."""

    def __init__(self) -> None:
        self.payloads: list = []

    def __call__(self, payload) -> None:
        self.payloads.append(payload)

    def __len__(self) -> int:
        return len(self.payloads)


async def wait_until(predicate, timeout: float = 2.0) -> None:
    """Poll predicate on the event loop until it is true, or fail after timeout."""

    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_poll(), timeout)


def incidents_payload(*updates: tuple[str, str], page_id: str = "abc123") -> dict:
    """
    An incidents.json body with one incident per (update_id, updated_at) pair,
    in the order given (newest first).
    """
    incidents = []
    for n, (update_id, updated_at) in enumerate(updates):
        incidents.append({
            "id": f"inc{n}",
            "name": f"Incident {n}",
            "status": "investigating",
            "impact": "minor",
            "shortlink": f"https://stspg.io/{n}",
            "updated_at": updated_at,
            "components": [
                {"name": "API", "status": "partial_outage"},
                {"name": "Website", "status": "operational"},
            ],
            "incident_updates": [
                {
                    "id": update_id,
                    "incident_id": f"inc{n}",
                    "status": "investigating",
                    "body": "We are investigating elevated error rates.",
                    "created_at": updated_at,
                    "updated_at": updated_at,
                },
            ],
        })
    return {
        "page": {"id": page_id, "name": "Example", "url": "https://status.example.com"},
        "incidents": incidents,
    }
