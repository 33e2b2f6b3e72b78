import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

log = logging.getLogger(__name__)

def parse_dt(value: str | None) -> datetime | None:
    """
    Parse an ISO 8601 timestamp string into an aware UTC datetime.

    Statuspage returns strings like '2024-11-03T14:32:00.000Z' or
    '2024-11-03T07:32:00.000-07:00'. Datetimes (not raw strings) are stored so
    comparisons are chronological, never lexicographic across offsets.
    """
    if not value:
        return None
    if not isinstance(value, str):
        log.warning("Ignoring non-string datetime value: %r", value)
        return None

    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).astimezone(timezone.utc)
    except ValueError:
        log.warning("Could not parse datetime string: %r", value)
        return None


def format_dt(dt: datetime | None) -> str:
    """Human-readable UTC timestamp for console display."""
    if dt is None:
        return "Unknown"
    return dt.strftime("%Y-%m-%d %H:%M:%S UTC")


@dataclass(frozen=True)
class IncidentUpdate:
    """
    One update entry within an incident.

    update_id is "" and updated_at is None when the feed omits them; the
    differ treats such entries as incomplete rather than as errors.
    """
    update_id: str
    incident_id: str
    status: str                    # investigating | identified | monitoring | resolved | postmortem
    body: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Incident:
    incident_id: str
    name: str
    status: str
    impact: str                    # none | minor | major | critical
    shortlink: str = ""
    updated_at: datetime | None = None
    components: tuple[str, ...] = ()
    updates: tuple[IncidentUpdate, ...] = ()   # newest first, as served

    @property
    def latest_update(self) -> IncidentUpdate | None:
        return self.updates[0] if self.updates else None


@dataclass(frozen=True)
class Snapshot:
    """One fetched incidents.json response. Incidents are newest first."""
    page_id: str
    page_name: str = ""
    incidents: tuple[Incident, ...] = field(default_factory=tuple)

    @property
    def latest_incident(self) -> Incident | None:
        return self.incidents[0] if self.incidents else None
