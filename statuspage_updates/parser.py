
# parses a Statuspage.io /api/v2/incidents.json response into a Snapshot.

# Design decisions:
#   - Incident and update ordering is kept exactly as served (newest first).
#     The differ only looks at the head of each list and guards against
#     out-of-order data with its own timestamp check, so nothing is re-sorted.
#   - All timestamps are parsed to datetime objects (never kept as raw strings).
#   - Missing, null or non-string scalars fall back to "" / "unknown" / None
#     instead of raising; an incomplete entry is "no update" for the differ,
#     not a failed fetch.
#   - A container of the wrong type ("page" not an object, "incidents",
#     "incident_updates" or "components" not a list) raises PayloadError,
#     which the feed turns into FetchError.
#   - A component without a string status never counts as degraded.

from typing import Any

from statuspage_updates.models import Incident, IncidentUpdate, Snapshot, parse_dt


class PayloadError(ValueError):
    """The response body is not shaped like an incidents.json document."""


def _text(obj: dict, key: str, default: str = "") -> str:
    """obj[key] when it is a non-empty string, else default. Null and non-string values fall back."""
    value = obj.get(key)
    return value if isinstance(value, str) and value else default


def _list(obj: dict, key: str) -> list:
    value = obj.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise PayloadError(f"{key!r} must be a list, got {type(value).__name__}")
    return value


def _parse_update(incident_id: str, entry: dict) -> IncidentUpdate:
    return IncidentUpdate(
        update_id=_text(entry, "id"),
        incident_id=_text(entry, "incident_id", incident_id),
        status=_text(entry, "status", "unknown"),
        body=_text(entry, "body", "No message provided."),
        created_at=parse_dt(entry.get("created_at")),
        updated_at=parse_dt(entry.get("updated_at")),
    )


def _affected_components(incident: dict) -> tuple[str, ...]:
    components = [c for c in _list(incident, "components") if isinstance(c, dict)]
    degraded = [
        _text(c, "name", "Unknown")
        for c in components
        if _text(c, "status") not in ("operational", "")
    ]
    if degraded:
        return tuple(degraded)
    # fall back to all listed components if none are flagged as degraded
    return tuple(_text(c, "name", "Unknown") for c in components)


def parse_incident(incident: dict) -> Incident:
    incident_id = _text(incident, "id")
    entries = _list(incident, "incident_updates")
    return Incident(
        incident_id=incident_id,
        name=_text(incident, "name", "Unknown Incident"),
        status=_text(incident, "status", "unknown"),
        impact=_text(incident, "impact", "unknown"),
        shortlink=_text(incident, "shortlink"),
        updated_at=parse_dt(incident.get("updated_at")),
        components=_affected_components(incident),
        updates=tuple(_parse_update(incident_id, e) for e in entries if isinstance(e, dict)),
    )


def parse_snapshot(page_id: str, data: Any) -> Snapshot:
    """
    Parse an incidents.json (or incidents/unresolved.json) payload.

    Raises PayloadError when the document is not an object, "page" is not an
    object, or "incidents" / an incident's "incident_updates" / "components"
    is not a list.
    """
    if not isinstance(data, dict):
        raise PayloadError(f"expected a JSON object, got {type(data).__name__}")

    incidents = _list(data, "incidents")

    page = data.get("page")
    if page is None:
        page = {}
    elif not isinstance(page, dict):
        raise PayloadError(f"'page' must be an object, got {type(page).__name__}")

    return Snapshot(
        page_id=_text(page, "id", page_id),
        page_name=_text(page, "name"),
        incidents=tuple(parse_incident(i) for i in incidents if isinstance(i, dict)),
    )
