from statuspage_updates.history import BoundedHistory
from statuspage_updates.models import Incident, Snapshot


def detect_update(
    previous: Snapshot | None,
    current: Snapshot | None,
    emitted: BoundedHistory[str],
) -> Incident | None:
    """
    Return current's latest incident if its latest update is new, else None.

    Only the first update of the first incident on each side is compared.
    An update counts as new iff all three hold:

      - its id differs from previous's latest update id
      - its id is not in `emitted` (already told listeners about it)
      - its updated_at is strictly later than previous's

    Why all three?

    The feed sometimes re-reports an update it already served, and its
    ordering is not guaranteed. Comparing ids with the previous poll alone
    would treat A → B → A as a new A on the third poll; the emitted history
    catches that. The timestamp check rejects stale or out-of-order heads.

    Missing snapshots, empty incident lists, or a missing id/timestamp on
    either side mean there is not enough data to compare: no update.
    """
    if previous is None or current is None:
        return None

    incident = current.latest_incident
    prior = previous.latest_incident
    if incident is None or prior is None:
        return None

    r = incident.latest_update
    p = prior.latest_update
    if r is None or p is None:
        return None
    if not (r.update_id and r.updated_at and p.update_id and p.updated_at):
        return None

    if (
        r.update_id != p.update_id
        and not emitted.contains(lambda seen: seen == r.update_id)
        and r.updated_at > p.updated_at
    ):
        return incident
    return None
