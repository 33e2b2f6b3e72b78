from statuspage_updates.config import PollerConfig
from statuspage_updates.errors import FetchError, InvalidCapacity, InvalidConfig, StatuspageError
from statuspage_updates.events import Event, PollingState, PollingStatus
from statuspage_updates.feed import StatuspageFeed
from statuspage_updates.history import BoundedHistory
from statuspage_updates.models import Incident, IncidentUpdate, Snapshot
from statuspage_updates.poller import UpdatePoller

__all__ = [
    "BoundedHistory",
    "Event",
    "FetchError",
    "Incident",
    "IncidentUpdate",
    "InvalidCapacity",
    "InvalidConfig",
    "PollerConfig",
    "PollingState",
    "PollingStatus",
    "Snapshot",
    "StatuspageError",
    "StatuspageFeed",
    "UpdatePoller",
]
