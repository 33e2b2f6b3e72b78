
# event handlers: the output layer of the poller.

# each handler is registered on an UpdatePoller event and decides what to do
# with the payload. All formatting decisions live here; the models are kept
# as pure data containers with zero display logic.

# to add a new output target, write a callable (sync or async) taking the
# event payload and register it with poller.on(Event.INCIDENT_UPDATE, ...).

import logging
import sys
from datetime import datetime, timezone
from typing import TextIO

from statuspage_updates.errors import FetchError
from statuspage_updates.models import Incident, format_dt

log = logging.getLogger(__name__)

# ─── Impact colour map (ANSI — safe to strip if plain output is needed) ───────

_R = "\033[0m"   # reset

_STATUS_COLOR: dict[str, str] = {
    "investigating": "\033[33m",   # yellow  — something is wrong, unknown cause
    "identified":    "\033[31m",   # red     — root cause confirmed
    "monitoring":    "\033[34m",   # blue    — fix deployed, watching
    "resolved":      "\033[32m",   # green   — all clear
    "postmortem":    "\033[36m",   # cyan
}

_IMPACT_COLOR: dict[str, str] = {
    "critical": "\033[91m",   # bright red
    "major":    "\033[33m",   # yellow
    "minor":    "\033[34m",   # blue
    "none":     "\033[32m",   # green
}


def _ts() -> str:
    """ISO 8601 UTC timestamp, e.g. 2026-02-21T12:39:08Z"""
    return datetime.now(tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _paint(palette: dict[str, str], value: str, color: bool) -> str:
    c = palette.get(value.lower(), "") if color else ""
    return f"{c}{value.upper()}{_R}" if c else value.upper()


class ConsoleEventHandler:
    """
    Writes one line per incident update.

    Format:
        [2026-02-21T12:39:08Z] GitHub | IDENTIFIED | Impact=MINOR | Incident=Degraded Actions | Affected=Actions | Updated=2026-02-21 12:38:51 UTC | Message=We are investigating...

      - single line per event, pipe-delimited → grep/cut friendly
      - ANSI colour on status and impact only, and only when color=True
      - message truncated at 120 chars; the full text is on the status page
    """

    _MAX_MSG_LEN = 120

    def __init__(self, label: str, stream: TextIO | None = None, color: bool = True) -> None:
        self.label = label
        self._stream = stream
        self._color = color

    async def handle(self, incident: Incident) -> None:
        print(self._format(incident), file=self._stream or sys.stdout, flush=True)

    def handle_fetch_error(self, error: FetchError) -> None:
        log.warning("%s feed unavailable: %s", self.label, error)

    def _format(self, incident: Incident) -> str:
        update   = incident.latest_update
        affected = ", ".join(incident.components) if incident.components else "N/A"
        status   = _paint(_STATUS_COLOR, update.status if update else incident.status, self._color)
        impact   = _paint(_IMPACT_COLOR, incident.impact, self._color)
        message  = self._truncate(update.body) if update else ""
        updated  = format_dt(update.updated_at if update else incident.updated_at)

        return (
            f"[{_ts()}] "
            f"{self.label} | "
            f"{status} | "
            f"Impact={impact} | "
            f"Incident={incident.name} | "
            f"Affected={affected} | "
            f"Updated={updated} | "
            f"Message={message}"
        )

    def _truncate(self, text: str) -> str:
        text = " ".join(text.split())          # collapse internal whitespace
        if len(text) <= self._MAX_MSG_LEN:
            return text
        return text[: self._MAX_MSG_LEN - 1].rstrip() + "…"
