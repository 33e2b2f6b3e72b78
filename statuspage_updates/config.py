from dataclasses import dataclass

from statuspage_updates.errors import InvalidCapacity, InvalidConfig

POLL_INTERVAL_MILLIS: int = 30_000
HISTORY_CAPACITY: int = 50          # most incidents resolve within 5-6 updates
REQUEST_TIMEOUT_SECONDS: int = 10

STATUSPAGE_API_TEMPLATE: str = "https://{page_id}.statuspage.io/api/v2"

# statuspage.io page ids watched by main.py when none are given on the command line
STATUS_PAGES: list[str] = [
    "kctbh9vrtdwd",   # GitHub
    # "yh6f0r4529hb",   # Discord
]


@dataclass(frozen=True)
class PollerConfig:
    """
    Options recognised by UpdatePoller.

    page_id selects the statuspage.io instance; api_base overrides the URL
    built from it (useful for custom domains such as status.openai.com).
    """
    page_id: str
    poll_interval_millis: int = POLL_INTERVAL_MILLIS
    history_capacity: int = HISTORY_CAPACITY
    api_base: str | None = None

    def __post_init__(self) -> None:
        if not self.page_id:
            raise InvalidConfig("page_id is required")
        if self.poll_interval_millis <= 0:
            raise InvalidConfig(
                f"poll_interval_millis must be > 0, got {self.poll_interval_millis!r}"
            )
        if self.history_capacity <= 0:
            raise InvalidCapacity(self.history_capacity)

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_millis / 1000

    @property
    def base_url(self) -> str:
        if self.api_base:
            return self.api_base.rstrip("/")
        return STATUSPAGE_API_TEMPLATE.format(page_id=self.page_id)
