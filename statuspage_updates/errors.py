# error taxonomy for the poller and its feed.
#
# InvalidCapacity / InvalidConfig are construction-time and fatal.
# FetchError is transient: the poller reports it through the `fetch_error`
# event and keeps its timer running.


class StatuspageError(Exception):
    """Base class for every error raised by this package."""


class InvalidCapacity(StatuspageError, ValueError):
    """A fixed-capacity structure was requested with capacity <= 0."""

    def __init__(self, capacity: int) -> None:
        super().__init__(f"capacity must be > 0, got {capacity!r}")
        self.capacity = capacity


class InvalidConfig(StatuspageError, ValueError):
    """A poller option is missing or out of range."""


class FetchError(StatuspageError):
    """
    The feed could not produce a snapshot.

    Wraps network errors, non-2xx responses, timeouts and payloads that
    cannot be decoded. The underlying exception is kept in `cause` (and as
    __cause__ when raised with `from`).
    """

    def __init__(self, url: str, message: str, cause: BaseException | None = None) -> None:
        super().__init__(f"{message} ({url})")
        self.url = url
        self.cause = cause
