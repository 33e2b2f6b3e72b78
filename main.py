import argparse
import asyncio
import logging
import platform
import signal
import sys

from statuspage_updates.config import (
    HISTORY_CAPACITY,
    POLL_INTERVAL_MILLIS,
    STATUS_PAGES,
    PollerConfig,
)
from statuspage_updates.orchestrator import StatusMonitor

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
    handlers=[logging.StreamHandler(sys.stdout)],
)
log = logging.getLogger("main")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print new statuspage.io incident updates as they happen")
    parser.add_argument("pages", nargs="*", default=STATUS_PAGES, help="statuspage.io page ids")
    parser.add_argument("--interval", type=int, default=POLL_INTERVAL_MILLIS, help="poll interval in ms")
    parser.add_argument("--history", type=int, default=HISTORY_CAPACITY, help="emitted update ids to remember")
    parser.add_argument("--api-base", default=None, help="override the API base URL (single page only)")
    parser.add_argument("--debug", action="store_true")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    if args.api_base and len(args.pages) != 1:
        sys.exit("--api-base needs exactly one page id")

    configs = [
        PollerConfig(
            page_id=page,
            poll_interval_millis=args.interval,
            history_capacity=args.history,
            api_base=args.api_base,
        )
        for page in args.pages
    ]
    monitor = StatusMonitor(configs)
    loop    = asyncio.get_running_loop()

    if platform.system() != "Windows":
        stopping: set[asyncio.Task] = set()   # strong refs until each stop() finishes

        def _shutdown(sig: signal.Signals) -> None:
            log.info("Received %s — shutting down gracefully...", sig.name)
            task = loop.create_task(monitor.stop())
            stopping.add(task)
            task.add_done_callback(stopping.discard)

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, _shutdown, sig)

        await monitor.run()
        await asyncio.gather(*stopping)
        log.info("Monitor stopped.")

    else:
        try:
            await monitor.run()
        except (asyncio.CancelledError, KeyboardInterrupt):
            log.info("Shutting down...")
            await monitor.stop()
            log.info("Monitor stopped.")


def cli() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    cli()
