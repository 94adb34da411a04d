"""Main entry point for the dormitory presence server."""

import asyncio
import logging
import sys

from starlette.applications import Starlette

from dorm_presence.adapters.config import AppConfig, SeedDataLoader
from dorm_presence.adapters.storage import (
    DocumentLocationRepository,
    DocumentNotificationRepository,
    DocumentScanEventRepository,
    DocumentStore,
    DocumentUserRepository,
)
from dorm_presence.adapters.system_clock import SystemClock
from dorm_presence.adapters.web import WebServer, create_app
from dorm_presence.application.services import (
    PresenceReconciler,
    RfidScanService,
    ScanLogService,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging to stderr."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def build_store(config: AppConfig) -> DocumentStore:
    """Create the document store, loading persisted data or the seed file."""
    store = DocumentStore(config.data_file)
    store.load()
    if store.count("users") == 0:
        SeedDataLoader.load(store, config.seed_file)
        store.save()
    return store


def build_app(config: AppConfig, store: DocumentStore) -> Starlette:
    """Wire repositories, services and the web API together."""
    tz = config.tzinfo
    clock = SystemClock(tz)
    scan_events = DocumentScanEventRepository(store)
    notifications = DocumentNotificationRepository(store)

    reconciler = PresenceReconciler(clock, tz)
    scan_service = RfidScanService(
        scan_event_repository=scan_events,
        user_repository=DocumentUserRepository(store),
        location_repository=DocumentLocationRepository(store),
        notification_repository=notifications,
        clock=clock,
        tz=tz,
        history_limit=config.scan_history_limit,
    )
    log_service = ScanLogService(scan_events, reconciler)

    return create_app(scan_service, log_service, notifications, config)


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()
    configure_logging(config.log_level)

    try:
        store = build_store(config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid data configuration: {e}")
        sys.exit(1)

    logger.info(
        f"Loaded {store.count('users')} user(s), {store.count('rooms')} room(s), "
        f"{store.count('rfidLogs')} scan event(s); timezone {config.timezone}"
    )

    server = WebServer(build_app(config, store), config)
    try:
        await server.start()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        await server.stop()


def run() -> None:
    """Synchronous entry point for the server command."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
