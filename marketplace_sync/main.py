"""
Marketplace order synchronization - Command line entry point.

Notifies the marketplace of local order events (import acknowledgements,
cancellations and shipments), once or on a fixed interval.

Usage:
    python -m marketplace_sync.main run-once [--store-id 1 --store-id 2]
    python -m marketplace_sync.main run
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import List, Optional

from marketplace_sync.core.config import get_settings
from marketplace_sync.core.logging_config import setup_logging
from marketplace_sync.core.scheduler import NotificationScheduler
from marketplace_sync.db.connection import get_db_connection
from marketplace_sync.db.marketplace_clients import ApiSessionManager
from marketplace_sync.db.repositories import StoreRepository
from marketplace_sync.domain.models import Store
from marketplace_sync.services.orders.factories import create_notifier
from marketplace_sync.utils.error_handler import AppException, log_error

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="marketplace-sync",
        description="Notify the marketplace of imported, canceled and shipped orders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "command",
        choices=["run-once", "run"],
        help="run-once: single pass over the stores; run: pass every SYNC_INTERVAL_MINUTES",
    )
    parser.add_argument(
        "--store-id",
        type=int,
        action="append",
        dest="store_ids",
        help="Restrict to this local store ID (repeatable). Defaults to SYNC_STORE_IDS, then all stores.",
    )
    return parser


async def run(command: str, store_ids: Optional[List[int]] = None) -> int:
    """
    Run the notifications.

    Returns:
        int: Process exit code
    """
    settings = get_settings()
    store_ids = store_ids or settings.sync_store_ids
    conn_db = get_db_connection()

    try:
        store_repository = StoreRepository(conn_db)
        await store_repository.initialize()

        async def load_stores() -> List[Store]:
            return await store_repository.get_active_stores(store_ids)

        async with ApiSessionManager() as api_session_manager:
            notifier = await create_notifier(api_session_manager, conn_db)
            scheduler = NotificationScheduler(notifier, load_stores)

            if command == "run-once":
                summaries = await scheduler.run_once()
                for summary in summaries:
                    logger.info(f"Store {summary['store_id']}: {summary}")
                return 0

            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                try:
                    loop.add_signal_handler(sig, scheduler.stop)
                except NotImplementedError:
                    # Signal handlers are unavailable on some platforms (Windows)
                    pass

            await scheduler.run_forever()
            return 0

    except AppException as e:
        log_error(e, {"command": command})
        return 1

    finally:
        await conn_db.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    settings = get_settings()
    logger.info(f"🚀 {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT}) - {args.command}")

    return asyncio.run(run(args.command, args.store_ids))


if __name__ == "__main__":
    sys.exit(main())
