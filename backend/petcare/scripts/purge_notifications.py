"""Module: purge_notifications.

Periodic clean-up of old notifications, e.g. from cron:

    python -m petcare.scripts.purge_notifications --days 90
"""

import argparse
import logging

from petcare.core.config import get_settings
from petcare.core.logging import configure_logging
from petcare.db.init_db import init_db
from petcare.db.session import build_engine, build_session_factory
from petcare.services.notifications import NotificationService

logger = logging.getLogger(__name__)


def purge(days: int | None = None) -> int:
    settings = get_settings()
    engine = build_engine(settings)
    init_db(engine)
    session = build_session_factory(engine)()
    try:
        older_than = days if days is not None else settings.notification_retention_days
        return NotificationService(session, settings).cleanup(older_than)
    finally:
        session.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Delete notifications older than N days.")
    parser.add_argument("--days", type=int, default=None, help="defaults to NOTIFICATION_RETENTION_DAYS")
    args = parser.parse_args()

    configure_logging(get_settings().log_level)
    deleted = purge(args.days)
    logger.info("Purge finished, %d notifications removed", deleted)
