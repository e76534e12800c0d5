"""Periodically finalize attempts whose time is up.

    python -m app.jobs.auto_submit          # loop forever
    python -m app.jobs.auto_submit --once   # single sweep (cron)
"""

import argparse
import logging
import time

from app.core.config import settings
from app.core.database import SessionLocal
from app.core.logging_config import configure_logging
from app.models import all_models  # noqa: F401
from app.services.quiz_grader import auto_submit_expired_attempts

logger = logging.getLogger(__name__)


def run_sweep() -> int:
    db = SessionLocal()
    try:
        return len(auto_submit_expired_attempts(db))
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Auto-submit expired quiz attempts")
    parser.add_argument("--once", action="store_true", help="run a single sweep and exit")
    args = parser.parse_args()

    configure_logging()
    while True:
        count = run_sweep()
        logger.info("Auto-submit sweep finished: %d attempts submitted", count)
        if args.once:
            break
        time.sleep(settings.AUTO_SUBMIT_INTERVAL_SECONDS)


if __name__ == "__main__":
    main()
