"""Run the overdue sweep once, outside the web process.

Meant for cron:
    0 1 * * *  cd /srv/residencial && python -m scripts.run_overdue_sweep
    python -m scripts.run_overdue_sweep --as-of 2025-01-16
"""

import argparse
import asyncio
import logging
import sys
from datetime import date

from config.settings import settings
from src.rc_charge.application.sweeper import OverdueSweeper
from src.rc_common.database import build_engine, build_session_factory
from src.rc_common.enums import AccountRole
from src.rc_gateway.auth.capabilities import Actor

logger = logging.getLogger("rc.sweeper")

# cron acts with admin rights but is not an account
SWEEP_ACTOR = Actor(account_id="cron", role=AccountRole.ADMIN.value)


async def run(as_of: date | None) -> int:
    engine = build_engine(settings)
    try:
        report = await OverdueSweeper().sweep(build_session_factory(engine), SWEEP_ACTOR, as_of)
    finally:
        await engine.dispose()
    for outcome in report.result.failed:
        logger.error("Charge %s not swept: %s", outcome.key, outcome.error)
    print(f"{report.count} payments marked as overdue (as of {report.as_of.isoformat()})")
    return 1 if report.result.failed else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Mark stale PENDING charges as OVERDUE")
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Cutoff date (YYYY-MM-DD); charges due before it are swept. Defaults to today (UTC).",
    )
    args = parser.parse_args()
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    sys.exit(asyncio.run(run(args.as_of)))


if __name__ == "__main__":
    main()
