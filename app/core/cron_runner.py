"""
Run the tuition reminder cron in the background (non-blocking).
Started on app startup; cancelled on shutdown. Fires once a day at the configured local time.
"""
import asyncio
import logging
from datetime import datetime, timedelta

from app.core.config import settings
from app.cron.payment_reminders import run_scheduled_reminders

logger = logging.getLogger(__name__)


def next_run_time(now: datetime, hour: int, minute: int = 0) -> datetime:
    """Next hour:minute strictly after `now` (tomorrow if today's slot has passed)."""
    next_run = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if next_run <= now:
        next_run += timedelta(days=1)
    return next_run


async def run_payment_reminder_cron_loop() -> None:
    """Loop: sleep until the daily run time, run the scheduled pass, repeat."""
    hour = settings.REMINDER_CRON_HOUR
    minute = settings.REMINDER_CRON_MINUTE
    logger.info("Payment reminder cron started (daily at %02d:%02d local time)", hour, minute)
    next_run = next_run_time(datetime.now(), hour, minute)
    while True:
        try:
            await asyncio.sleep(max(0.0, (next_run - datetime.now()).total_seconds()))
            await run_scheduled_reminders(max(datetime.now(), next_run))
            logger.info("Payment reminder scheduler ran successfully")
        except asyncio.CancelledError:
            logger.info("Payment reminder cron cancelled")
            break
        except Exception as e:
            # The next daily run is unaffected.
            logger.exception("Payment reminder scheduler error: %s", e)
        next_run = next_run_time(max(datetime.now(), next_run), hour, minute)
