"""Cron wiring for the nightly streak recalculation.

The trigger fires at STREAK_JOB_HOUR:STREAK_JOB_MINUTE in the household
timezone, the same calendar the live path uses for "today".
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from config.settings import settings
from src.hh_common.database import async_session_factory
from src.hh_common.datetime_utils import household_tz
from src.hh_notify.infrastructure.sinks import DbNotificationSink
from src.hh_streak.jobs.recalculation import RecalculationJob

logger = logging.getLogger(__name__)

JOB_ID = "streak_recalculation"

recalculation_job = RecalculationJob(
    async_session_factory, notifier=DbNotificationSink(async_session_factory)
)


async def run_scheduled_recalculation(job: RecalculationJob) -> None:
    """Scheduler entry point: a failed run is logged and the next night retries."""
    try:
        await job.run()
    except Exception:
        logger.exception("Scheduled streak recalculation failed")


class StreakScheduler:
    def __init__(self, job: RecalculationJob, scheduler: AsyncIOScheduler | None = None) -> None:
        self._job = job
        self._scheduler = scheduler or AsyncIOScheduler(timezone=household_tz())

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        if self._scheduler.running:
            return
        self._scheduler.add_job(
            run_scheduled_recalculation,
            CronTrigger(
                hour=settings.STREAK_JOB_HOUR,
                minute=settings.STREAK_JOB_MINUTE,
                timezone=household_tz(),
            ),
            args=[self._job],
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info(
            "Streak scheduler started: daily at %02d:%02d %s",
            settings.STREAK_JOB_HOUR,
            settings.STREAK_JOB_MINUTE,
            settings.HOUSEHOLD_TIMEZONE,
        )

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Streak scheduler stopped")


streak_scheduler = StreakScheduler(recalculation_job)
