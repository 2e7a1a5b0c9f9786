"""Cron-driven job scheduling for proactive checks."""

import logging
from functools import partial
from typing import Callable

from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from .config import Config
from .workflows import Services, trigger_proactive_action

logger = logging.getLogger(__name__)


class JobScheduler:
    """
    Registers handlers against crontab expressions.

    A handler that raises is logged and the scheduler keeps running.
    """

    def __init__(self, timezone: str = "UTC", scheduler: BaseScheduler | None = None):
        self.timezone = timezone
        self._scheduler = scheduler or BlockingScheduler(timezone=timezone)

    def register(self, cron_expression: str, handler: Callable[[], object], name: str | None = None) -> str:
        """Schedule handler on a five-field crontab expression. Returns the job id."""
        name = name or getattr(handler, "__name__", "job")
        trigger = CronTrigger.from_crontab(cron_expression, timezone=self.timezone)
        self._scheduler.add_job(
            self._guarded(name, handler),
            trigger,
            id=name,
            name=name,
            replace_existing=True,
        )
        logger.info(f"Scheduled {name} ({cron_expression})")
        return name

    @staticmethod
    def _guarded(name: str, handler: Callable[[], object]) -> Callable[[], None]:
        def run() -> None:
            try:
                handler()
            except Exception:
                logger.exception(f"Scheduled job {name} failed")

        return run

    def job_ids(self) -> list[str]:
        return [job.id for job in self._scheduler.get_jobs()]

    def start(self) -> None:
        logger.info("Scheduler started")
        self._scheduler.start()

    def shutdown(self) -> None:
        self._scheduler.shutdown(wait=False)


def register_default_jobs(scheduler: JobScheduler, services: Services, config: Config) -> list[str]:
    """Schedule the proactive checks that have a cron expression configured."""
    jobs = [
        (config.briefing_cron, "daily_briefing"),
        (config.urgent_tasks_cron, "task_reminder"),
        (config.calendar_review_cron, "calendar_optimization"),
        (config.meeting_prep_cron, "meeting_preparation"),
    ]
    registered = []
    for cron_expression, action in jobs:
        if not cron_expression:
            continue
        try:
            registered.append(
                scheduler.register(
                    cron_expression,
                    partial(trigger_proactive_action, action, services, config),
                    name=action,
                )
            )
        except ValueError:
            logger.warning(f"Invalid cron expression for {action}: {cron_expression!r}")
    return registered
