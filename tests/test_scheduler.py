"""Tests for cron job registration."""

import logging
from unittest.mock import MagicMock

import pytest
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from agenda.adapters import InMemoryRunStore, InMemoryTaskRepository, LogNotifier, StubCalendarAdapter
from agenda.config import Config
from agenda.scheduler import JobScheduler, register_default_jobs
from agenda.workflows import Services


@pytest.fixture
def services():
    return Services(
        tasks=InMemoryTaskRepository(),
        calendar=StubCalendarAdapter([]),
        notifier=LogNotifier(),
        runs=InMemoryRunStore(),
    )


@pytest.fixture
def mock_scheduler():
    return MagicMock()


class TestJobScheduler:
    def test_register_with_real_scheduler(self):
        scheduler = JobScheduler(timezone="UTC", scheduler=BackgroundScheduler(timezone="UTC"))
        job_id = scheduler.register("*/5 * * * *", lambda: None, name="poll")

        assert job_id == "poll"
        assert scheduler.job_ids() == ["poll"]

    def test_register_uses_cron_trigger(self, mock_scheduler):
        scheduler = JobScheduler(timezone="UTC", scheduler=mock_scheduler)
        scheduler.register("0 8 * * *", lambda: None, name="briefing")

        args, kwargs = mock_scheduler.add_job.call_args
        assert isinstance(args[1], CronTrigger)
        assert kwargs == {"id": "briefing", "name": "briefing", "replace_existing": True}

    def test_invalid_cron(self, mock_scheduler):
        scheduler = JobScheduler(scheduler=mock_scheduler)
        with pytest.raises(ValueError):
            scheduler.register("every morning", lambda: None, name="bad")
        mock_scheduler.add_job.assert_not_called()

    def test_failing_handler_is_contained(self, mock_scheduler, caplog):
        scheduler = JobScheduler(scheduler=mock_scheduler)

        def explode():
            raise RuntimeError("boom")

        scheduler.register("0 * * * *", explode)
        guarded = mock_scheduler.add_job.call_args.args[0]

        with caplog.at_level(logging.ERROR, logger="agenda.scheduler"):
            guarded()
        assert "Scheduled job explode failed" in caplog.text


class TestRegisterDefaultJobs:
    def test_registers_all_three(self, mock_scheduler, services):
        scheduler = JobScheduler(scheduler=mock_scheduler)
        registered = register_default_jobs(scheduler, services, Config())
        assert registered == ["daily_briefing", "task_reminder", "calendar_optimization", "meeting_preparation"]

    def test_skips_empty_and_invalid(self, mock_scheduler, services, caplog):
        scheduler = JobScheduler(scheduler=mock_scheduler)
        config = Config(briefing_cron="", calendar_review_cron="not a cron")

        registered = register_default_jobs(scheduler, services, config)

        assert registered == ["task_reminder", "meeting_preparation"]
        assert "Invalid cron expression for calendar_optimization" in caplog.text

    def test_job_triggers_proactive_action(self, mock_scheduler, services):
        scheduler = JobScheduler(scheduler=mock_scheduler)
        register_default_jobs(scheduler, services, Config(urgent_tasks_cron="", calendar_review_cron="", meeting_prep_cron=""))
        guarded = mock_scheduler.add_job.call_args.args[0]

        guarded()
        [run] = services.runs.recent()
        assert run.name == "daily_briefing"
        assert run.success is True
