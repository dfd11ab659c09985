"""APScheduler jobs run alongside the Protean engines.

- ``due_reports``: the scheduled-report engine, shortly after start and then
  every ``REPORT_TIMER_INTERVAL`` seconds (default: daily).
- ``weekly_digest``: the merchant weekly digest, on the day and time held in
  the global notification settings (0=Sunday, UTC).
- ``weekly_digest_schedule``: re-reads those settings so that a schedule
  change made through the API reaches the digest job.

Job functions are plain functions. The asyncio scheduler hands them to the
event loop's thread pool, so the engines keep running while a job works.
"""

import os
from datetime import UTC, datetime, timedelta

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

logger = structlog.get_logger(__name__)

DEFAULT_REPORT_INTERVAL = 24 * 60 * 60
INITIAL_REPORT_DELAY = 5
SCHEDULE_SYNC_INTERVAL = 5 * 60

DUE_REPORTS_JOB = "due_reports"
WEEKLY_DIGEST_JOB = "weekly_digest"
WEEKLY_DIGEST_SCHEDULE_JOB = "weekly_digest_schedule"

# Settings count days from Sunday; cron names avoid APScheduler's Monday=0.
_DAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")


def create_scheduler() -> AsyncIOScheduler:
    return AsyncIOScheduler(
        timezone="UTC",
        job_defaults={
            "coalesce": True,  # Combine multiple pending executions into one
            "max_instances": 1,  # Only one instance of each job at a time
            "misfire_grace_time": 60,
        },
    )


def weekly_digest_trigger(day: int, time_of_day: str) -> CronTrigger:
    """Cron trigger for ``day`` (0=Sunday) at ``time_of_day`` (HH:MM, UTC)."""
    from notifications.preference.quiet_hours import parse_time_of_day

    hour, minute = divmod(parse_time_of_day(time_of_day), 60)
    return CronTrigger(day_of_week=_DAY_NAMES[day], hour=hour, minute=minute, timezone="UTC")


def _digest_trigger_from_settings(notifications_domain) -> CronTrigger:
    from notifications.settings.cache import get_global_settings

    with notifications_domain.domain_context():
        settings = get_global_settings()
    return weekly_digest_trigger(settings.weekly_report_day, settings.weekly_report_time)


# =============================================================================
# Job functions
# =============================================================================
def run_due_reports(reporting_domain) -> dict:
    from reporting.report.processing import process_due_reports

    with reporting_domain.domain_context():
        return process_due_reports()


def run_weekly_digests(notifications_domain) -> dict:
    from notifications.notification.weekly_digest import send_weekly_digests

    with notifications_domain.domain_context():
        return send_weekly_digests()


def sync_weekly_digest_schedule(scheduler: AsyncIOScheduler, notifications_domain) -> bool:
    """Move the digest job when the configured day or time changed. Returns True if moved."""
    trigger = _digest_trigger_from_settings(notifications_domain)
    job = scheduler.get_job(WEEKLY_DIGEST_JOB)
    if job is None or str(job.trigger) == str(trigger):
        return False

    scheduler.reschedule_job(WEEKLY_DIGEST_JOB, trigger=trigger)
    logger.info("Weekly digest rescheduled", trigger=str(trigger))
    return True


# =============================================================================
# Scheduler management
# =============================================================================
def setup_scheduled_jobs(
    scheduler: AsyncIOScheduler,
    reporting_domain,
    notifications_domain,
    report_interval: int | None = None,
) -> None:
    """Register every job. Reads the global settings once for the digest schedule."""
    if report_interval is None:
        report_interval = int(os.environ.get("REPORT_TIMER_INTERVAL", DEFAULT_REPORT_INTERVAL))

    scheduler.add_job(
        func=run_due_reports,
        args=[reporting_domain],
        trigger=IntervalTrigger(seconds=report_interval),
        next_run_time=datetime.now(UTC) + timedelta(seconds=INITIAL_REPORT_DELAY),
        id=DUE_REPORTS_JOB,
        name="Process due scheduled reports",
        replace_existing=True,
    )

    scheduler.add_job(
        func=run_weekly_digests,
        args=[notifications_domain],
        trigger=_digest_trigger_from_settings(notifications_domain),
        id=WEEKLY_DIGEST_JOB,
        name="Send weekly merchant digests",
        replace_existing=True,
    )

    scheduler.add_job(
        func=sync_weekly_digest_schedule,
        args=[scheduler, notifications_domain],
        trigger=IntervalTrigger(seconds=SCHEDULE_SYNC_INTERVAL),
        id=WEEKLY_DIGEST_SCHEDULE_JOB,
        name="Follow weekly digest schedule changes",
        replace_existing=True,
    )

    logger.info("Scheduled jobs registered", jobs=len(scheduler.get_jobs()))


async def start_scheduler(scheduler: AsyncIOScheduler) -> None:
    if scheduler.running:
        logger.warning("Scheduler is already running")
        return
    scheduler.start()
    logger.info("Scheduler started", jobs=get_job_status(scheduler))


async def stop_scheduler(scheduler: AsyncIOScheduler) -> None:
    if not scheduler.running:
        logger.debug("Scheduler is not running")
        return
    scheduler.shutdown(wait=True)
    logger.info("Scheduler stopped")


def get_job_status(scheduler: AsyncIOScheduler) -> list[dict]:
    return [
        {
            "id": job.id,
            "name": job.name,
            "next_run_time": job.next_run_time.isoformat() if getattr(job, "next_run_time", None) else None,
            "trigger": str(job.trigger),
        }
        for job in scheduler.get_jobs()
    ]
