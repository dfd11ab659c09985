"""Protean Engine runner plus the APScheduler jobs.

Starts Engine workers that process events asynchronously:
- OutboxProcessor: polls outbox table, publishes events to Redis Streams
- StreamSubscriptions: reads Redis Streams, invokes projectors and event handlers

In the same event loop, an APScheduler instance runs the scheduled-report
engine and the weekly merchant digest (see ``scheduler.py``).

Usage:
    python src/server.py                         # Run all engines and the scheduler
    python src/server.py --domain notifications  # Run only the notifications engine
    python src/server.py --no-scheduler          # Engines only
"""

import argparse
import asyncio

import structlog
from protean.server.engine import Engine
from scheduler import create_scheduler, setup_scheduled_jobs, start_scheduler, stop_scheduler

logger = structlog.get_logger(__name__)

DOMAIN_NAMES = ["notifications", "reporting", "webhooks"]


def _get_domain(name):
    """Import and initialize a domain by name."""
    if name == "notifications":
        from notifications.domain import notifications

        notifications.init()
        return notifications
    elif name == "reporting":
        from reporting.domain import reporting

        reporting.init()
        return reporting
    elif name == "webhooks":
        from webhooks.domain import webhooks

        webhooks.init()
        return webhooks
    else:
        raise ValueError(f"Unknown domain: {name}")


async def run(domain_names, with_scheduler: bool):
    domains = {name: _get_domain(name) for name in domain_names}
    tasks = [Engine(domain).run() for domain in domains.values()]

    if not with_scheduler:
        await asyncio.gather(*tasks)
        return

    scheduler = create_scheduler()
    setup_scheduled_jobs(
        scheduler,
        reporting_domain=domains.get("reporting") or _get_domain("reporting"),
        notifications_domain=domains.get("notifications") or _get_domain("notifications"),
    )
    await start_scheduler(scheduler)
    try:
        await asyncio.gather(*tasks)
    finally:
        await stop_scheduler(scheduler)


def main():
    parser = argparse.ArgumentParser(description="Merchant notifications engine runner")
    parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        help="Run a single domain engine (default: run all)",
    )
    parser.add_argument(
        "--no-scheduler",
        action="store_true",
        help="Do not run the scheduled-report and weekly digest jobs",
    )
    args = parser.parse_args()

    domain_names = [args.domain] if args.domain else DOMAIN_NAMES

    asyncio.run(run(domain_names, with_scheduler=not args.no_scheduler))


if __name__ == "__main__":
    main()
