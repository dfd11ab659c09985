"""Merchant notifications management CLI.

Usage:
    python src/manage.py setup-db                   # Create all tables
    python src/manage.py drop-db --domain webhooks  # Drop one domain's tables
    python src/manage.py process-due-reports        # Run every due scheduled report once
    python src/manage.py send-weekly-digests        # Send the weekly digest to every merchant now
    python src/manage.py generate-webhook-secret    # Print a fresh webhook secret
"""

import argparse
import json
import sys

DOMAIN_NAMES = ["notifications", "reporting", "webhooks"]


def _load_domain(name):
    if name == "notifications":
        from notifications.domain import notifications

        return notifications
    elif name == "reporting":
        from reporting.domain import reporting

        return reporting
    elif name == "webhooks":
        from webhooks.domain import webhooks

        return webhooks
    raise ValueError(f"Unknown domain: {name}")


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.db import setup_db

    for name in domains or DOMAIN_NAMES:
        domain = _load_domain(name)
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Creating {name} database schema...")
        setup_db(domain)
        print(f"  {name} schema ready.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from shared.db import drop_db

    for name in domains or DOMAIN_NAMES:
        domain = _load_domain(name)
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Dropping {name} database schema...")
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def process_due_reports():
    from reporting.report.processing import process_due_reports as run

    domain = _load_domain("reporting")
    domain.init()
    with domain.domain_context():
        summary = run()
    print(json.dumps(summary))


def send_weekly_digests():
    from notifications.notification.weekly_digest import send_weekly_digests as run

    domain = _load_domain("notifications")
    domain.init()
    with domain.domain_context():
        summary = run()
    print(json.dumps(summary))


def generate_webhook_secret():
    from webhooks.security.signature import generate_webhook_secret as generate

    print(generate())


def main():
    parser = argparse.ArgumentParser(description="Merchant notifications management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create all database tables")
    setup_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to set up (default: all)",
    )

    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to drop (default: all)",
    )

    subparsers.add_parser("process-due-reports", help="Run every due scheduled report once")
    subparsers.add_parser("send-weekly-digests", help="Send the weekly digest to every merchant now")
    subparsers.add_parser("generate-webhook-secret", help="Print a new webhook shared secret")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "process-due-reports":
        process_due_reports()
    elif args.command == "send-weekly-digests":
        send_weekly_digests()
    elif args.command == "generate-webhook-secret":
        generate_webhook_secret()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
