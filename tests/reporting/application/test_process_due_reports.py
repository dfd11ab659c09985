"""Tests for the scheduled report engine."""

from datetime import UTC, datetime, timedelta

import pytest
from notifications.channel import get_channel
from notifications.notification_types import DeliveryChannel
from protean import current_domain
from reporting.metrics import get_metrics_source
from reporting.report import processing
from reporting.report.processing import (
    ProcessDueReports,
    SendScheduledReport,
    find_due_reports,
    process_due_reports,
    send_report,
)
from reporting.report.report import CLAIM_SENTINEL, RunStatus, ScheduledReport

CREATED = datetime(2025, 6, 4, 12, 0, tzinfo=UTC)  # Wednesday
SUNDAY = datetime(2025, 6, 8, 9, 0, tzinfo=UTC)


@pytest.fixture
def email():
    return get_channel(DeliveryChannel.EMAIL)


@pytest.fixture
def messaging():
    return get_channel(DeliveryChannel.MESSAGING)


def _persist(**overrides):
    defaults = {
        "merchant_id": "m-engine",
        "name": "Weekly summary",
        "kind": "weekly",
        "schedule_day": 0,
        "recipient_email": "owner@example.com",
        "now": CREATED,
    }
    defaults.update(overrides)
    report = ScheduledReport.create(**defaults)
    current_domain.repository_for(ScheduledReport).add(report)
    return report


def _reload(report):
    return current_domain.repository_for(ScheduledReport).get(report.id)


class TestFindDueReports:
    def test_selects_only_due_active_reports(self):
        due = _persist(name="Due")
        _persist(name="Later", kind="monthly", schedule_day=20)
        inactive = _persist(name="Inactive")
        inactive.deactivate(now=CREATED)
        current_domain.repository_for(ScheduledReport).add(inactive)

        assert [r.id for r in find_due_reports(SUNDAY)] == [due.id]

    def test_nothing_due_before_first_run(self):
        _persist()
        assert find_due_reports(CREATED + timedelta(hours=1)) == []


class TestSendReport:
    def test_email_delivery(self, email):
        report = _persist()
        assert send_report(report, SUNDAY) is True

        assert len(email.sent_emails) == 1
        sent = email.sent_emails[0]
        assert sent["to"] == "owner@example.com"
        assert sent["subject"].startswith("Weekly report: Weekly summary")
        assert sent["html_body"].startswith("<div")

        stored = _reload(report)
        assert stored.last_sent_at == SUNDAY
        assert stored.next_send_at == SUNDAY + timedelta(days=7)
        assert stored.last_run_status == RunStatus.DELIVERED.value
        assert stored.last_error is None

    def test_messaging_delivery_uses_text(self, messaging):
        report = _persist(delivery_method="messaging", recipient_email=None, recipient_phone="+966500000001")
        assert send_report(report, SUNDAY) is True
        assert messaging.sent_messages[0]["to"] == "+966500000001"
        assert messaging.sent_messages[0]["body"].startswith("*Weekly report")

    def test_both_succeeds_when_either_channel_does(self, email, messaging):
        email.configure(should_succeed=False, failure_reason="SMTP down")
        report = _persist(delivery_method="both", recipient_phone="+966500000002")

        assert send_report(report, SUNDAY) is True
        assert len(messaging.sent_messages) == 1
        stored = _reload(report)
        assert stored.last_run_status == RunStatus.DELIVERED.value

    def test_both_skips_channel_without_recipient(self, email, messaging):
        report = _persist(delivery_method="both")
        assert send_report(report, SUNDAY) is True
        assert len(email.sent_emails) == 1
        assert messaging.sent_messages == []

    def test_all_channels_failing_still_reschedules(self, email, messaging):
        email.configure(should_succeed=False, failure_reason="SMTP down")
        messaging.configure(should_succeed=False, failure_reason="Gateway down")
        report = _persist(delivery_method="both", recipient_phone="+966500000003")

        assert send_report(report, SUNDAY) is False

        stored = _reload(report)
        assert stored.last_sent_at == SUNDAY
        assert stored.next_send_at == SUNDAY + timedelta(days=7)
        assert stored.last_run_status == RunStatus.FAILED.value
        assert stored.last_error == "email: SMTP down; messaging: Gateway down"

    def test_metrics_failure_is_recorded_and_rescheduled(self, email):
        get_metrics_source().fail_for("m-engine")
        report = _persist()

        assert send_report(report, SUNDAY) is False
        assert email.sent_emails == []

        stored = _reload(report)
        assert stored.last_run_status == RunStatus.FAILED.value
        assert "Metrics unavailable" in stored.last_error
        assert stored.next_send_at == SUNDAY + timedelta(days=7)

    def test_no_recipient_on_file(self):
        report = _persist(delivery_method="both", recipient_phone="+966500000004")
        report.recipient_email = None
        report.recipient_phone = None

        assert send_report(report, SUNDAY) is False
        assert _reload(report).last_error == "no recipient configured"


class TestProcessDueReports:
    def test_summary_counts(self, email):
        _persist(name="A", merchant_id="m-ok-1")
        _persist(name="B", merchant_id="m-ok-2")
        _persist(name="C", merchant_id="m-broken")
        _persist(name="Not yet", kind="monthly", schedule_day=20)
        get_metrics_source().fail_for("m-broken")

        summary = process_due_reports(SUNDAY)

        assert summary == {"processed": 3, "sent": 2, "failed": 1}
        assert len(email.sent_emails) == 2

    def test_every_processed_report_moves_forward(self, email):
        email.configure(should_succeed=False)
        reports = [_persist(name=f"R{i}") for i in range(3)]

        process_due_reports(SUNDAY)

        for report in reports:
            assert _reload(report).next_send_at > SUNDAY
        assert process_due_reports(SUNDAY) == {"processed": 0, "sent": 0, "failed": 0}

    def test_nothing_due(self):
        _persist()
        assert process_due_reports(CREATED) == {"processed": 0, "sent": 0, "failed": 0}

    def test_claim_mode_releases_into_the_next_schedule(self, email, monkeypatch):
        monkeypatch.setenv("REPORT_CLAIM_ENABLED", "true")
        report = _persist()

        assert process_due_reports(SUNDAY) == {"processed": 1, "sent": 1, "failed": 0}

        stored = _reload(report)
        assert stored.next_send_at == SUNDAY + timedelta(days=7)
        assert stored.next_send_at != CLAIM_SENTINEL

    def test_report_claimed_by_another_run_is_skipped(self, email, monkeypatch):
        monkeypatch.setenv("REPORT_CLAIM_ENABLED", "true")
        report = _persist()
        stale = _reload(report)
        winner = _reload(report)
        winner.claim()
        current_domain.repository_for(ScheduledReport).add(winner)
        monkeypatch.setattr(processing, "find_due_reports", lambda now: [stale])

        assert process_due_reports(SUNDAY) == {"processed": 0, "sent": 0, "failed": 0}
        assert email.sent_emails == []
        assert _reload(report).next_send_at == CLAIM_SENTINEL

    def test_claimed_report_is_not_due(self):
        report = _persist()
        report.claim()
        current_domain.repository_for(ScheduledReport).add(report)
        assert find_due_reports(SUNDAY + timedelta(days=365)) == []


class TestCommands:
    def test_process_due_command_returns_summary(self, email):
        _persist()
        summary = current_domain.process(ProcessDueReports(as_of=SUNDAY), asynchronous=False)
        assert summary == {"processed": 1, "sent": 1, "failed": 0}

    def test_send_now_ignores_schedule(self, email):
        report = _persist()
        sent = current_domain.process(SendScheduledReport(report_id=str(report.id)), asynchronous=False)

        assert sent is True
        assert len(email.sent_emails) == 1
        assert _reload(report).last_sent_at is not None
