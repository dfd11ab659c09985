"""Tests for the ScheduledReport aggregate."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from reporting.report.events import ScheduledReportCreated, ScheduledReportRun
from reporting.report.report import CLAIM_SENTINEL, RunStatus, ScheduledReport

WEDNESDAY = datetime(2025, 6, 4, 12, 0, tzinfo=UTC)


def _create(**overrides):
    defaults = {
        "merchant_id": "m-r1",
        "name": "Weekly summary",
        "kind": "weekly",
        "schedule_day": 0,
        "schedule_time": "09:00",
        "recipient_email": "owner@example.com",
        "now": WEDNESDAY,
    }
    defaults.update(overrides)
    return ScheduledReport.create(**defaults)


class TestCreate:
    def test_first_run_is_scheduled(self):
        report = _create()
        assert report.is_active is True
        assert report.next_send_at == datetime(2025, 6, 8, 9, 0, tzinfo=UTC)
        assert report.last_sent_at is None
        assert isinstance(report._events[-1], ScheduledReportCreated)

    def test_email_delivery_needs_recipient(self):
        with pytest.raises(ValidationError) as exc:
            _create(recipient_email=None)
        assert "recipient_email" in exc.value.messages

    def test_messaging_delivery_needs_phone(self):
        with pytest.raises(ValidationError) as exc:
            _create(delivery_method="messaging")
        assert "recipient_phone" in exc.value.messages

    def test_both_needs_at_least_one_recipient(self):
        with pytest.raises(ValidationError):
            _create(delivery_method="both", recipient_email=None)
        assert _create(delivery_method="both", recipient_email=None, recipient_phone="+966500000000")

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            _create(kind="hourly")

    def test_weekly_day_out_of_range(self):
        with pytest.raises(ValidationError) as exc:
            _create(schedule_day=7)
        assert "schedule_day" in exc.value.messages

    def test_monthly_day_out_of_range(self):
        with pytest.raises(ValidationError):
            _create(kind="monthly", schedule_day=0)

    def test_bad_time_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _create(schedule_time="9am")
        assert "schedule_time" in exc.value.messages


class TestIsDue:
    def test_due_once_next_send_at_passes(self):
        report = _create()
        assert report.is_due(WEDNESDAY) is False
        assert report.is_due(report.next_send_at) is True
        assert report.is_due(report.next_send_at + timedelta(hours=1)) is True

    def test_never_scheduled_is_due(self):
        report = _create()
        report.next_send_at = None
        assert report.is_due(WEDNESDAY) is True

    def test_inactive_is_never_due(self):
        report = _create()
        report.deactivate(now=WEDNESDAY)
        assert report.is_due(report.next_send_at + timedelta(days=30)) is False

    def test_naive_now_is_treated_as_utc(self):
        report = _create()
        assert report.is_due(datetime(2025, 6, 8, 9, 0)) is True


class TestRecordRun:
    @pytest.mark.parametrize("delivered", [True, False])
    def test_reschedules_whatever_the_outcome(self, delivered):
        report = _create()
        run_at = datetime(2025, 6, 8, 9, 0, tzinfo=UTC)
        report.record_run(delivered, run_at, error=None if delivered else "email: SMTP error")

        assert report.last_sent_at == run_at
        assert report.next_send_at == datetime(2025, 6, 15, 9, 0, tzinfo=UTC)
        assert report.last_run_status == (RunStatus.DELIVERED if delivered else RunStatus.FAILED).value
        assert isinstance(report._events[-1], ScheduledReportRun)

    def test_success_clears_previous_error(self):
        report = _create()
        report.record_run(False, WEDNESDAY, error="boom")
        report.record_run(True, WEDNESDAY + timedelta(days=7))
        assert report.last_error is None


class TestClaim:
    def test_claim_parks_and_release_restores(self):
        report = _create()
        original = report.next_send_at
        previous = report.claim()
        assert report.next_send_at == CLAIM_SENTINEL
        assert report.is_due(WEDNESDAY + timedelta(days=365)) is False
        report.release_claim(previous)
        assert report.next_send_at == original


class TestManagement:
    def test_schedule_change_recomputes_next_run(self):
        report = _create()
        report.update(kind="daily", now=WEDNESDAY)
        assert report.next_send_at == datetime(2025, 6, 5, 9, 0, tzinfo=UTC)

    def test_non_schedule_change_keeps_next_run(self):
        report = _create()
        before = report.next_send_at
        report.update(name="Renamed", now=WEDNESDAY)
        assert report.name == "Renamed"
        assert report.next_send_at == before

    def test_update_validates(self):
        report = _create()
        with pytest.raises(ValidationError):
            report.update(delivery_method="messaging")

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            _create().update(is_active=False)

    def test_reactivation_reschedules_from_now(self):
        report = _create()
        report.deactivate(now=WEDNESDAY)
        later = datetime(2025, 7, 2, 12, 0, tzinfo=UTC)
        report.activate(now=later)
        assert report.is_active is True
        assert report.next_send_at == datetime(2025, 7, 6, 9, 0, tzinfo=UTC)
