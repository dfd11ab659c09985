from webhooks.security.events import WebhookVerificationRecorded
from webhooks.security.security_log import WebhookSecurityLog


def test_record_captures_request():
    entry = WebhookSecurityLog.record(
        platform="zid",
        signature_valid=False,
        merchant_id="m-1",
        ip_address="10.0.0.5",
        request_path="/webhooks/zid",
        request_method="post",
        error_message="Signature mismatch",
    )
    assert entry.merchant_id == "m-1"
    assert entry.request_method == "POST"
    assert entry.signature_valid is False
    assert entry.created_at is not None


def test_unattributed_requests_are_still_recorded():
    entry = WebhookSecurityLog.record(platform="salla", signature_valid=False, error_message="No merchant ID provided")
    assert entry.merchant_id is None
    assert entry.request_method is None


def test_record_raises_event():
    entry = WebhookSecurityLog.record(platform="calendly", signature_valid=True, merchant_id="m-2")
    event = entry._events[-1]
    assert isinstance(event, WebhookVerificationRecorded)
    assert event.security_log_id == str(entry.id)
    assert event.signature_valid is True
