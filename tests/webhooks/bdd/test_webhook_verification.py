"""BDD tests for webhook signature verification."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when
from webhooks.secrets import get_secret_store
from webhooks.security.security_log import WebhookSecurityLog
from webhooks.security.signature import compute_signature
from webhooks.security.verifier import verify_webhook

scenarios("features/webhook_verification.feature")

PAYLOAD = b'{"event":"order.create","total":"99.00"}'


@pytest.fixture()
def outcome():
    return {}


@given(parsers.cfparse('merchant "{merchant_id}" has a "{platform}" webhook secret "{secret}"'))
def merchant_secret(merchant_id, platform, secret):
    get_secret_store().set_secret(merchant_id, platform, secret)


@when(parsers.cfparse('a "{platform}" webhook for "{merchant_id}" arrives signed with "{secret}" but its payload is altered'))
def tampered_webhook(outcome, platform, merchant_id, secret):
    signature = compute_signature(PAYLOAD, secret)
    outcome["result"] = verify_webhook(merchant_id, platform, PAYLOAD.replace(b"99", b"1"), signature)


@when(parsers.cfparse('a "{platform}" webhook for "{merchant_id}" arrives signed with "{secret}"'))
def signed_webhook(outcome, platform, merchant_id, secret):
    outcome["result"] = verify_webhook(merchant_id, platform, PAYLOAD, compute_signature(PAYLOAD, secret))


@then("the webhook is accepted")
def accepted(outcome):
    assert outcome["result"].valid is True
    assert outcome["result"].skipped is False


@then("the webhook is accepted without verification")
def accepted_unverified(outcome):
    assert outcome["result"].valid is True
    assert outcome["result"].skipped is True


@then(parsers.cfparse('the webhook is rejected with "{error}"'))
def rejected(outcome, error):
    assert outcome["result"].valid is False
    assert outcome["result"].error == error


@then(parsers.cfparse("the security log has {count:d} entry marked {state}"))
def security_log_entries(count, state):
    entries = current_domain.repository_for(WebhookSecurityLog)._dao.query.all().items
    assert len(entries) == count
    assert all(entry.signature_valid is (state == "valid") for entry in entries)
