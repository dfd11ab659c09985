"""Shared BDD step definitions for the Notifications domain."""

from notifications.notification_types import NotificationType
from notifications.preference.preference import NotificationPreference
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Given steps: preferences
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a new merchant "{merchant_id}"'),
    target_fixture="merchant_id",
)
def new_merchant(merchant_id):
    return merchant_id


@given("a merchant with default preferences", target_fixture="preference")
def merchant_with_default_prefs():
    pref = NotificationPreference.create_default(merchant_id="m-bdd-pref")
    pref._events.clear()
    return pref


# ---------------------------------------------------------------------------
# Then steps: preferences
# ---------------------------------------------------------------------------
@then("every notification type is enabled")
def every_type_enabled(preference):
    assert all(preference.is_type_enabled(t) for t in NotificationType)


@then(parsers.cfparse('the preferred channel is "{channel}"'))
def preferred_channel_is(preference, channel):
    assert preference.preferred_channel == channel


@then("quiet hours are off")
def quiet_hours_off(preference):
    assert preference.quiet_hours_enabled is False


@then(parsers.cfparse('quiet hours are set to "{start}" - "{end}"'))
def quiet_hours_set(preference, start, end):
    assert preference.quiet_hours_enabled is True
    assert preference.quiet_hours_start == start
    assert preference.quiet_hours_end == end


@then(parsers.cfparse('"{notification_type}" is disabled'))
def type_disabled(preference, notification_type):
    assert preference.is_type_enabled(notification_type) is False


@then(parsers.cfparse('"{notification_type}" is enabled'))
def type_enabled(preference, notification_type):
    assert preference.is_type_enabled(notification_type) is True
