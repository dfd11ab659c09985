"""Application tests for business-event helpers and inbound event handlers."""

from datetime import UTC, datetime

import pytest
from notifications.channel import get_channel
from notifications.directory import get_directory
from notifications.notification.commerce_events import CommerceEventsHandler
from notifications.notification.conversation_events import BookingEventsHandler, ConversationEventsHandler
from notifications.notification.dispatch import DispatchNotification
from notifications.notification.helpers import notify_missed_messages, notify_new_order
from notifications.notification.notification import NotificationLog
from notifications.preference.preference import NotificationPreference
from protean import current_domain
from protean.exceptions import ValidationError
from shared.events.bookings import AppointmentBooked
from shared.events.commerce import LowStockDetected, OrderPlaced, OrderStatusChanged
from shared.events.conversations import ChannelDisconnected, MessageReceived, MessagesMissed


@pytest.fixture(autouse=True)
def email_merchant():
    get_directory().set_notification_email("m-h", "owner@example.com")
    pref = NotificationPreference.create_default(merchant_id="m-h")
    pref.update(preferred_channel="email")
    current_domain.repository_for(NotificationPreference).add(pref)


def _logs(notification_type):
    repo = current_domain.repository_for(NotificationLog)
    return repo._dao.query.filter(merchant_id="m-h", notification_type=notification_type).all().items


def _now():
    return datetime.now(UTC)


class TestHelpers:
    def test_notify_new_order_renders_template(self):
        assert notify_new_order("m-h", order_id="o-1", total_amount=99.5, order_number="1001") is True
        [log] = _logs("new_order")
        assert log.title == "New order received"
        assert "1001" in log.body
        assert log.url == "/merchant/orders/o-1"

    def test_missed_messages_without_count_sends_nothing(self):
        assert notify_missed_messages("m-h", 0) is False
        assert _logs("missed_message") == []


class TestCommerceEventsHandler:
    def test_order_placed(self):
        CommerceEventsHandler().on_order_placed(
            OrderPlaced(merchant_id="m-h", order_id="o-7", total_amount=10.0, placed_at=_now())
        )
        assert len(_logs("new_order")) == 1
        assert get_channel("email").sent_emails[0]["to"] == "owner@example.com"

    def test_order_status_changed(self):
        CommerceEventsHandler().on_order_status_changed(
            OrderStatusChanged(merchant_id="m-h", order_id="o-7", new_status="shipped", changed_at=_now())
        )
        assert "Shipped" in _logs("order_status")[0].body

    def test_low_stock(self):
        CommerceEventsHandler().on_low_stock_detected(
            LowStockDetected(
                merchant_id="m-h",
                product_id="p-1",
                product_name="Oud oil",
                current_quantity=1,
                threshold=5,
                detected_at=_now(),
            )
        )
        assert len(_logs("low_stock")) == 1


class TestConversationEventsHandler:
    def test_message_received(self):
        ConversationEventsHandler().on_message_received(
            MessageReceived(
                merchant_id="m-h",
                conversation_id="c-1",
                customer_name="Sara",
                preview="Is this in stock?",
                received_at=_now(),
            )
        )
        [log] = _logs("new_message")
        assert log.title == "New message from Sara"

    def test_messages_missed(self):
        ConversationEventsHandler().on_messages_missed(
            MessagesMissed(merchant_id="m-h", missed_count=3, detected_at=_now())
        )
        assert "3 messages" in _logs("missed_message")[0].body

    def test_channel_disconnected(self):
        ConversationEventsHandler().on_channel_disconnected(
            ChannelDisconnected(merchant_id="m-h", disconnected_at=_now())
        )
        assert _logs("disconnect_alert")[0].title == "WhatsApp disconnected"


class TestBookingEventsHandler:
    def test_appointment_booked(self):
        BookingEventsHandler().on_appointment_booked(
            AppointmentBooked(
                merchant_id="m-h",
                appointment_id="a-1",
                customer_name="Omar",
                service_name="Haircut",
                scheduled_at=datetime(2025, 5, 1, 14, 30, tzinfo=UTC),
                booked_at=_now(),
            )
        )
        assert "Omar booked Haircut" in _logs("appointment")[0].body


class TestDispatchCommand:
    def test_returns_dispatch_result(self):
        result = current_domain.process(
            DispatchNotification(
                merchant_id="m-h",
                notification_type="custom",
                title="Maintenance tonight",
                body="The dashboard will be offline from 01:00 to 02:00.",
            ),
            asynchronous=False,
        )
        assert result is True
        assert len(_logs("custom")) == 1

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            current_domain.process(
                DispatchNotification(merchant_id="m-h", notification_type="fax", title="x", body="y"),
                asynchronous=False,
            )
