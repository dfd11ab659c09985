"""Tests for notification templates."""

from datetime import datetime

import pytest
from notifications.templates import get_template
from notifications.templates.email_layout import render_email_html


class TestTemplates:
    def test_new_order(self):
        rendered = get_template("new_order").render(
            {"order_id": "o-1", "order_number": "1001", "total_amount": 250.5, "currency": "SAR"}
        )
        assert rendered["title"] == "New order received"
        assert "1001" in rendered["body"]
        assert "250.5 SAR" in rendered["body"]
        assert rendered["url"] == "/merchant/orders/o-1"

    def test_new_message_truncates_long_previews(self):
        rendered = get_template("new_message").render({"customer_name": "Sara", "preview": "x" * 500})
        assert rendered["title"] == "New message from Sara"
        assert len(rendered["body"]) < 500

    def test_appointment_formats_datetime(self):
        rendered = get_template("appointment").render(
            {"customer_name": "Omar", "service_name": "Haircut", "scheduled_at": datetime(2025, 5, 1, 14, 30)}
        )
        assert rendered["body"] == "Omar booked Haircut for 2025-05-01 14:30."

    def test_order_status_uses_label(self):
        rendered = get_template("order_status").render({"order_id": "o-1", "new_status": "shipped"})
        assert "Shipped" in rendered["body"]

    @pytest.mark.parametrize("count,expected", [(1, "1 message "), (4, "4 messages ")])
    def test_missed_message_pluralises(self, count, expected):
        assert expected in get_template("missed_message").render({"missed_count": count})["body"]

    def test_disconnect_alert(self):
        rendered = get_template("disconnect_alert").render({"channel_name": "WhatsApp"})
        assert rendered["title"] == "WhatsApp disconnected"

    def test_low_stock(self):
        rendered = get_template("low_stock").render(
            {"product_id": "p-9", "product_name": "Oud oil", "current_quantity": 2, "threshold": 5}
        )
        assert "Oud oil is down to 2 units" in rendered["body"]
        assert rendered["url"] == "/merchant/products/p-9"

    def test_weekly_report_summarises_orders_and_revenue(self):
        rendered = get_template("weekly_report").render({"orders": 12, "revenue": 4820.4})
        assert rendered["body"] == "12 orders, 4,820 SAR revenue this week."
        assert rendered["url"] == "/merchant/dashboard"

    def test_weekly_report_single_order(self):
        assert get_template("weekly_report").render({"orders": 1, "revenue": 90})["body"].startswith("1 order,")

    def test_unregistered_type_raises(self):
        with pytest.raises(ValueError):
            get_template("custom")


class TestEmailLayout:
    def test_escapes_content(self):
        html = render_email_html("<b>Title</b>", "a & b")
        assert "&lt;b&gt;Title&lt;/b&gt;" in html
        assert "a &amp; b" in html

    def test_relative_url_uses_base(self):
        html = render_email_html("T", "B", url="/merchant/orders/1", base_url="https://app.example.com")
        assert 'href="https://app.example.com/merchant/orders/1"' in html

    def test_no_link_without_url(self):
        assert "href" not in render_email_html("T", "B")
