"""Tests for booking email notifications.

Run with: pytest tests/test_notifications.py -v
"""

import pytest

from ticketing.notifications import EmailBookingNotifier
from ticketing.services import ReservationService

FRONTEND = "https://admin.example.com/"


@pytest.fixture
def booking(memory_store, in_a_month):
    event = memory_store.add_event("Jazz Night", in_a_month, location="Abidjan")
    ticket = memory_store.add_ticket(event.id, "VIP", "100.00", 10)
    user = memory_store.add_user("Awa", "awa@example.com")
    return ReservationService(memory_store).create_booking(str(ticket.id), 3, user.id.value)


def make_notifier(admin: str = "", owner: str = "") -> EmailBookingNotifier:
    return EmailBookingNotifier(
        admin_email=admin,
        frontend_url=FRONTEND,
        from_email="noreply@example.com",
        owner_email=owner,
    )


class TestEmailBookingNotifier:
    """Tests for EmailBookingNotifier.booking_created."""

    def test_sends_confirmation_and_admin_mails(self, mailoutbox, booking):
        make_notifier("admin@example.com", "owner@example.com").booking_created(booking)

        assert [m.to for m in mailoutbox] == [
            ["awa@example.com"],
            ["admin@example.com"],
            ["owner@example.com"],
        ]
        assert mailoutbox[0].subject == "Pearl Events - Booking confirmation"
        assert mailoutbox[1].subject == f"Pearl Events - New booking {booking.reference}"
        assert mailoutbox[0].from_email == "noreply@example.com"

    def test_empty_admin_address_is_skipped(self, mailoutbox, booking):
        make_notifier("admin@example.com", "").booking_created(booking)
        assert len(mailoutbox) == 2

    def test_confirmation_content(self, mailoutbox, booking):
        notifier = make_notifier()
        notifier.booking_created(booking)

        body = mailoutbox[0].body
        assert "Hello Awa," in body
        assert booking.reference in body
        assert "Jazz Night" in body
        assert "Quantity:  3" in body
        assert "Total:     300.00" in body
        assert f"https://admin.example.com/booking/{booking.id}" in body
        assert notifier.qr_url(booking) in body

    def test_qr_url_encodes_booking_link(self, booking):
        url = make_notifier().qr_url(booking)
        assert url.startswith("https://api.qrserver.com/v1/create-qr-code/")
        assert f"data=https%3A%2F%2Fadmin.example.com%2Fbooking%2F{booking.id}" in url

    def test_admin_mail_shows_remaining_stock(self, mailoutbox, booking):
        make_notifier("admin@example.com").booking_created(booking)

        body = mailoutbox[1].body
        assert body.startswith("Hello admin,")
        assert "Remaining: 7 of 10" in body
        assert "Awa <awa@example.com>" in body

    def test_one_failure_does_not_block_other_mails(self, mailoutbox, monkeypatch, booking):
        from ticketing import notifications

        real_render = notifications.render_to_string

        def render(template, context):
            if template.endswith("booking_created.txt"):
                raise RuntimeError("template missing")
            return real_render(template, context)

        monkeypatch.setattr(notifications, "render_to_string", render)

        make_notifier("admin@example.com", "owner@example.com").booking_created(booking)

        assert [m.to for m in mailoutbox] == [["admin@example.com"], ["owner@example.com"]]

    def test_owner_only_gets_owner_greeting(self, mailoutbox, booking):
        make_notifier(admin="", owner="owner@example.com").booking_created(booking)

        assert [m.to for m in mailoutbox] == [["awa@example.com"], ["owner@example.com"]]
        assert mailoutbox[1].body.startswith("Hello,")
        assert "Hello admin" not in mailoutbox[1].body

    def test_from_settings(self, settings, mailoutbox, booking):
        settings.MAIL_TO_ADMIN = "admin@example.com"
        settings.MAIL_TO_PROJECT_OWNER = ""
        settings.FRONTEND_URL = "https://front.example.com"

        notifier = EmailBookingNotifier.from_settings()
        notifier.booking_created(booking)

        assert [m.to for m in mailoutbox] == [["awa@example.com"], ["admin@example.com"]]
        assert notifier.booking_url(booking) == f"https://front.example.com/booking/{booking.id}"
