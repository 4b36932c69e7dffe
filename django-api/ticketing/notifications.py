"""Booking notifications.

Notifications are best-effort: every message is sent independently and a
delivery failure is logged, never raised.
"""

from abc import ABC, abstractmethod
from urllib.parse import quote

from django.conf import settings
from django.core.mail import EmailMessage
from django.template.loader import render_to_string
from loguru import logger

from ticketing.domain import Booking

QR_CODE_URL = "https://api.qrserver.com/v1/create-qr-code/?size=240x240&data={data}"
CONFIRMATION_SUBJECT = "Pearl Events - Booking confirmation"
ADMIN_SUBJECT = "Pearl Events - New booking {reference}"


class BookingNotifier(ABC):
    """Interface for side effects triggered by a committed booking."""

    @abstractmethod
    def booking_created(self, booking: Booking) -> None:
        ...


class EmailBookingNotifier(BookingNotifier):
    """Emails the booking owner and the admin mailboxes."""

    def __init__(
        self,
        admin_email: str,
        frontend_url: str,
        from_email: str | None = None,
        owner_email: str = "",
    ) -> None:
        # (recipient, audience) pairs; unset addresses are dropped.
        self._staff_recipients = [
            (recipient, audience)
            for recipient, audience in ((admin_email, "admin"), (owner_email, "project_owner"))
            if recipient
        ]
        self._frontend_url = frontend_url.rstrip("/")
        self._from_email = from_email

    @classmethod
    def from_settings(cls) -> "EmailBookingNotifier":
        return cls(
            admin_email=settings.MAIL_TO_ADMIN,
            owner_email=settings.MAIL_TO_PROJECT_OWNER,
            frontend_url=settings.FRONTEND_URL,
            from_email=settings.DEFAULT_FROM_EMAIL,
        )

    def booking_url(self, booking: Booking) -> str:
        return f"{self._frontend_url}/booking/{booking.id}"

    def qr_url(self, booking: Booking) -> str:
        return QR_CODE_URL.format(data=quote(self.booking_url(booking), safe=""))

    def booking_created(self, booking: Booking) -> None:
        context = {
            "booking": booking,
            "user": booking.user,
            "event": booking.event,
            "ticket": booking.ticket,
            "booking_url": self.booking_url(booking),
            "qr_url": self.qr_url(booking),
        }
        self._send(
            subject=CONFIRMATION_SUBJECT,
            template="ticketing/emails/booking_created.txt",
            context=context,
            recipient=booking.user.email,
            booking=booking,
        )
        for recipient, audience in self._staff_recipients:
            self._send(
                subject=ADMIN_SUBJECT.format(reference=booking.reference),
                template="ticketing/emails/admin_booking_notification.txt",
                context={**context, "audience": audience},
                recipient=recipient,
                booking=booking,
            )

    def _send(
        self,
        *,
        subject: str,
        template: str,
        context: dict,
        recipient: str,
        booking: Booking,
    ) -> None:
        log = logger.bind(booking_id=str(booking.id), user_id=str(booking.user_id), email_to=recipient)
        if not recipient:
            log.warning("Skipping booking email without a recipient")
            return
        try:
            body = render_to_string(template, context)
            EmailMessage(subject, body, self._from_email, [recipient]).send()
        except Exception:
            log.opt(exception=True).error("Failed to send booking email")
            return
        log.info("Booking email sent")
