"""Read-only booking and inventory queries."""

from collections.abc import Callable
from datetime import datetime

from django.utils import timezone

from ticketing.domain import (
    Actor,
    Booking,
    BookingId,
    BookingStatistics,
    EventId,
    EventSales,
    Money,
    Ticket,
)
from ticketing.domain.errors import (
    AccessDeniedError,
    BookingAccessDeniedError,
    BookingNotFoundError,
    EventNotFoundError,
)
from ticketing.services.reservation_service import parse_id
from ticketing.stores.interfaces import BookingStore


class BookingQueryService:
    """Service for listing bookings, tiers and sales figures."""

    def __init__(
        self,
        store: BookingStore,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._clock = clock

    def list_bookings(self, actor: Actor) -> list[Booking]:
        """Return every booking for admins, the actor's own otherwise."""
        if actor.is_admin:
            return self._store.list_bookings()
        return self._store.list_bookings(user_id=actor.user_id)

    def get_booking(self, booking_id: str, actor: Actor) -> Booking:
        """Return a booking the actor may see.

        Raises:
            InvalidIdError: If the booking_id is not a valid UUID.
            BookingNotFoundError: If the booking does not exist or is cancelled.
            BookingAccessDeniedError: If actor neither owns it nor is an admin.
        """
        key = parse_id(BookingId, booking_id, "booking")
        booking = self._store.get_booking(key)
        if booking is None:
            raise BookingNotFoundError(str(key))
        if not actor.can_manage(booking):
            raise BookingAccessDeniedError(str(key))
        return booking

    def upcoming_bookings(self, actor: Actor) -> list[Booking]:
        return self._store.list_bookings(user_id=actor.user_id, event_after=self._clock())

    def past_bookings(self, actor: Actor) -> list[Booking]:
        return self._store.list_bookings(user_id=actor.user_id, event_before=self._clock())

    def statistics(self, actor: Actor) -> BookingStatistics:
        now = self._clock()
        bookings = self._store.list_bookings(user_id=actor.user_id)
        return BookingStatistics(
            total_bookings=len(bookings),
            total_tickets_booked=sum(b.quantity for b in bookings),
            upcoming_bookings=sum(1 for b in bookings if b.event.is_upcoming(now)),
            past_bookings=sum(1 for b in bookings if b.event.is_past(now)),
            total_spent=_total(bookings),
        )

    def list_tickets(self, event_id: str) -> list[Ticket]:
        """Return the tiers of an event with their current availability.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        key = parse_id(EventId, event_id, "event")
        if self._store.get_event(key) is None:
            raise EventNotFoundError(str(key))
        return self._store.list_tickets(key)

    def event_bookings(self, event_id: str, actor: Actor) -> tuple[list[Booking], EventSales]:
        """Return an event's bookings and sales totals. Admin only."""
        if not actor.is_admin:
            raise AccessDeniedError("Only admins can view event bookings")
        key = parse_id(EventId, event_id, "event")
        if self._store.get_event(key) is None:
            raise EventNotFoundError(str(key))
        bookings = self._store.list_bookings(event_id=key)
        sales = EventSales(
            total_tickets_sold=sum(b.quantity for b in bookings),
            total_revenue=_total(bookings),
        )
        return bookings, sales


def _total(bookings: list[Booking]) -> Money:
    total = Money.zero()
    for booking in bookings:
        total = total + booking.total_price
    return total
