"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in ticketing/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ticketing.domain.value_objects import (
    BookingId,
    Capacity,
    EventId,
    Money,
    TicketId,
    UserId,
)


class BookingStatus(Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class User:
    """The account a booking belongs to."""

    id: UserId
    name: str
    email: str
    is_admin: bool = False


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    name: str
    description: str
    location: str
    date: datetime
    image_url: str | None
    created_at: datetime
    updated_at: datetime

    def is_upcoming(self, now: datetime) -> bool:
        return self.date > now

    def is_past(self, now: datetime) -> bool:
        return self.date < now


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a ticket tier.

    ``capacity`` is the total number of tickets the tier offers and
    ``tickets_sold`` the sum of quantities over its confirmed bookings.
    """

    id: TicketId
    event_id: EventId
    type: str
    price: Money
    capacity: Capacity
    tickets_sold: int
    created_at: datetime

    @property
    def available(self) -> int:
        return max(0, self.capacity.value - self.tickets_sold)

    @property
    def has_available_tickets(self) -> bool:
        return self.available > 0


@dataclass(frozen=True)
class Booking:
    """Domain representation of a Booking with its relations resolved."""

    id: BookingId
    user: User
    event: Event
    ticket: Ticket
    quantity: int
    status: BookingStatus
    created_at: datetime
    updated_at: datetime

    @property
    def user_id(self) -> UserId:
        return self.user.id

    @property
    def event_id(self) -> EventId:
        return self.event.id

    @property
    def ticket_id(self) -> TicketId:
        return self.ticket.id

    @property
    def total_price(self) -> Money:
        # Priced at the tier's current price, not a snapshot taken at booking time.
        return self.ticket.price * self.quantity

    @property
    def reference(self) -> str:
        return f"BK-{self.id.value.hex[:8].upper()}"


@dataclass(frozen=True)
class Actor:
    """The authenticated user performing an operation."""

    user_id: UserId
    is_admin: bool = False

    def can_manage(self, booking: Booking) -> bool:
        return self.is_admin or booking.user_id == self.user_id


@dataclass(frozen=True)
class BookingStatistics:
    total_bookings: int
    total_tickets_booked: int
    upcoming_bookings: int
    past_bookings: int
    total_spent: Money


@dataclass(frozen=True)
class EventSales:
    total_tickets_sold: int
    total_revenue: Money
