from ticketing.domain.models import (
    Actor,
    Booking,
    BookingStatistics,
    BookingStatus,
    Event,
    EventSales,
    Ticket,
    User,
)
from ticketing.domain.value_objects import (
    BookingId,
    Capacity,
    EventId,
    Money,
    Quantity,
    TicketId,
    UserId,
)

__all__ = [
    "Actor",
    "Booking",
    "BookingStatistics",
    "BookingStatus",
    "Event",
    "EventSales",
    "Ticket",
    "User",
    "BookingId",
    "EventId",
    "TicketId",
    "UserId",
    "Money",
    "Capacity",
    "Quantity",
]
