"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from contextlib import AbstractContextManager
from datetime import datetime

from ticketing.domain import (
    Booking,
    BookingId,
    Event,
    EventId,
    Quantity,
    Ticket,
    TicketId,
    User,
    UserId,
)


class StoreError(Exception):
    """Raised when the storage backend fails to read or commit."""


class BookingStore(ABC):
    """Interface for the records the reservation core reads and mutates.

    Bookings returned by a store are always confirmed; cancelled bookings are
    invisible to every lookup.
    """

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Run the enclosed block as one transaction.

        Any exception rolls back every write made inside the block. Backend
        failures are raised as StoreError.
        """
        ...

    @abstractmethod
    def on_commit(self, callback: Callable[[], None]) -> None:
        """Run callback once the current transaction commits."""
        ...

    @abstractmethod
    def get_user(self, user_id: UserId) -> User | None:
        ...

    @abstractmethod
    def get_or_create_user(self, email: str, name: str) -> User:
        """Return the user with this email (case-insensitive), creating it if needed."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        ...

    @abstractmethod
    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        """Return a tier with its current tickets_sold, or None."""
        ...

    @abstractmethod
    def list_tickets(self, event_id: EventId) -> list[Ticket]:
        ...

    @abstractmethod
    def lock_tickets(self, ticket_ids: Iterable[TicketId]) -> dict[TicketId, Ticket]:
        """Lock the given tiers for the rest of the transaction.

        Locks are taken in ascending id order. Missing ids are absent from the
        result. Must be called inside atomic().
        """
        ...

    @abstractmethod
    def get_booking(self, booking_id: BookingId, *, for_update: bool = False) -> Booking | None:
        """Return a confirmed booking, optionally locking its row."""
        ...

    @abstractmethod
    def add_booking(self, user_id: UserId, ticket: Ticket, quantity: Quantity) -> Booking:
        """Insert a confirmed booking for the tier and its owning event."""
        ...

    @abstractmethod
    def set_booking_quantity(self, booking_id: BookingId, quantity: Quantity) -> Booking:
        ...

    @abstractmethod
    def switch_booking_tier(
        self, booking_id: BookingId, ticket: Ticket, quantity: Quantity
    ) -> Booking:
        """Move a booking to another tier, keeping its event in sync with the tier."""
        ...

    @abstractmethod
    def cancel_booking(self, booking_id: BookingId) -> None:
        ...

    @abstractmethod
    def list_bookings(
        self,
        *,
        user_id: UserId | None = None,
        event_id: EventId | None = None,
        event_after: datetime | None = None,
        event_before: datetime | None = None,
    ) -> list[Booking]:
        """Return confirmed bookings matching every given filter, newest first."""
        ...
