"""In-memory implementation of the BookingStore.

One re-entrant lock is held for the whole of an ``atomic()`` block, which
serializes every transaction the same way tier row locks do in the database.
Any exception raised inside the block restores the state captured on entry.
"""

import itertools
import threading
import uuid
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal

from ticketing.domain import (
    Booking,
    BookingId,
    BookingStatus,
    Capacity,
    Event,
    EventId,
    Money,
    Quantity,
    Ticket,
    TicketId,
    User,
    UserId,
)
from ticketing.stores.interfaces import BookingStore


@dataclass(frozen=True)
class _BookingRecord:
    id: BookingId
    user_id: UserId
    event_id: EventId
    ticket_id: TicketId
    quantity: int
    status: BookingStatus
    seq: int
    created_at: datetime
    updated_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryBookingStore(BookingStore):
    """Process-local store for tests and local experiments."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._depth = 0
        self._users: dict[UserId, User] = {}
        self._events: dict[EventId, Event] = {}
        self._tickets: dict[TicketId, Ticket] = {}
        self._bookings: dict[BookingId, _BookingRecord] = {}
        self._pending: list[Callable[[], None]] = []
        self._user_ids = itertools.count(1)
        self._seq = itertools.count(1)

    # Seeding helpers

    def add_user(self, name: str, email: str, *, is_admin: bool = False) -> User:
        with self._lock:
            user = User(id=UserId(next(self._user_ids)), name=name, email=email, is_admin=is_admin)
            self._users[user.id] = user
            return user

    def add_event(
        self,
        name: str,
        date: datetime,
        *,
        location: str = "",
        description: str = "",
    ) -> Event:
        now = self._clock()
        event = Event(
            id=EventId(uuid.uuid4()),
            name=name,
            description=description,
            location=location,
            date=date,
            image_url=None,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._events[event.id] = event
        return event

    def add_ticket(self, event_id: EventId, type: str, price: str | Decimal, capacity: int) -> Ticket:
        ticket = Ticket(
            id=TicketId(uuid.uuid4()),
            event_id=event_id,
            type=type,
            price=Money(Decimal(price)),
            capacity=Capacity(capacity),
            tickets_sold=0,
            created_at=self._clock(),
        )
        with self._lock:
            self._tickets[ticket.id] = ticket
        return ticket

    def set_ticket_price(self, ticket_id: TicketId, price: str | Decimal) -> None:
        with self._lock:
            self._tickets[ticket_id] = replace(
                self._tickets[ticket_id], price=Money(Decimal(price))
            )

    # BookingStore

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            snapshot = self._snapshot()
            self._depth += 1
            try:
                yield
            except BaseException:
                self._restore(snapshot)
                raise
            finally:
                self._depth -= 1
            callbacks: list[Callable[[], None]] = []
            if self._depth == 0:
                callbacks, self._pending = self._pending, []
        for callback in callbacks:
            callback()

    def on_commit(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._depth:
                self._pending.append(callback)
                return
        callback()

    def get_user(self, user_id: UserId) -> User | None:
        return self._users.get(user_id)

    def get_or_create_user(self, email: str, name: str) -> User:
        with self._lock:
            for user in self._users.values():
                if user.email.casefold() == email.casefold():
                    return user
            return self.add_user(name, email)

    def get_event(self, event_id: EventId) -> Event | None:
        return self._events.get(event_id)

    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        with self._lock:
            ticket = self._tickets.get(ticket_id)
            return self._with_sold(ticket) if ticket is not None else None

    def list_tickets(self, event_id: EventId) -> list[Ticket]:
        with self._lock:
            tickets = [t for t in self._tickets.values() if t.event_id == event_id]
            return [self._with_sold(t) for t in sorted(tickets, key=lambda t: t.created_at)]

    def lock_tickets(self, ticket_ids: Iterable[TicketId]) -> dict[TicketId, Ticket]:
        with self._lock:
            return {
                ticket_id: self._with_sold(self._tickets[ticket_id])
                for ticket_id in sorted(set(ticket_ids))
                if ticket_id in self._tickets
            }

    def get_booking(self, booking_id: BookingId, *, for_update: bool = False) -> Booking | None:
        with self._lock:
            record = self._bookings.get(booking_id)
            if record is None or record.status is not BookingStatus.CONFIRMED:
                return None
            return self._resolve(record)

    def add_booking(self, user_id: UserId, ticket: Ticket, quantity: Quantity) -> Booking:
        now = self._clock()
        with self._lock:
            record = _BookingRecord(
                id=BookingId(uuid.uuid4()),
                user_id=user_id,
                event_id=ticket.event_id,
                ticket_id=ticket.id,
                quantity=quantity.value,
                status=BookingStatus.CONFIRMED,
                seq=next(self._seq),
                created_at=now,
                updated_at=now,
            )
            self._bookings[record.id] = record
            return self._resolve(record)

    def set_booking_quantity(self, booking_id: BookingId, quantity: Quantity) -> Booking:
        with self._lock:
            record = self._update(booking_id, quantity=quantity.value)
            return self._resolve(record)

    def switch_booking_tier(
        self, booking_id: BookingId, ticket: Ticket, quantity: Quantity
    ) -> Booking:
        with self._lock:
            record = self._update(
                booking_id,
                ticket_id=ticket.id,
                event_id=ticket.event_id,
                quantity=quantity.value,
            )
            return self._resolve(record)

    def cancel_booking(self, booking_id: BookingId) -> None:
        with self._lock:
            self._update(booking_id, status=BookingStatus.CANCELLED)

    def list_bookings(
        self,
        *,
        user_id: UserId | None = None,
        event_id: EventId | None = None,
        event_after: datetime | None = None,
        event_before: datetime | None = None,
    ) -> list[Booking]:
        with self._lock:
            records = []
            for record in self._bookings.values():
                if record.status is not BookingStatus.CONFIRMED:
                    continue
                if user_id is not None and record.user_id != user_id:
                    continue
                if event_id is not None and record.event_id != event_id:
                    continue
                event_date = self._events[record.event_id].date
                if event_after is not None and not event_date > event_after:
                    continue
                if event_before is not None and not event_date < event_before:
                    continue
                records.append(record)
            records.sort(key=lambda r: (r.created_at, r.seq), reverse=True)
            return [self._resolve(record) for record in records]

    # Internals

    def sold(self, ticket_id: TicketId) -> int:
        with self._lock:
            return sum(
                r.quantity
                for r in self._bookings.values()
                if r.ticket_id == ticket_id and r.status is BookingStatus.CONFIRMED
            )

    def _with_sold(self, ticket: Ticket) -> Ticket:
        return replace(ticket, tickets_sold=self.sold(ticket.id))

    def _resolve(self, record: _BookingRecord) -> Booking:
        return Booking(
            id=record.id,
            user=self._users[record.user_id],
            event=self._events[record.event_id],
            ticket=self._with_sold(self._tickets[record.ticket_id]),
            quantity=record.quantity,
            status=record.status,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def _update(self, booking_id: BookingId, **changes) -> _BookingRecord:
        record = replace(self._bookings[booking_id], updated_at=self._clock(), **changes)
        self._bookings[booking_id] = record
        return record

    def _snapshot(self) -> tuple:
        return (
            dict(self._users),
            dict(self._events),
            dict(self._tickets),
            dict(self._bookings),
            len(self._pending),
        )

    def _restore(self, snapshot: tuple) -> None:
        users, events, tickets, bookings, pending = snapshot
        self._users = users
        self._events = events
        self._tickets = tickets
        self._bookings = bookings
        del self._pending[pending:]
