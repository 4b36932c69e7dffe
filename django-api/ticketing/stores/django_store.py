"""Django ORM implementation of the BookingStore.

Tier availability is never stored: ``tickets_sold`` is aggregated from
confirmed bookings every time a tier is read. Mutations that depend on it must
hold the tier's row lock (``lock_tickets``) for the whole transaction.
"""

from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime

from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction
from django.db.models import Sum
from django.utils import timezone

from ticketing import models as orm
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
from ticketing.stores.interfaces import BookingStore, StoreError

CONFIRMED = orm.Booking.Status.CONFIRMED


def _to_user(row) -> User:
    return User(
        id=UserId(row.pk),
        name=row.get_full_name() or row.get_username(),
        email=row.email,
        is_admin=row.is_staff,
    )


def _to_event(row: orm.Event) -> Event:
    return Event(
        id=EventId(row.pk),
        name=row.name,
        description=row.description,
        location=row.location,
        date=row.date,
        image_url=row.image_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_ticket(row: orm.Ticket, sold: int) -> Ticket:
    return Ticket(
        id=TicketId(row.pk),
        event_id=EventId(row.event_id),
        type=row.type,
        price=Money(row.price),
        capacity=Capacity(row.quantity),
        tickets_sold=sold,
        created_at=row.created_at,
    )


def _to_booking(row: orm.Booking, sold: int) -> Booking:
    return Booking(
        id=BookingId(row.pk),
        user=_to_user(row.user),
        event=_to_event(row.event),
        ticket=_to_ticket(row.ticket, sold),
        quantity=row.quantity,
        status=BookingStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


@contextmanager
def _storage_errors() -> Iterator[None]:
    """Re-raise database failures as StoreError. Usable as a decorator."""
    try:
        yield
    except DatabaseError as exc:
        raise StoreError(str(exc)) from exc


class DjangoBookingStore(BookingStore):
    """Relational booking store using Django ORM."""

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with _storage_errors(), transaction.atomic():
            yield

    def on_commit(self, callback: Callable[[], None]) -> None:
        transaction.on_commit(callback)

    @_storage_errors()
    def get_user(self, user_id: UserId) -> User | None:
        row = get_user_model().objects.filter(pk=user_id.value).first()
        return _to_user(row) if row is not None else None

    @_storage_errors()
    def get_or_create_user(self, email: str, name: str) -> User:
        user_model = get_user_model()
        row = user_model.objects.filter(email__iexact=email).order_by("pk").first()
        if row is None:
            row = user_model(username=email, email=email, first_name=name[:150])
            row.set_unusable_password()
            row.save()
        return _to_user(row)

    @_storage_errors()
    def get_event(self, event_id: EventId) -> Event | None:
        row = orm.Event.objects.filter(pk=event_id.value).first()
        return _to_event(row) if row is not None else None

    @_storage_errors()
    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        row = orm.Ticket.objects.filter(pk=ticket_id.value).first()
        if row is None:
            return None
        return _to_ticket(row, self._sold_by_ticket([row.pk]).get(row.pk, 0))

    @_storage_errors()
    def list_tickets(self, event_id: EventId) -> list[Ticket]:
        rows = list(orm.Ticket.objects.filter(event_id=event_id.value))
        sold = self._sold_by_ticket([row.pk for row in rows])
        return [_to_ticket(row, sold.get(row.pk, 0)) for row in rows]

    @_storage_errors()
    def lock_tickets(self, ticket_ids: Iterable[TicketId]) -> dict[TicketId, Ticket]:
        ids = sorted({ticket_id.value for ticket_id in ticket_ids})
        rows = list(
            orm.Ticket.objects.select_for_update().filter(pk__in=ids).order_by("pk")
        )
        # Sold counts are read after the locks are held so they include every
        # booking committed before this transaction acquired them.
        sold = self._sold_by_ticket([row.pk for row in rows])
        return {TicketId(row.pk): _to_ticket(row, sold.get(row.pk, 0)) for row in rows}

    @_storage_errors()
    def get_booking(self, booking_id: BookingId, *, for_update: bool = False) -> Booking | None:
        qs = orm.Booking.objects.select_related("user", "event", "ticket").filter(
            pk=booking_id.value, status=CONFIRMED
        )
        if for_update:
            # Lock only the booking row; tier rows are locked in id order by lock_tickets.
            qs = qs.select_for_update(of=("self",))
        try:
            row = qs.get()
        except orm.Booking.DoesNotExist:
            return None
        return _to_booking(row, self._sold_by_ticket([row.ticket_id]).get(row.ticket_id, 0))

    @_storage_errors()
    def add_booking(self, user_id: UserId, ticket: Ticket, quantity: Quantity) -> Booking:
        row = orm.Booking.objects.create(
            user_id=user_id.value,
            event_id=ticket.event_id.value,
            ticket_id=ticket.id.value,
            quantity=quantity.value,
        )
        return self._require_booking(BookingId(row.pk))

    @_storage_errors()
    def set_booking_quantity(self, booking_id: BookingId, quantity: Quantity) -> Booking:
        self._update_booking(booking_id, quantity=quantity.value)
        return self._require_booking(booking_id)

    @_storage_errors()
    def switch_booking_tier(
        self, booking_id: BookingId, ticket: Ticket, quantity: Quantity
    ) -> Booking:
        self._update_booking(
            booking_id,
            ticket_id=ticket.id.value,
            event_id=ticket.event_id.value,
            quantity=quantity.value,
        )
        return self._require_booking(booking_id)

    @_storage_errors()
    def cancel_booking(self, booking_id: BookingId) -> None:
        now = timezone.now()
        self._update_booking(
            booking_id, status=orm.Booking.Status.CANCELLED, cancelled_at=now, updated_at=now
        )

    @_storage_errors()
    def list_bookings(
        self,
        *,
        user_id: UserId | None = None,
        event_id: EventId | None = None,
        event_after: datetime | None = None,
        event_before: datetime | None = None,
    ) -> list[Booking]:
        qs = orm.Booking.objects.select_related("user", "event", "ticket").filter(
            status=CONFIRMED
        )
        if user_id is not None:
            qs = qs.filter(user_id=user_id.value)
        if event_id is not None:
            qs = qs.filter(event_id=event_id.value)
        if event_after is not None:
            qs = qs.filter(event__date__gt=event_after)
        if event_before is not None:
            qs = qs.filter(event__date__lt=event_before)
        rows = list(qs.order_by("-created_at"))
        sold = self._sold_by_ticket({row.ticket_id for row in rows})
        return [_to_booking(row, sold.get(row.ticket_id, 0)) for row in rows]

    def _sold_by_ticket(self, ticket_pks) -> dict:
        if not ticket_pks:
            return {}
        rows = (
            orm.Booking.objects.filter(ticket_id__in=list(ticket_pks), status=CONFIRMED)
            .order_by()
            .values("ticket_id")
            .annotate(total=Sum("quantity"))
        )
        return {row["ticket_id"]: row["total"] or 0 for row in rows}

    def _update_booking(self, booking_id: BookingId, **fields) -> None:
        fields.setdefault("updated_at", timezone.now())
        updated = orm.Booking.objects.filter(pk=booking_id.value, status=CONFIRMED).update(
            **fields
        )
        if updated != 1:
            raise StoreError(f"Booking {booking_id} was not updated")

    def _require_booking(self, booking_id: BookingId) -> Booking:
        booking = self.get_booking(booking_id)
        if booking is None:
            raise StoreError(f"Booking {booking_id} disappeared during the transaction")
        return booking
