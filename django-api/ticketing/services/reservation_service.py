"""Reservation service - the only code that changes ticket inventory.

Services:
- Depend only on interfaces (stores, notifier)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Every operation checks availability and writes the booking inside a single
store transaction while holding the row locks of the tiers involved, so two
concurrent requests can never both pass a check against the same stale count.
"""

from loguru import logger

from ticketing.domain import (
    Actor,
    Booking,
    BookingId,
    EventId,
    Quantity,
    TicketId,
    UserId,
)
from ticketing.domain.errors import (
    BookingAccessDeniedError,
    BookingCancelFailedError,
    BookingCreateFailedError,
    BookingNotFoundError,
    BookingUpdateFailedError,
    EventNotFoundError,
    InsufficientInventoryError,
    InvalidIdError,
    InvalidQuantityError,
    TicketEventMismatchError,
    TicketNotFoundError,
    UserNotFoundError,
)
from ticketing.notifications import BookingNotifier
from ticketing.stores.interfaces import BookingStore, StoreError


def parse_id(id_type, value, kind: str):
    """Parse a string identifier into id_type, raising InvalidIdError."""
    if isinstance(value, id_type):
        return value
    try:
        return id_type.from_string(value)
    except (TypeError, ValueError):
        raise InvalidIdError(kind) from None


def parse_quantity(value) -> Quantity:
    if isinstance(value, Quantity):
        return value
    try:
        return Quantity(value)
    except ValueError:
        raise InvalidQuantityError() from None


class ReservationService:
    """Service for booking operations that reserve or release tickets."""

    def __init__(self, store: BookingStore, notifier: BookingNotifier | None = None) -> None:
        self._store = store
        self._notifier = notifier

    def create_booking(self, ticket_id: str, quantity: int, user_id: int) -> Booking:
        """Reserve tickets of a tier for a user.

        Raises:
            InvalidIdError: If the ticket_id is not a valid UUID.
            InvalidQuantityError: If quantity is not a positive integer.
            UserNotFoundError: If the user does not exist.
            TicketNotFoundError: If the tier does not exist.
            InsufficientInventoryError: If the tier cannot cover quantity.
            BookingCreateFailedError: If the transaction could not be committed.
        """
        tier_id = parse_id(TicketId, ticket_id, "ticket")
        requested = parse_quantity(quantity)

        log = logger.bind(user_id=str(user_id), ticket_id=str(tier_id), quantity=requested.value)
        try:
            with self._store.atomic():
                user = self._store.get_user(UserId(user_id))
                if user is None:
                    raise UserNotFoundError(str(user_id))
                ticket = self._store.lock_tickets([tier_id]).get(tier_id)
                if ticket is None:
                    raise TicketNotFoundError(str(tier_id))
                if ticket.available < requested.value:
                    log.bind(available_tickets=ticket.available).warning(
                        "Insufficient tickets for booking"
                    )
                    raise InsufficientInventoryError(
                        str(tier_id), requested.value, ticket.available
                    )
                booking = self._store.add_booking(user.id, ticket, requested)
        except StoreError as exc:
            log.bind(error=str(exc)).error("Database error during booking creation")
            raise BookingCreateFailedError() from exc

        log.bind(booking_id=str(booking.id), event_id=str(booking.event_id)).info(
            "Booking created successfully"
        )
        self._store.on_commit(lambda: self._notify_created(booking))
        return booking

    def create_guest_booking(
        self,
        event_id: str,
        ticket_id: str,
        quantity: int,
        email: str,
        name: str,
    ) -> Booking:
        """Book on behalf of a visitor identified only by email.

        The visitor's account is looked up by email or created without a
        usable password.

        Raises:
            EventNotFoundError: If the event does not exist.
            TicketEventMismatchError: If the tier does not belong to the event.
            Plus every error of create_booking.
        """
        event = parse_id(EventId, event_id, "event")
        tier_id = parse_id(TicketId, ticket_id, "ticket")
        requested = parse_quantity(quantity)
        try:
            with self._store.atomic():
                if self._store.get_event(event) is None:
                    raise EventNotFoundError(str(event))
                ticket = self._store.get_ticket(tier_id)
                if ticket is None or ticket.event_id != event:
                    raise TicketEventMismatchError(str(tier_id), str(event))
                user = self._store.get_or_create_user(email, name)
        except StoreError as exc:
            logger.bind(email=email, error=str(exc)).error("Database error during guest booking")
            raise BookingCreateFailedError() from exc
        return self.create_booking(tier_id, requested, user.id.value)

    def update_booking(
        self,
        booking_id: str,
        actor: Actor,
        *,
        ticket_id: str | None = None,
        quantity: int | None = None,
    ) -> Booking:
        """Change a booking's quantity and/or tier.

        Same tier: only an increase is checked against availability, and only
        for the difference. New tier: the whole new quantity must be available
        there, and the old tier gets its full quantity back. A request that
        changes nothing returns the booking untouched.

        Raises:
            InvalidIdError, InvalidQuantityError: On malformed input.
            BookingNotFoundError: If the booking does not exist or is cancelled.
            BookingAccessDeniedError: If actor neither owns it nor is an admin.
            TicketNotFoundError: If the target tier does not exist.
            InsufficientInventoryError: If the target tier cannot cover the change.
            BookingUpdateFailedError: If the transaction was rolled back.
        """
        booking_key = parse_id(BookingId, booking_id, "booking")
        new_tier = parse_id(TicketId, ticket_id, "ticket") if ticket_id is not None else None
        new_quantity = parse_quantity(quantity) if quantity is not None else None

        log = logger.bind(
            booking_id=str(booking_key),
            actor_id=str(actor.user_id),
            updated_by_admin=actor.is_admin,
        )
        try:
            with self._store.atomic():
                booking = self._locked_booking(booking_key, actor)
                target_tier = new_tier or booking.ticket_id
                target_quantity = new_quantity or Quantity(booking.quantity)
                if target_tier == booking.ticket_id:
                    if target_quantity.value == booking.quantity:
                        return booking
                    updated = self._adjust_quantity(booking, target_quantity)
                else:
                    updated = self._switch_tier(booking, target_tier, target_quantity)
        except StoreError as exc:
            log.bind(error=str(exc)).error("Database error during booking update")
            raise BookingUpdateFailedError(str(booking_key)) from exc

        log.bind(
            user_id=str(updated.user_id),
            old_ticket_id=str(booking.ticket_id),
            new_ticket_id=str(updated.ticket_id),
            old_quantity=booking.quantity,
            new_quantity=updated.quantity,
        ).info("Booking updated successfully")
        return updated

    def cancel_booking(self, booking_id: str, actor: Actor) -> None:
        """Cancel a booking, returning its full quantity to its tier.

        Raises:
            InvalidIdError: If the booking_id is not a valid UUID.
            BookingNotFoundError: If the booking does not exist or is cancelled.
            BookingAccessDeniedError: If actor neither owns it nor is an admin.
            BookingCancelFailedError: If the transaction was rolled back.
        """
        booking_key = parse_id(BookingId, booking_id, "booking")
        log = logger.bind(booking_id=str(booking_key), actor_id=str(actor.user_id))
        try:
            with self._store.atomic():
                booking = self._locked_booking(booking_key, actor)
                self._store.cancel_booking(booking_key)
        except StoreError as exc:
            log.bind(error=str(exc)).error("Database error during booking cancellation")
            raise BookingCancelFailedError(str(booking_key)) from exc

        log.bind(
            ticket_id=str(booking.ticket_id), released_quantity=booking.quantity
        ).info("Booking cancelled")

    def _locked_booking(self, booking_id: BookingId, actor: Actor) -> Booking:
        booking = self._store.get_booking(booking_id, for_update=True)
        if booking is None:
            raise BookingNotFoundError(str(booking_id))
        if not actor.can_manage(booking):
            logger.bind(booking_id=str(booking_id), actor_id=str(actor.user_id)).warning(
                "Unauthorized booking access attempt"
            )
            raise BookingAccessDeniedError(str(booking_id))
        return booking

    def _adjust_quantity(self, booking: Booking, quantity: Quantity) -> Booking:
        ticket = self._store.lock_tickets([booking.ticket_id])[booking.ticket_id]
        delta = quantity.value - booking.quantity
        # Decreases only release stock and never fail.
        if delta > 0 and ticket.available < delta:
            raise InsufficientInventoryError(str(ticket.id), delta, ticket.available)
        return self._store.set_booking_quantity(booking.id, quantity)

    def _switch_tier(self, booking: Booking, ticket_id: TicketId, quantity: Quantity) -> Booking:
        tickets = self._store.lock_tickets([booking.ticket_id, ticket_id])
        ticket = tickets.get(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(str(ticket_id))
        # The tiers are independent pools: the full quantity is checked, not a delta.
        if ticket.available < quantity.value:
            raise InsufficientInventoryError(str(ticket_id), quantity.value, ticket.available)
        return self._store.switch_booking_tier(booking.id, ticket, quantity)

    def _notify_created(self, booking: Booking) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.booking_created(booking)
        except Exception:
            logger.bind(booking_id=str(booking.id)).opt(exception=True).error(
                "Booking notification failed"
            )
