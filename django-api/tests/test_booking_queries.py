"""Unit tests for BookingQueryService against the in-memory store."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from ticketing.domain import Actor, Money
from ticketing.domain.errors import (
    AccessDeniedError,
    BookingAccessDeniedError,
    BookingNotFoundError,
    EventNotFoundError,
)
from ticketing.services import BookingQueryService, ReservationService

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def catalog(memory_store):
    upcoming = memory_store.add_event("Jazz Night", NOW + timedelta(days=10))
    past = memory_store.add_event("New Year Gala", NOW - timedelta(days=10))
    return {
        "upcoming": upcoming,
        "past": past,
        "standard": memory_store.add_ticket(upcoming.id, "Standard", "25.00", 10),
        "gala": memory_store.add_ticket(past.id, "Gala", "40.00", 10),
        "awa": memory_store.add_user("Awa", "awa@example.com"),
        "koffi": memory_store.add_user("Koffi", "koffi@example.com"),
        "staff": memory_store.add_user("Staff", "staff@example.com", is_admin=True),
    }


@pytest.fixture
def queries(memory_store) -> BookingQueryService:
    return BookingQueryService(memory_store, clock=lambda: NOW)


@pytest.fixture
def reservations(memory_store) -> ReservationService:
    return ReservationService(memory_store)


def actor(user) -> Actor:
    return Actor(user_id=user.id, is_admin=user.is_admin)


class TestBookingQueryService:
    def test_lists_are_scoped_to_the_actor(self, queries, reservations, catalog):
        mine = reservations.create_booking(str(catalog["standard"].id), 1, catalog["awa"].id.value)
        reservations.create_booking(str(catalog["standard"].id), 1, catalog["koffi"].id.value)

        assert [b.id for b in queries.list_bookings(actor(catalog["awa"]))] == [mine.id]
        assert len(queries.list_bookings(actor(catalog["staff"]))) == 2

    def test_newest_booking_first(self, queries, reservations, catalog):
        first = reservations.create_booking(str(catalog["standard"].id), 1, catalog["awa"].id.value)
        second = reservations.create_booking(str(catalog["gala"].id), 1, catalog["awa"].id.value)

        assert [b.id for b in queries.list_bookings(actor(catalog["awa"]))] == [second.id, first.id]

    def test_upcoming_past_and_statistics(self, queries, reservations, catalog):
        awa = catalog["awa"]
        reservations.create_booking(str(catalog["standard"].id), 3, awa.id.value)
        reservations.create_booking(str(catalog["gala"].id), 1, awa.id.value)

        assert [b.event_id for b in queries.upcoming_bookings(actor(awa))] == [catalog["upcoming"].id]
        assert [b.event_id for b in queries.past_bookings(actor(awa))] == [catalog["past"].id]

        stats = queries.statistics(actor(awa))
        assert stats.total_bookings == 2
        assert stats.total_tickets_booked == 4
        assert stats.upcoming_bookings == 1
        assert stats.past_bookings == 1
        assert stats.total_spent == Money(Decimal("115.00"))

    def test_totals_follow_current_price(self, memory_store, queries, reservations, catalog):
        awa = catalog["awa"]
        reservations.create_booking(str(catalog["standard"].id), 2, awa.id.value)
        memory_store.set_ticket_price(catalog["standard"].id, "30.00")

        assert queries.statistics(actor(awa)).total_spent == Money(Decimal("60.00"))

    def test_get_booking_access(self, queries, reservations, catalog):
        booking = reservations.create_booking(str(catalog["standard"].id), 1, catalog["awa"].id.value)

        assert queries.get_booking(str(booking.id), actor(catalog["staff"])) == booking
        with pytest.raises(BookingAccessDeniedError):
            queries.get_booking(str(booking.id), actor(catalog["koffi"]))

        reservations.cancel_booking(str(booking.id), actor(catalog["awa"]))
        with pytest.raises(BookingNotFoundError):
            queries.get_booking(str(booking.id), actor(catalog["awa"]))

    def test_event_bookings(self, queries, reservations, catalog):
        reservations.create_booking(str(catalog["standard"].id), 3, catalog["awa"].id.value)
        reservations.create_booking(str(catalog["standard"].id), 2, catalog["koffi"].id.value)

        with pytest.raises(AccessDeniedError):
            queries.event_bookings(str(catalog["upcoming"].id), actor(catalog["awa"]))

        bookings, sales = queries.event_bookings(str(catalog["upcoming"].id), actor(catalog["staff"]))
        assert len(bookings) == 2
        assert sales.total_tickets_sold == 5
        assert sales.total_revenue == Money(Decimal("125.00"))

    def test_list_tickets_unknown_event(self, queries, catalog):
        with pytest.raises(EventNotFoundError):
            queries.list_tickets("00000000-0000-0000-0000-000000000000")
