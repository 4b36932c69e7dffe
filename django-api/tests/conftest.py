"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from ticketing import models as orm
from ticketing.domain import Booking
from ticketing.notifications import BookingNotifier
from ticketing.stores import InMemoryBookingStore


class RecordingNotifier(BookingNotifier):
    def __init__(self) -> None:
        self.created: list[Booking] = []

    def booking_created(self, booking: Booking) -> None:
        self.created.append(booking)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def memory_store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def in_a_month() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=30)


@pytest.fixture
def customer(django_user_model):
    return django_user_model.objects.create_user(
        username="awa", email="awa@example.com", password="secret", first_name="Awa"
    )


@pytest.fixture
def other_customer(django_user_model):
    return django_user_model.objects.create_user(
        username="koffi", email="koffi@example.com", password="secret", first_name="Koffi"
    )


@pytest.fixture
def staff_user(django_user_model):
    return django_user_model.objects.create_user(
        username="staff", email="staff@example.com", password="secret", is_staff=True
    )


@pytest.fixture
def event(in_a_month) -> orm.Event:
    return orm.Event.objects.create(
        name="Jazz Night", description="Live quartet", location="Abidjan", date=in_a_month
    )


@pytest.fixture
def past_event() -> orm.Event:
    return orm.Event.objects.create(
        name="New Year Gala",
        location="Grand-Bassam",
        date=datetime.now(timezone.utc) - timedelta(days=60),
    )


@pytest.fixture
def ticket(event) -> orm.Ticket:
    return orm.Ticket.objects.create(event=event, type="Standard", price=Decimal("25.00"), quantity=10)


@pytest.fixture
def vip_ticket(event) -> orm.Ticket:
    return orm.Ticket.objects.create(event=event, type="VIP", price=Decimal("100.00"), quantity=10)


@pytest.fixture
def past_ticket(past_event) -> orm.Ticket:
    return orm.Ticket.objects.create(
        event=past_event, type="Standard", price=Decimal("40.00"), quantity=50
    )
