"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Sum


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="organized_events",
        blank=True,
        null=True,
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=255)
    date = models.DateTimeField()
    image_url = models.URLField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["date"], name="event_date_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Ticket(models.Model):
    """Persistence model for ticket tiers.

    ``quantity`` is the tier's total capacity. It is never decremented by
    bookings; availability is derived from confirmed bookings.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="tickets")
    type = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"{self.type} - {self.price}"

    @property
    def tickets_sold(self) -> int:
        if self._state.adding:
            return 0
        total = self.bookings.filter(status=Booking.Status.CONFIRMED).aggregate(
            total=Sum("quantity")
        )["total"]
        return total or 0

    @property
    def available_tickets(self) -> int:
        return max(0, self.quantity - self.tickets_sold)

    def clean(self) -> None:
        super().clean()
        sold = self.tickets_sold
        if self.quantity is not None and self.quantity < sold:
            raise ValidationError(
                {"quantity": f"Capacity cannot be lower than the {sold} tickets already sold."}
            )


class Booking(models.Model):
    """Persistence model for bookings."""

    class Status(models.TextChoices):
        CONFIRMED = "confirmed", "Confirmed"
        CANCELLED = "cancelled", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bookings"
    )
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="bookings")
    ticket = models.ForeignKey(Ticket, on_delete=models.CASCADE, related_name="bookings")
    quantity = models.PositiveIntegerField()
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.CONFIRMED
    )
    cancelled_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["ticket", "status"], name="booking_ticket_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user} - {self.ticket} x {self.quantity}"
