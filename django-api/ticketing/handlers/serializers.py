"""Serializers for request validation and for transforming domain models to API responses."""

from rest_framework import serializers


class UserSerializer(serializers.Serializer):
    """Serializer for the User attached to a Booking."""

    id = serializers.IntegerField(source="id.value")
    name = serializers.CharField()
    email = serializers.EmailField()


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    description = serializers.CharField()
    location = serializers.CharField()
    date = serializers.DateTimeField()
    image_url = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class TicketSerializer(serializers.Serializer):
    """Serializer for Ticket domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    type = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2, source="price.amount")
    quantity = serializers.IntegerField(source="capacity.value")
    tickets_sold = serializers.IntegerField()
    available_tickets = serializers.IntegerField(source="available")
    created_at = serializers.DateTimeField()


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    id = serializers.UUIDField(source="id.value")
    reference = serializers.CharField()
    quantity = serializers.IntegerField()
    status = serializers.CharField(source="status.value")
    total_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, source="total_price.amount"
    )
    user = UserSerializer()
    event = EventSerializer()
    ticket = TicketSerializer()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class BookingStatisticsSerializer(serializers.Serializer):
    total_bookings = serializers.IntegerField()
    total_tickets_booked = serializers.IntegerField()
    upcoming_bookings = serializers.IntegerField()
    past_bookings = serializers.IntegerField()
    total_spent = serializers.DecimalField(
        max_digits=14, decimal_places=2, source="total_spent.amount"
    )


class EventSalesSerializer(serializers.Serializer):
    total_tickets_sold = serializers.IntegerField()
    total_revenue = serializers.DecimalField(
        max_digits=14, decimal_places=2, source="total_revenue.amount"
    )


class BookingCreateSerializer(serializers.Serializer):
    """Input for POST /api/bookings. Only admins may set user_id."""

    ticket_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    user_id = serializers.IntegerField(required=False, min_value=1)


class BookingUpdateSerializer(serializers.Serializer):
    """Input for PUT/PATCH /api/bookings/{id}. Both fields are optional."""

    ticket_id = serializers.UUIDField(required=False)
    quantity = serializers.IntegerField(min_value=1, required=False)


class GuestInfoSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)


class OnlineBookingSerializer(serializers.Serializer):
    """Input for the public POST /api/bookings/online."""

    event_id = serializers.UUIDField()
    ticket_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    user_info = GuestInfoSerializer()
