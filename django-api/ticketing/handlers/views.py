"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Leave domain errors to handlers.errors for mapping to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ticketing.domain import Actor, UserId
from ticketing.handlers.serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    BookingStatisticsSerializer,
    BookingUpdateSerializer,
    EventSalesSerializer,
    OnlineBookingSerializer,
    TicketSerializer,
)
from ticketing.notifications import EmailBookingNotifier
from ticketing.services import BookingQueryService, ReservationService
from ticketing.stores import DjangoBookingStore


def reservation_service() -> ReservationService:
    return ReservationService(DjangoBookingStore(), EmailBookingNotifier.from_settings())


def query_service() -> BookingQueryService:
    return BookingQueryService(DjangoBookingStore())


def actor_for(request: Request) -> Actor:
    return Actor(user_id=UserId(request.user.pk), is_admin=request.user.is_staff)


class BookingPagination(PageNumberPagination):
    page_size = settings.BOOKINGS_PAGE_SIZE
    page_size_query_param = "per_page"
    max_page_size = 100

    def get_paginated_response(self, data) -> Response:
        return Response(
            {
                "data": data,
                "meta": {
                    "count": self.page.paginator.count,
                    "page": self.page.number,
                    "per_page": self.page.paginator.per_page,
                    "next": self.get_next_link(),
                    "previous": self.get_previous_link(),
                },
            }
        )


class BookingListView(APIView):
    """Handler for GET/POST /api/bookings"""

    def get(self, request: Request) -> Response:
        bookings = query_service().list_bookings(actor_for(request))
        return Response({"data": BookingSerializer(bookings, many=True).data})

    def post(self, request: Request) -> Response:
        payload = BookingCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        actor = actor_for(request)
        # Admins may book on behalf of another user.
        user_id = payload.validated_data.get("user_id") if actor.is_admin else None
        booking = reservation_service().create_booking(
            ticket_id=str(payload.validated_data["ticket_id"]),
            quantity=payload.validated_data["quantity"],
            user_id=user_id or actor.user_id.value,
        )
        return Response(
            {"message": "Booking created successfully", "data": BookingSerializer(booking).data},
            status=status.HTTP_201_CREATED,
        )


class BookingDetailView(APIView):
    """Handler for GET/PUT/PATCH/DELETE /api/bookings/{booking_id}"""

    def get(self, request: Request, booking_id: str) -> Response:
        booking = query_service().get_booking(booking_id, actor_for(request))
        return Response({"data": BookingSerializer(booking).data})

    def patch(self, request: Request, booking_id: str) -> Response:
        payload = BookingUpdateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        ticket_id = payload.validated_data.get("ticket_id")
        booking = reservation_service().update_booking(
            booking_id,
            actor_for(request),
            ticket_id=str(ticket_id) if ticket_id is not None else None,
            quantity=payload.validated_data.get("quantity"),
        )
        return Response(
            {"message": "Booking updated successfully", "data": BookingSerializer(booking).data}
        )

    def put(self, request: Request, booking_id: str) -> Response:
        return self.patch(request, booking_id)

    def delete(self, request: Request, booking_id: str) -> Response:
        reservation_service().cancel_booking(booking_id, actor_for(request))
        return Response({"message": "Booking cancelled successfully"})


class UpcomingBookingListView(APIView):
    """Handler for GET /api/bookings/upcoming"""

    def get(self, request: Request) -> Response:
        bookings = query_service().upcoming_bookings(actor_for(request))
        return _paginated(request, self, bookings)


class PastBookingListView(APIView):
    """Handler for GET /api/bookings/past"""

    def get(self, request: Request) -> Response:
        bookings = query_service().past_bookings(actor_for(request))
        return _paginated(request, self, bookings)


class BookingStatisticsView(APIView):
    """Handler for GET /api/bookings/statistics"""

    def get(self, request: Request) -> Response:
        stats = query_service().statistics(actor_for(request))
        return Response({"data": BookingStatisticsSerializer(stats).data})


class OnlineBookingView(APIView):
    """Handler for POST /api/bookings/online (public)"""

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        payload = OnlineBookingSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data
        booking = reservation_service().create_guest_booking(
            event_id=str(data["event_id"]),
            ticket_id=str(data["ticket_id"]),
            quantity=data["quantity"],
            email=data["user_info"]["email"],
            name=data["user_info"]["name"],
        )
        return Response(
            {
                "message": "Event booked successfully! Check your email for confirmation.",
                "data": BookingSerializer(booking).data,
            },
            status=status.HTTP_201_CREATED,
        )


class EventTicketListView(APIView):
    """Handler for GET /api/events/{event_id}/tickets"""

    def get(self, request: Request, event_id: str) -> Response:
        tickets = query_service().list_tickets(event_id)
        return Response({"data": TicketSerializer(tickets, many=True).data})


class EventBookingListView(APIView):
    """Handler for GET /api/events/{event_id}/bookings (admin only)"""

    def get(self, request: Request, event_id: str) -> Response:
        bookings, sales = query_service().event_bookings(event_id, actor_for(request))
        return Response(
            {
                "data": BookingSerializer(bookings, many=True).data,
                "sales": EventSalesSerializer(sales).data,
            }
        )


class HealthView(APIView):
    """Handler for GET /api/health"""

    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        return Response(
            {
                "status": "ok",
                "message": "Pearl Events API is running",
                "timestamp": timezone.now(),
            }
        )


def _paginated(request: Request, view: APIView, bookings) -> Response:
    paginator = BookingPagination()
    page = paginator.paginate_queryset(bookings, request, view=view)
    return paginator.get_paginated_response(BookingSerializer(page, many=True).data)
