from django.urls import path

from ticketing.handlers import (
    BookingDetailView,
    BookingListView,
    BookingStatisticsView,
    EventBookingListView,
    EventTicketListView,
    HealthView,
    OnlineBookingView,
    PastBookingListView,
    UpcomingBookingListView,
)

urlpatterns = [
    path("health", HealthView.as_view(), name="health"),
    path("bookings", BookingListView.as_view(), name="booking-list"),
    path("bookings/online", OnlineBookingView.as_view(), name="booking-online"),
    path("bookings/upcoming", UpcomingBookingListView.as_view(), name="booking-upcoming"),
    path("bookings/past", PastBookingListView.as_view(), name="booking-past"),
    path("bookings/statistics", BookingStatisticsView.as_view(), name="booking-statistics"),
    path("bookings/<str:booking_id>", BookingDetailView.as_view(), name="booking-detail"),
    path(
        "events/<str:event_id>/tickets",
        EventTicketListView.as_view(),
        name="event-ticket-list",
    ),
    path(
        "events/<str:event_id>/bookings",
        EventBookingListView.as_view(),
        name="event-booking-list",
    ),
]
