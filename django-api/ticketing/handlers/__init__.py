from ticketing.handlers.views import (
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

__all__ = [
    "BookingDetailView",
    "BookingListView",
    "BookingStatisticsView",
    "EventBookingListView",
    "EventTicketListView",
    "HealthView",
    "OnlineBookingView",
    "PastBookingListView",
    "UpcomingBookingListView",
]
