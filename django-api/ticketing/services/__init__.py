from ticketing.services.booking_queries import BookingQueryService
from ticketing.services.reservation_service import ReservationService

__all__ = ["BookingQueryService", "ReservationService"]
