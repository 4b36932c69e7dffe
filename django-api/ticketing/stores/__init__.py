from ticketing.stores.django_store import DjangoBookingStore
from ticketing.stores.interfaces import BookingStore, StoreError
from ticketing.stores.memory_store import InMemoryBookingStore

__all__ = [
    "BookingStore",
    "StoreError",
    "DjangoBookingStore",
    "InMemoryBookingStore",
]
