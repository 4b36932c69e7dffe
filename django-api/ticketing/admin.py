from django.contrib import admin

from ticketing.models import Booking, Event, Ticket


class TicketInline(admin.TabularInline):
    model = Ticket
    extra = 1


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "location", "date", "created_at"]
    list_filter = ["date"]
    search_fields = ["name", "description", "location"]
    inlines = [TicketInline]

    def save_model(self, request, obj, form, change):
        if obj.user_id is None:
            obj.user = request.user
        super().save_model(request, obj, form, change)


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ["type", "event", "price", "quantity", "tickets_sold", "available_tickets"]
    list_filter = ["event"]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Read-only: bookings change inventory and must go through the reservation service."""

    list_display = ["id", "user", "event", "ticket", "quantity", "status", "created_at"]
    list_filter = ["status", "event"]
    search_fields = ["user__email", "user__username"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
