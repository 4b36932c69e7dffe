from django.apps import AppConfig
from django.conf import settings


class TicketingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ticketing"
    verbose_name = "Ticketing"

    def ready(self) -> None:
        from config.logger_config import configure_logging

        configure_logging(settings.LOG_LEVEL)
