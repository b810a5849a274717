from django.apps import AppConfig


class EventsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"  # type: ignore
    name = "apps.events"
    verbose_name = "Events"

    def ready(self):
        """Import signals when the app is ready."""
        import apps.events.signals  # noqa
