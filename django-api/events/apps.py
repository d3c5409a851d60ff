from django.apps import AppConfig
from django.conf import settings


class EventsConfig(AppConfig):
    name = "events"

    def ready(self) -> None:
        from events import signals  # noqa: F401
        from events.services.container import build_container

        self.container = build_container(settings)
        self.container.assets.ensure_layout()
