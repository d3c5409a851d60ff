"""Process-wide wiring of stores and services.

Built once in ``EventsConfig.ready()`` and read by views, admin actions and
management commands through the app config.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from django.utils.module_loading import import_string

from events.domain.expiry import utc_now
from events.services.cleanup import CleanupScheduler
from events.services.event_service import (
    DEFAULT_ALLOWED_EXTENSIONS,
    DEFAULT_MAX_UPLOAD_BYTES,
    EventService,
)
from events.services.host_service import HostService
from events.services.mirror import RemoteMirror
from events.services.purge import EventPurger
from events.stores.django_store import DjangoEventStore
from events.stores.filesystem import FileSystemAssetStore
from events.stores.interfaces import EventStore


@dataclass
class ServiceContainer:
    store: EventStore
    assets: FileSystemAssetStore
    mirror: RemoteMirror
    purger: EventPurger
    events: EventService
    hosts: HostService
    cleanup_interval: timedelta
    clock: Callable[[], datetime] = utc_now

    def cleanup_scheduler(
        self,
        *,
        interval: timedelta | None = None,
        after_sweep: Callable[[], None] | None = None,
    ) -> CleanupScheduler:
        return CleanupScheduler(
            self.store,
            self.purger,
            interval=interval or self.cleanup_interval,
            clock=self.clock,
            after_sweep=after_sweep,
        )


def build_container(
    settings,
    *,
    store: EventStore | None = None,
    assets: FileSystemAssetStore | None = None,
    mirror: RemoteMirror | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> ServiceContainer:
    store = store or DjangoEventStore()
    assets = assets or FileSystemAssetStore(settings.UPLOAD_ROOT)
    mirror = mirror or RemoteMirror.from_settings(settings)
    purger = EventPurger(store, assets)

    default_expiry_days = getattr(settings, "EVENT_DEFAULT_EXPIRY_DAYS", 14)
    renderer_path = getattr(settings, "EVENT_QR_RENDERER", None)

    events = EventService(
        store,
        assets,
        mirror,
        purger,
        default_expiry_days=default_expiry_days,
        tz=ZoneInfo(settings.TIME_ZONE),
        clock=clock,
        qr_renderer=import_string(renderer_path) if renderer_path else None,
        public_base_url=getattr(settings, "PUBLIC_BASE_URL", None),
        allowed_extensions=frozenset(
            getattr(settings, "UPLOAD_ALLOWED_EXTENSIONS", DEFAULT_ALLOWED_EXTENSIONS)
        ),
        max_upload_bytes=getattr(settings, "UPLOAD_MAX_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
    )
    hosts = HostService(store, purger, default_expiry_days=default_expiry_days)

    return ServiceContainer(
        store=store,
        assets=assets,
        mirror=mirror,
        purger=purger,
        events=events,
        hosts=hosts,
        cleanup_interval=timedelta(
            seconds=getattr(settings, "EVENT_CLEANUP_INTERVAL_SECONDS", 6 * 60 * 60)
        ),
        clock=clock,
    )
