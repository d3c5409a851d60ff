"""Django ORM implementation of the EventStore.

Every write goes through ``Model.save()`` or ``Model.delete()`` so the
cache-invalidation signals in events/signals.py always fire.
"""

from datetime import date, datetime

from django.conf import settings
from django.core.cache import cache
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from events import models
from events.domain import (
    Event,
    EventChanges,
    EventCode,
    EventDraft,
    EventId,
    Host,
    HostDraft,
    HostId,
    Upload,
    UploadDraft,
    UploadId,
)
from events.domain.errors import (
    EventCodeConflictError,
    EventNotFoundError,
    HostConflictError,
    HostInUseError,
    HostNotFoundError,
)
from events.stores.interfaces import EventStore


def event_code_cache_key(code: str) -> str:
    return f"events:code:{code}"


def _host_to_domain(row: models.Host) -> Host:
    return Host(
        id=HostId(row.id),
        username=row.username,
        email=row.email,
        max_events=row.max_events,
        event_date=row.event_date,
        expires_in_days=row.expires_in_days,
        created_at=row.created_at,
    )


def _event_to_domain(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        host_id=HostId(row.host_id),
        code=EventCode(row.code),
        name=row.name,
        description=row.description,
        allow_view=row.allow_view,
        allow_download=row.allow_download,
        cover_image=row.cover_image,
        qr_code=row.qr_code,
        event_date=row.event_date,
        expires_at=row.expires_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _upload_to_domain(row: models.Upload) -> Upload:
    return Upload(
        id=UploadId(row.id),
        event_id=EventId(row.event_id),
        guest_name=row.guest_name,
        stored_filename=row.stored_filename,
        original_filename=row.original_filename,
        path=row.path,
        content_type=row.content_type,
        size=row.size,
        created_at=row.created_at,
    )


class DjangoEventStore(EventStore):
    """Relational event store using Django ORM."""

    def __init__(self, cache_timeout: int | None = None) -> None:
        if cache_timeout is None:
            cache_timeout = getattr(settings, "EVENT_CACHE_TIMEOUT", 300)
        self._cache_timeout = cache_timeout

    # Hosts

    def create_host(self, draft: HostDraft) -> Host:
        try:
            with transaction.atomic():
                row = models.Host.objects.create(
                    username=draft.username,
                    email=draft.email,
                    max_events=draft.max_events,
                    event_date=draft.event_date,
                    expires_in_days=draft.expires_in_days,
                )
        except IntegrityError as exc:
            raise HostConflictError(draft.username) from exc
        return _host_to_domain(row)

    def get_host(self, host_id: HostId) -> Host | None:
        row = models.Host.objects.filter(id=host_id.value).first()
        return _host_to_domain(row) if row else None

    def list_hosts(self) -> list[Host]:
        return [_host_to_domain(row) for row in models.Host.objects.all()]

    def update_host_policy(
        self,
        host_id: HostId,
        max_events: int | None,
        event_date: date | None,
        expires_in_days: int,
    ) -> Host | None:
        row = models.Host.objects.filter(id=host_id.value).first()
        if row is None:
            return None
        row.max_events = max_events
        row.event_date = event_date
        row.expires_in_days = expires_in_days
        row.save(update_fields=["max_events", "event_date", "expires_in_days"])
        return _host_to_domain(row)

    def delete_host(self, host_id: HostId) -> bool:
        row = models.Host.objects.filter(id=host_id.value).first()
        if row is None:
            return False
        try:
            row.delete()
        except ProtectedError as exc:
            raise HostInUseError(str(host_id)) from exc
        return True

    # Events

    def count_events_for_host(self, host_id: HostId) -> int:
        return models.Event.objects.filter(host_id=host_id.value).count()

    def create_event(self, draft: EventDraft) -> Event:
        try:
            with transaction.atomic():
                host = models.Host.objects.filter(id=draft.host_id.value).first()
                if host is None:
                    raise HostNotFoundError(str(draft.host_id))
                row = models.Event.objects.create(
                    host=host,
                    code=draft.code.value,
                    name=draft.name,
                    description=draft.description,
                    allow_view=draft.allow_view,
                    allow_download=draft.allow_download,
                    event_date=draft.event_date,
                    expires_at=draft.expires_at,
                )
        except IntegrityError as exc:
            raise EventCodeConflictError(draft.code.value) from exc
        return _event_to_domain(row)

    def get_event(self, event_id: EventId) -> Event | None:
        row = models.Event.objects.filter(id=event_id.value).first()
        return _event_to_domain(row) if row else None

    def get_event_by_code(self, code: EventCode) -> Event | None:
        key = event_code_cache_key(code.value)
        cached = cache.get(key)
        if cached is not None:
            return cached

        row = models.Event.objects.filter(code=code.value).first()
        if row is None:
            return None
        event = _event_to_domain(row)
        cache.set(key, event, self._cache_timeout)
        return event

    def list_events(self) -> list[Event]:
        return [_event_to_domain(row) for row in models.Event.objects.all()]

    def list_events_for_host(self, host_id: HostId) -> list[Event]:
        rows = models.Event.objects.filter(host_id=host_id.value)
        return [_event_to_domain(row) for row in rows]

    def update_event(self, event_id: EventId, changes: EventChanges) -> Event | None:
        row = models.Event.objects.filter(id=event_id.value).first()
        if row is None:
            return None

        updated = []
        for field in ("name", "description", "allow_view", "allow_download", "cover_image"):
            value = getattr(changes, field)
            if value is not None:
                setattr(row, field, value)
                updated.append(field)
        if updated:
            row.save(update_fields=[*updated, "updated_at"])
        return _event_to_domain(row)

    def set_qr_code(self, event_id: EventId, reference: str) -> bool:
        row = models.Event.objects.filter(id=event_id.value).first()
        if row is None:
            return False
        row.qr_code = reference
        row.save(update_fields=["qr_code", "updated_at"])
        return True

    def delete_event(self, event_id: EventId) -> bool:
        deleted, _ = models.Event.objects.filter(id=event_id.value).delete()
        return deleted > 0

    def list_expired(self, now: datetime) -> list[Event]:
        rows = models.Event.objects.filter(
            expires_at__isnull=False,
            expires_at__lt=now,
        ).order_by("expires_at")
        return [_event_to_domain(row) for row in rows]

    # Uploads

    def create_upload(self, draft: UploadDraft) -> Upload:
        # Foreign keys are checked at commit, so a vanished event is caught here.
        try:
            with transaction.atomic():
                event = models.Event.objects.filter(id=draft.event_id.value).first()
                if event is None:
                    raise EventNotFoundError(str(draft.event_id))
                row = models.Upload.objects.create(
                    event=event,
                    guest_name=draft.guest_name,
                    stored_filename=draft.stored_filename,
                    original_filename=draft.original_filename,
                    path=draft.path,
                    content_type=draft.content_type,
                    size=draft.size,
                )
        except IntegrityError as exc:
            raise EventNotFoundError(str(draft.event_id)) from exc
        return _upload_to_domain(row)

    def list_uploads_for_event(self, event_id: EventId) -> list[Upload]:
        rows = models.Upload.objects.filter(event_id=event_id.value)
        return [_upload_to_domain(row) for row in rows]

    def delete_uploads_for_event(self, event_id: EventId) -> int:
        deleted, _ = models.Upload.objects.filter(event_id=event_id.value).delete()
        return deleted
