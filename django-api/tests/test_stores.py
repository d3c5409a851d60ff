"""Tests for the Django ORM event store.

Run with: pytest tests/test_stores.py -v
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from events.domain import (
    EventChanges,
    EventCode,
    EventDraft,
    EventId,
    HostDraft,
    HostId,
    UploadDraft,
)
from events.domain.errors import (
    EventCodeConflictError,
    EventNotFoundError,
    HostConflictError,
    HostInUseError,
    HostNotFoundError,
)
from events.stores.django_store import DjangoEventStore

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store() -> DjangoEventStore:
    return DjangoEventStore(cache_timeout=60)


@pytest.fixture
def host(store):
    return store.create_host(HostDraft(username="maria", email="maria@example.com", max_events=2))


def draft_for(host, code="AB12CD34", expires_at=NOW + timedelta(days=14)) -> EventDraft:
    return EventDraft(
        host_id=host.id,
        code=EventCode(code),
        name="Wedding",
        description="",
        allow_view=True,
        allow_download=False,
        event_date=None,
        expires_at=expires_at,
    )


def upload_draft(event, name="a.jpg") -> UploadDraft:
    return UploadDraft(
        event_id=event.id,
        guest_name="Ana",
        stored_filename=f"{uuid4().hex}.jpg",
        original_filename=name,
        path=f"events/{event.id}/{name}",
        content_type="image/jpeg",
        size=10,
    )


@pytest.mark.django_db
class TestHosts:
    """Tests for host persistence."""

    def test_create_and_get_host(self, store, host):
        fetched = store.get_host(host.id)
        assert fetched == host
        assert fetched.max_events == 2
        assert fetched.expires_in_days == 14

    def test_duplicate_username_conflicts(self, store, host):
        with pytest.raises(HostConflictError):
            store.create_host(HostDraft(username="maria", email="other@example.com"))

    def test_delete_host_with_events_raises_in_use(self, store, host):
        store.create_event(draft_for(host))

        with pytest.raises(HostInUseError):
            store.delete_host(host.id)
        assert store.get_host(host.id) is not None

    def test_update_policy(self, store, host):
        updated = store.update_host_policy(host.id, None, None, 30)
        assert updated.max_events is None
        assert updated.expires_in_days == 30


@pytest.mark.django_db
class TestEvents:
    """Tests for event persistence."""

    def test_create_event_and_count(self, store, host):
        event = store.create_event(draft_for(host))

        assert store.count_events_for_host(host.id) == 1
        assert store.get_event(event.id) == event
        assert store.get_event_by_code(EventCode("AB12CD34")).id == event.id

    def test_event_for_missing_host_raises_not_found(self, store, host):
        missing = replace(host, id=HostId(uuid4()))

        with pytest.raises(HostNotFoundError):
            store.create_event(draft_for(missing))

    def test_duplicate_code_conflicts(self, store, host):
        store.create_event(draft_for(host))
        with pytest.raises(EventCodeConflictError):
            store.create_event(draft_for(host))
        assert store.count_events_for_host(host.id) == 1

    def test_update_event_keeps_expiry(self, store, host):
        event = store.create_event(draft_for(host))

        updated = store.update_event(event.id, EventChanges(name="Reception", allow_download=True))

        assert updated.name == "Reception"
        assert updated.allow_download is True
        assert updated.expires_at == event.expires_at

    def test_update_missing_event_returns_none(self, store):
        assert store.update_event(EventId(uuid4()), EventChanges(name="x")) is None

    def test_delete_event_reports_whether_row_existed(self, store, host):
        event = store.create_event(draft_for(host))
        assert store.delete_event(event.id) is True
        assert store.delete_event(event.id) is False

    def test_list_expired_is_strictly_before_now(self, store, host):
        past = store.create_event(draft_for(host, "PAST0001", NOW - timedelta(seconds=1)))
        store.create_event(draft_for(host, "EDGE0001", NOW))
        store.create_event(draft_for(host, "NONE0001", None))

        expired = store.list_expired(NOW)

        assert [event.id for event in expired] == [past.id]


@pytest.mark.django_db
class TestUploads:
    """Tests for upload persistence."""

    def test_create_and_list_uploads(self, store, host):
        event = store.create_event(draft_for(host))
        store.create_upload(upload_draft(event, "a.jpg"))
        store.create_upload(upload_draft(event, "b.jpg"))

        uploads = store.list_uploads_for_event(event.id)

        assert sorted(upload.original_filename for upload in uploads) == ["a.jpg", "b.jpg"]

    def test_upload_for_missing_event_raises_not_found(self, store, host):
        event = store.create_event(draft_for(host))
        store.delete_event(event.id)

        with pytest.raises(EventNotFoundError):
            store.create_upload(upload_draft(event))

    def test_delete_uploads_returns_count(self, store, host):
        event = store.create_event(draft_for(host))
        store.create_upload(upload_draft(event, "a.jpg"))
        store.create_upload(upload_draft(event, "b.jpg"))

        assert store.delete_uploads_for_event(event.id) == 2
        assert store.delete_uploads_for_event(event.id) == 0
