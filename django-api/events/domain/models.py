"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from events.domain.value_objects import EventCode, EventId, HostId, UploadId


@dataclass(frozen=True)
class Host:
    """Domain representation of a Host and its event policy."""

    id: HostId
    username: str
    email: str
    max_events: int | None
    event_date: date | None
    expires_in_days: int
    created_at: datetime


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    host_id: HostId
    code: EventCode
    name: str
    description: str
    allow_view: bool
    allow_download: bool
    cover_image: str | None
    qr_code: str | None
    event_date: date | None
    expires_at: datetime | None
    created_at: datetime
    updated_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now


@dataclass(frozen=True)
class Upload:
    """Domain representation of a guest Upload."""

    id: UploadId
    event_id: EventId
    guest_name: str
    stored_filename: str
    original_filename: str
    path: str
    content_type: str
    size: int
    created_at: datetime


# Write models: what callers hand to a store to create or change records.


@dataclass(frozen=True)
class HostDraft:
    username: str
    email: str
    max_events: int | None = None
    event_date: date | None = None
    expires_in_days: int = 14


@dataclass(frozen=True)
class EventDraft:
    host_id: HostId
    code: EventCode
    name: str
    description: str
    allow_view: bool
    allow_download: bool
    event_date: date | None
    expires_at: datetime | None


@dataclass(frozen=True)
class EventChanges:
    """Mutable event fields. ``None`` leaves a field unchanged."""

    name: str | None = None
    description: str | None = None
    allow_view: bool | None = None
    allow_download: bool | None = None
    cover_image: str | None = None


@dataclass(frozen=True)
class UploadDraft:
    event_id: EventId
    guest_name: str
    stored_filename: str
    original_filename: str
    path: str
    content_type: str
    size: int


@dataclass(frozen=True)
class IncomingFile:
    """A file sitting in the staging area, waiting to be placed."""

    temp_path: Path
    original_filename: str
    content_type: str
    size: int
