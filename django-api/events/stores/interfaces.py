"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date, datetime
from enum import Enum
from pathlib import Path

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
)


class EventStore(ABC):
    """Interface for host, event and upload persistence."""

    @abstractmethod
    def create_host(self, draft: HostDraft) -> Host:
        """Persist a host. Raises HostConflictError on duplicate identity."""
        ...

    @abstractmethod
    def get_host(self, host_id: HostId) -> Host | None:
        """Return a host by ID, or None if not found."""
        ...

    @abstractmethod
    def list_hosts(self) -> list[Host]:
        """Return all hosts ordered by username."""
        ...

    @abstractmethod
    def update_host_policy(
        self,
        host_id: HostId,
        max_events: int | None,
        event_date: date | None,
        expires_in_days: int,
    ) -> Host | None:
        """Replace a host's event policy. Returns None if the host is gone."""
        ...

    @abstractmethod
    def delete_host(self, host_id: HostId) -> bool:
        """Delete a host that owns no events. Returns False if already gone.

        Raises HostInUseError if the host still owns events.
        """
        ...

    @abstractmethod
    def count_events_for_host(self, host_id: HostId) -> int:
        """Return how many events a host currently owns."""
        ...

    @abstractmethod
    def create_event(self, draft: EventDraft) -> Event:
        """Persist an event. Raises EventCodeConflictError if the code is taken."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def get_event_by_code(self, code: EventCode) -> Event | None:
        """Return an event by public code, or None. Expired events are returned."""
        ...

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events ordered by created_at descending."""
        ...

    @abstractmethod
    def list_events_for_host(self, host_id: HostId) -> list[Event]:
        """Return a host's events ordered by created_at descending."""
        ...

    @abstractmethod
    def update_event(self, event_id: EventId, changes: EventChanges) -> Event | None:
        """Apply mutable field changes. Returns None if the event is gone."""
        ...

    @abstractmethod
    def set_qr_code(self, event_id: EventId, reference: str) -> bool:
        """Record the stored QR image reference for an event."""
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> bool:
        """Delete an event and its uploads. Returns False if already gone."""
        ...

    @abstractmethod
    def list_expired(self, now: datetime) -> list[Event]:
        """Return events whose expires_at is set and earlier than ``now``."""
        ...

    @abstractmethod
    def create_upload(self, draft: UploadDraft) -> Upload:
        """Persist an upload record."""
        ...

    @abstractmethod
    def list_uploads_for_event(self, event_id: EventId) -> list[Upload]:
        """Return an event's uploads, newest first."""
        ...

    @abstractmethod
    def delete_uploads_for_event(self, event_id: EventId) -> int:
        """Delete an event's upload rows. Returns the number removed."""
        ...


class Removal(Enum):
    """Outcome of a single asset removal."""

    REMOVED = "removed"
    MISSING = "missing"
    FAILED = "failed"


class AssetStore(ABC):
    """Interface for on-disk event assets.

    Placement failures raise AssetIOError. Removals never raise; they
    report a Removal outcome so a cascade can carry on.
    """

    @property
    @abstractmethod
    def staging_dir(self) -> Path:
        """Directory in-flight uploads are written to before placement."""
        ...

    @abstractmethod
    def stage(self, chunks: Iterable[bytes], suffix: str = "") -> Path:
        """Write a byte stream into the staging area and return its path."""
        ...

    @abstractmethod
    def place_upload(
        self,
        event_id: EventId,
        source: Path,
        generated_filename: str,
        original_filename: str | None = None,
    ) -> str:
        """Move a staged file into the event's directory; return its stored path."""
        ...

    @abstractmethod
    def place_cover(
        self,
        event_id: EventId,
        source: Path,
        generated_filename: str,
        previous: str | None = None,
    ) -> str:
        """Move a staged cover image into place, removing ``previous``."""
        ...

    @abstractmethod
    def place_qr_image(self, code: EventCode, data: bytes) -> str:
        """Write a QR image for an event code; return its stored path."""
        ...

    @abstractmethod
    def resolve(self, stored_path: str) -> Path:
        """Return the absolute path of a stored asset."""
        ...

    @abstractmethod
    def remove_file(self, stored_path: str) -> Removal:
        """Remove one stored file."""
        ...

    @abstractmethod
    def remove_event_directory(self, event_id: EventId) -> Removal:
        """Recursively remove an event's directory."""
        ...
