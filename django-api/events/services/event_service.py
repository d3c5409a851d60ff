"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from uuid import uuid4

from events.domain import (
    Event,
    EventChanges,
    EventCode,
    EventDraft,
    EventId,
    HostId,
    IncomingFile,
    Upload,
    UploadDraft,
)
from events.domain.errors import (
    AssetIOError,
    EventCodeConflictError,
    EventExpiredError,
    EventNotFoundError,
    HostNotFoundError,
    InvalidEventIdError,
    InvalidHostIdError,
    QuotaExceededError,
    UploadRejectedError,
)
from events.domain.expiry import DEFAULT_EXPIRY_DAYS, compute_expiry, utc_now
from events.domain.filenames import check_display_name
from events.domain.quota import may_create
from events.services.mirror import RemoteMirror
from events.services.purge import EventPurger, PurgeReport
from events.stores.interfaces import AssetStore, EventStore

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_EXTENSIONS = frozenset(
    {".jpeg", ".jpg", ".png", ".gif", ".mp4", ".mov", ".avi", ".webm"}
)
DEFAULT_MAX_UPLOAD_BYTES = 500 * 1024 * 1024
CODE_ATTEMPTS = 5

QrRenderer = Callable[[str], bytes]


def parse_event_id(event_id: str | EventId) -> EventId:
    if isinstance(event_id, EventId):
        return event_id
    try:
        return EventId.from_string(str(event_id))
    except ValueError as exc:
        raise InvalidEventIdError() from exc


def parse_host_id(host_id: str | HostId) -> HostId:
    if isinstance(host_id, HostId):
        return host_id
    try:
        return HostId.from_string(str(host_id))
    except ValueError as exc:
        raise InvalidHostIdError() from exc


class EventService:
    """Service for event lifecycle operations."""

    def __init__(
        self,
        store: EventStore,
        assets: AssetStore,
        mirror: RemoteMirror,
        purger: EventPurger,
        *,
        default_expiry_days: int = DEFAULT_EXPIRY_DAYS,
        tz: tzinfo = timezone.utc,
        clock: Callable[[], datetime] = utc_now,
        qr_renderer: QrRenderer | None = None,
        public_base_url: str | None = None,
        allowed_extensions: frozenset[str] = DEFAULT_ALLOWED_EXTENSIONS,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        code_factory: Callable[[], EventCode] = EventCode.generate,
    ) -> None:
        self._store = store
        self._assets = assets
        self._mirror = mirror
        self._purger = purger
        self._default_expiry_days = default_expiry_days
        self._tz = tz
        self._clock = clock
        self._qr_renderer = qr_renderer
        self._public_base_url = public_base_url
        self._allowed_extensions = frozenset(ext.lower() for ext in allowed_extensions)
        self._max_upload_bytes = max_upload_bytes
        self._code_factory = code_factory

    # Events

    def create_event(
        self,
        host_id: str | HostId,
        name: str,
        description: str = "",
        allow_view: bool = True,
        allow_download: bool = False,
        public_base_url: str | None = None,
    ) -> Event:
        """Create an event for a host, within the host's quota.

        The expiry is fixed here from the host's policy and never recomputed.

        Raises:
            InvalidHostIdError: If the host_id is not a valid UUID.
            HostNotFoundError: If the host does not exist.
            QuotaExceededError: If the host already owns its maximum of events.
            EventCodeConflictError: If no free event code was found.
        """
        name = name.strip()
        if not name:
            raise ValueError("Event name is required")

        host_id = parse_host_id(host_id)
        host = self._store.get_host(host_id)
        if host is None:
            raise HostNotFoundError(str(host_id))

        decision = may_create(host.max_events, self._store.count_events_for_host(host_id))
        if not decision.allowed:
            raise QuotaExceededError(decision.limit)

        expires_at = compute_expiry(
            host.event_date,
            host.expires_in_days or self._default_expiry_days,
            tz=self._tz,
            clock=self._clock,
        )

        event = self._insert_with_fresh_code(
            host_id=host_id,
            name=name,
            description=description,
            allow_view=allow_view,
            allow_download=allow_download,
            event_date=host.event_date,
            expires_at=expires_at,
        )
        logger.info("Created event %s (%s) for host %s, expires %s", event.id, event.code, host_id, expires_at)

        return self._attach_qr_image(event, public_base_url or self._public_base_url)

    def get_event(self, event_id: str | EventId) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event_id = parse_event_id(event_id)
        event = self._store.get_event(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    def get_event_by_code(self, code: str, *, allow_expired: bool = False) -> Event:
        """Return an event by its public code.

        Raises:
            EventNotFoundError: If no event has this code.
            EventExpiredError: If the event is past its expiry and
                ``allow_expired`` is false.
        """
        try:
            event_code = EventCode.normalize(code)
        except ValueError as exc:
            raise EventNotFoundError(code) from exc

        event = self._store.get_event_by_code(event_code)
        if event is None:
            raise EventNotFoundError(code)
        if not allow_expired and event.is_expired(self._clock()):
            raise EventExpiredError(event_code.value)
        return event

    def list_events(self) -> list[Event]:
        return self._store.list_events()

    def list_events_for_host(self, host_id: str | HostId) -> list[Event]:
        host_id = parse_host_id(host_id)
        if self._store.get_host(host_id) is None:
            raise HostNotFoundError(str(host_id))
        return self._store.list_events_for_host(host_id)

    def update_event(self, event_id: str | EventId, changes: EventChanges) -> Event:
        """Change name, description, visibility or cover. Expiry is immutable."""
        event_id = parse_event_id(event_id)
        if changes.name is not None and not changes.name.strip():
            raise ValueError("Event name cannot be blank")
        event = self._store.update_event(event_id, changes)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    def delete_event(self, event_id: str | EventId) -> PurgeReport:
        """Delete an event with its files and uploads.

        Only a missing event at the start is an error; anything that vanishes
        while the purge runs counts as already deleted.
        """
        event = self.get_event(event_id)
        return self._purger.purge(event)

    def replace_cover(self, event_id: str | EventId, temp_path: Path, original_filename: str) -> Event:
        event = self.get_event(event_id)
        extension = self._check_extension(original_filename)

        reference = self._assets.place_cover(
            event.id,
            temp_path,
            uuid4().hex + extension,
            previous=event.cover_image,
        )
        updated = self._store.update_event(event.id, EventChanges(cover_image=reference))
        if updated is None:
            self._assets.remove_file(reference)
            raise EventNotFoundError(str(event.id))
        return updated

    # Uploads

    def record_uploads(self, code: str, guest_name: str, files: Sequence[IncomingFile]) -> list[Upload]:
        """Store guest files for an open event and record them.

        All files are validated before any of them is moved. A file counts
        as uploaded once it is placed and recorded; mirroring happens later
        in the background and cannot fail the upload.

        Raises:
            EventNotFoundError: If no event has this code.
            EventExpiredError: If the event has expired.
            UploadRejectedError: If a file's type or size is not accepted.
            InvalidFilenameError: If a file name carries path traversal.
            AssetIOError: If a file could not be stored.
        """
        guest_name = guest_name.strip()
        if not guest_name:
            raise ValueError("Guest name is required")
        if not files:
            raise ValueError("At least one file is required")

        event = self.get_event_by_code(code)
        extensions = [self._check_incoming(incoming) for incoming in files]

        uploads = []
        for incoming, extension in zip(files, extensions):
            uploads.append(self._store_one(event, guest_name, incoming, extension))
        logger.info("Recorded %d upload(s) from %s for event %s", len(uploads), guest_name, event.id)
        return uploads

    def list_uploads(self, event_id: str | EventId) -> list[Upload]:
        event = self.get_event(event_id)
        return self._store.list_uploads_for_event(event.id)

    def _store_one(self, event: Event, guest_name: str, incoming: IncomingFile, extension: str) -> Upload:
        stored_filename = uuid4().hex + extension
        path = self._assets.place_upload(
            event.id,
            incoming.temp_path,
            stored_filename,
            incoming.original_filename,
        )
        local_path = self._assets.resolve(path)

        size = incoming.size
        if not size:
            try:
                size = local_path.stat().st_size
            except OSError as exc:
                raise AssetIOError("stat", path) from exc

        try:
            upload = self._store.create_upload(
                UploadDraft(
                    event_id=event.id,
                    guest_name=guest_name,
                    stored_filename=stored_filename,
                    original_filename=incoming.original_filename,
                    path=path,
                    content_type=incoming.content_type,
                    size=size,
                )
            )
        except Exception:
            self._assets.remove_file(path)
            raise

        self._mirror.submit(event.id, event.name, local_path, incoming.original_filename)
        return upload

    def _check_incoming(self, incoming: IncomingFile) -> str:
        extension = self._check_extension(incoming.original_filename)
        major = incoming.content_type.split("/", 1)[0].lower()
        if major not in ("image", "video"):
            raise UploadRejectedError("Only image and video files are allowed")
        if incoming.size > self._max_upload_bytes:
            raise UploadRejectedError("File exceeds the maximum upload size")
        return extension

    def _check_extension(self, original_filename: str) -> str:
        check_display_name(original_filename)
        extension = Path(original_filename).suffix.lower()
        if extension not in self._allowed_extensions:
            raise UploadRejectedError("Only image and video files are allowed")
        return extension

    # Creation helpers

    def _insert_with_fresh_code(self, **fields) -> Event:
        last_error = None
        for _ in range(CODE_ATTEMPTS):
            code = self._code_factory()
            try:
                return self._store.create_event(EventDraft(code=code, **fields))
            except EventCodeConflictError as exc:
                logger.info("Event code %s already taken, generating another", code)
                last_error = exc
        raise last_error

    def _attach_qr_image(self, event: Event, base_url: str | None) -> Event:
        if self._qr_renderer is None:
            return event

        payload = f"{(base_url or '').rstrip('/')}/event/{event.code}"
        try:
            reference = self._assets.place_qr_image(event.code, self._qr_renderer(payload))
        except Exception:
            logger.exception("Could not create QR image for event %s", event.id)
            return event

        if not self._store.set_qr_code(event.id, reference):
            self._assets.remove_file(reference)
            return event
        return self._store.get_event(event.id) or event
