"""Cascading deletion of an event across the asset store and the event store.

Files go first, rows last: a crash in between leaves stale rows that the next
sweep picks up again, never rows-gone-files-orphaned. Every step treats
"already gone" as success so a sweep and a direct delete can race safely.
"""

import logging
from dataclasses import dataclass, field

from events.domain import Event, EventId
from events.stores.interfaces import AssetStore, EventStore, Removal

logger = logging.getLogger(__name__)


@dataclass
class PurgeReport:
    """What one purge did. ``failures`` lists assets that could not be removed."""

    event_id: EventId
    files_removed: int = 0
    files_missing: int = 0
    failures: list[str] = field(default_factory=list)
    uploads_deleted: int = 0
    event_deleted: bool = False

    @property
    def clean(self) -> bool:
        return not self.failures

    def record(self, path: str, outcome: Removal) -> None:
        if outcome is Removal.REMOVED:
            self.files_removed += 1
        elif outcome is Removal.MISSING:
            self.files_missing += 1
        else:
            self.failures.append(path)


class EventPurger:
    """Removes an event's uploads, directory, QR image and rows, in that order."""

    def __init__(self, store: EventStore, assets: AssetStore) -> None:
        self._store = store
        self._assets = assets

    def purge(self, event: Event) -> PurgeReport:
        report = PurgeReport(event_id=event.id)

        for upload in self._store.list_uploads_for_event(event.id):
            report.record(upload.path, self._assets.remove_file(upload.path))

        report.record(f"events/{event.id}", self._assets.remove_event_directory(event.id))

        if event.qr_code:
            # Best effort; a leftover QR image is harmless.
            self._assets.remove_file(event.qr_code)

        report.uploads_deleted = self._store.delete_uploads_for_event(event.id)
        report.event_deleted = self._store.delete_event(event.id)

        if report.clean:
            logger.info(
                "Purged event %s (%s): %d files removed, %d uploads deleted",
                event.id,
                event.name,
                report.files_removed,
                report.uploads_deleted,
            )
        else:
            logger.warning(
                "Purged event %s (%s) with %d asset failures: %s",
                event.id,
                event.name,
                len(report.failures),
                ", ".join(report.failures),
            )
        return report
