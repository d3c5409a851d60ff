"""Filesystem implementation of the AssetStore.

Layout under the upload root::

    events/<event_id>/<generated_filename>        guest uploads
    events/<event_id>/cover-<generated_filename>  cover image
    events/temp/                                  staging area
    qrcodes/qr-<event_code>.png                   QR images

Stored paths are POSIX paths relative to the root.
"""

import logging
import os
import shutil
import tempfile
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from events.domain import EventCode, EventId
from events.domain.errors import AssetIOError, InvalidFilenameError
from events.domain.filenames import check_display_name, check_filename
from events.stores.interfaces import AssetStore, Removal

logger = logging.getLogger(__name__)

EVENTS_DIR = "events"
STAGING_DIR = "temp"
QRCODES_DIR = "qrcodes"
COVER_PREFIX = "cover-"


class FileSystemAssetStore(AssetStore):
    """Stores event assets below a single root directory."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def staging_dir(self) -> Path:
        return self._root / EVENTS_DIR / STAGING_DIR

    def ensure_layout(self) -> None:
        for directory in (self.staging_dir, self._root / QRCODES_DIR):
            directory.mkdir(parents=True, exist_ok=True)

    def stage(self, chunks: Iterable[bytes], suffix: str = "") -> Path:
        self.staging_dir.mkdir(parents=True, exist_ok=True)
        try:
            with tempfile.NamedTemporaryFile(
                dir=self.staging_dir, suffix=suffix, delete=False
            ) as handle:
                for chunk in chunks:
                    handle.write(chunk)
        except OSError as exc:
            raise AssetIOError("stage", str(self.staging_dir)) from exc
        return Path(handle.name)

    def place_upload(
        self,
        event_id: EventId,
        source: Path,
        generated_filename: str,
        original_filename: str | None = None,
    ) -> str:
        check_filename(generated_filename)
        if original_filename is not None:
            check_display_name(original_filename)

        stored = PurePosixPath(EVENTS_DIR, str(event_id), generated_filename)
        self._move_into_place(Path(source), stored)
        return str(stored)

    def place_cover(
        self,
        event_id: EventId,
        source: Path,
        generated_filename: str,
        previous: str | None = None,
    ) -> str:
        check_filename(generated_filename)

        stored = PurePosixPath(EVENTS_DIR, str(event_id), COVER_PREFIX + generated_filename)
        self._move_into_place(Path(source), stored)

        if previous and previous != str(stored):
            if self.remove_file(previous) is Removal.FAILED:
                logger.warning("Previous cover %s of event %s was not removed", previous, event_id)
        return str(stored)

    def place_qr_image(self, code: EventCode, data: bytes) -> str:
        stored = PurePosixPath(QRCODES_DIR, f"qr-{code.value}.png")
        target = self.resolve(str(stored))
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(dir=target.parent, delete=False) as handle:
                handle.write(data)
            os.replace(handle.name, target)
        except OSError as exc:
            raise AssetIOError("place_qr_image", str(stored)) from exc
        return str(stored)

    def resolve(self, stored_path: str) -> Path:
        relative = stored_path.lstrip("/")
        if relative.startswith("uploads/"):
            relative = relative[len("uploads/"):]
        candidate = (self._root / relative).resolve()
        if candidate == self._root or not candidate.is_relative_to(self._root):
            raise InvalidFilenameError(stored_path)
        return candidate

    def event_directory(self, event_id: EventId) -> Path:
        return self._root / EVENTS_DIR / str(event_id)

    def remove_file(self, stored_path: str) -> Removal:
        try:
            target = self.resolve(stored_path)
        except InvalidFilenameError:
            logger.warning("Refusing to remove %s: outside the upload root", stored_path)
            return Removal.FAILED

        try:
            target.unlink()
        except FileNotFoundError:
            logger.debug("File %s already gone", stored_path)
            return Removal.MISSING
        except OSError as exc:
            logger.warning("Could not remove file %s: %s", stored_path, exc)
            return Removal.FAILED
        logger.info("Removed file %s", stored_path)
        return Removal.REMOVED

    def remove_event_directory(self, event_id: EventId) -> Removal:
        directory = self.event_directory(event_id)
        try:
            shutil.rmtree(directory)
        except FileNotFoundError:
            return Removal.MISSING
        except OSError as exc:
            logger.warning("Could not remove directory of event %s: %s", event_id, exc)
            return Removal.FAILED
        logger.info("Removed directory of event %s", event_id)
        return Removal.REMOVED

    def _move_into_place(self, source: Path, stored: PurePosixPath) -> None:
        target = self.resolve(str(stored))
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            os.replace(source, target)
        except OSError as exc:
            raise AssetIOError("move", str(stored)) from exc
