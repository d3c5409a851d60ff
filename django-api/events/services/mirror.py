"""Best-effort mirror of uploaded files to a remote SMB share.

The mirror is constructed once at process start and handed to whoever needs
it. It never raises into the upload path: every failure, including a slow or
unreachable share, is logged and reported as ``False``.

State machine::

    DISABLED                      no (complete) configuration
    UNMOUNTED -> MOUNTING -> MOUNTED
        ^           |           |
        +-----------+-----------+   mount or transfer failure

Each sync call makes at most one mount attempt; mount attempts are serialized.
"""

import logging
import re
import shutil
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

import smbclient

from events.domain import EventId
from events.domain.errors import MirrorError

logger = logging.getLogger(__name__)

_UNSAFE_REMOTE_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


class MirrorState(Enum):
    DISABLED = "disabled"
    UNMOUNTED = "unmounted"
    MOUNTING = "mounting"
    MOUNTED = "mounted"


@dataclass(frozen=True)
class MirrorConfig:
    """Connection parameters for the remote share."""

    host: str
    username: str
    password: str
    share: str = "fotoapp"
    base_path: str = "fotoapp"
    domain: str = ""
    port: int = 445
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings) -> "MirrorConfig | None":
        """Build a config from Django settings, or None when mirroring is off."""
        if not getattr(settings, "MIRROR_ENABLED", False):
            return None

        host = getattr(settings, "MIRROR_HOST", "")
        username = getattr(settings, "MIRROR_USERNAME", "")
        password = getattr(settings, "MIRROR_PASSWORD", "")
        if not (host and username and password):
            logger.warning("Remote mirror enabled but host, username or password is missing")
            return None

        return cls(
            host=host,
            username=username,
            password=password,
            share=getattr(settings, "MIRROR_SHARE", "fotoapp"),
            base_path=getattr(settings, "MIRROR_BASE_PATH", "fotoapp"),
            domain=getattr(settings, "MIRROR_DOMAIN", ""),
            timeout=float(getattr(settings, "MIRROR_TIMEOUT_SECONDS", 30)),
        )


class ShareClient(Protocol):
    def connect(self) -> None: ...

    def disconnect(self) -> None: ...

    def ensure_folder(self, remote_path: str) -> None: ...

    def upload(self, local_path: Path, remote_path: str) -> None: ...


class SmbShareClient:
    """Thin wrapper over ``smbclient`` bound to one share."""

    def __init__(self, config: MirrorConfig) -> None:
        self._config = config

    def unc(self, remote_path: str) -> str:
        parts = [part for part in re.split(r"[\\/]", remote_path) if part]
        return "\\\\" + "\\".join([self._config.host, self._config.share, *parts])

    def connect(self) -> None:
        username = self._config.username
        if self._config.domain:
            username = f"{self._config.domain}\\{username}"
        smbclient.register_session(
            self._config.host,
            username=username,
            password=self._config.password,
            port=self._config.port,
            connection_timeout=int(self._config.timeout),
        )

    def disconnect(self) -> None:
        smbclient.delete_session(self._config.host, port=self._config.port)

    def ensure_folder(self, remote_path: str) -> None:
        smbclient.makedirs(self.unc(remote_path), exist_ok=True)

    def upload(self, local_path: Path, remote_path: str) -> None:
        with open(local_path, "rb") as source:
            with smbclient.open_file(self.unc(remote_path), mode="wb") as target:
                shutil.copyfileobj(source, target)


def remote_name(value: str) -> str:
    cleaned = _UNSAFE_REMOTE_CHARS.sub("_", value).strip(" .")
    return cleaned or "_"


class RemoteMirror:
    """Copies uploaded files to the remote share, bounded in time."""

    def __init__(
        self,
        config: MirrorConfig | None,
        client: ShareClient | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        self._config = config
        self._mount_lock = threading.Lock()
        self._workers: ThreadPoolExecutor | None = None
        self._dispatcher: ThreadPoolExecutor | None = None

        if config is None:
            self._client = None
            self._state = MirrorState.DISABLED
            self._timeout = 0.0
            return

        self._client = client or SmbShareClient(config)
        self._state = MirrorState.UNMOUNTED
        self._timeout = timeout if timeout is not None else config.timeout
        self._workers = ThreadPoolExecutor(max_workers=2, thread_name_prefix="mirror")
        self._dispatcher = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mirror-dispatch")

    @classmethod
    def from_settings(cls, settings) -> "RemoteMirror":
        return cls(MirrorConfig.from_settings(settings))

    @property
    def enabled(self) -> bool:
        return self._state is not MirrorState.DISABLED

    @property
    def state(self) -> MirrorState:
        return self._state

    def folder_for(self, event_id: EventId, event_name: str) -> str:
        base = self._config.base_path.strip("/\\") if self._config else ""
        folder = f"{remote_name(event_name)}_{event_id}"
        return f"{base}/{folder}" if base else folder

    def sync(
        self,
        event_id: EventId,
        event_name: str,
        local_path: Path,
        display_name: str,
    ) -> bool:
        """Copy one file to the share. Returns True on success, never raises."""
        if not self.enabled:
            return False

        future = self._workers.submit(self._transfer, event_id, event_name, Path(local_path), display_name)
        try:
            future.result(timeout=self._timeout)
        except FutureTimeoutError:
            future.cancel()
            logger.warning(
                "Mirror sync of %s for event %s timed out after %.1fs",
                display_name,
                event_id,
                self._timeout,
            )
            return False
        except MirrorError as exc:
            logger.warning("Mirror sync of %s for event %s skipped: %s", display_name, event_id, exc.detail)
            return False
        except Exception:
            logger.warning("Mirror sync of %s for event %s failed", display_name, event_id, exc_info=True)
            return False
        return True

    def submit(
        self,
        event_id: EventId,
        event_name: str,
        local_path: Path,
        display_name: str,
    ) -> Future | None:
        """Schedule a sync in the background. Returns None when disabled."""
        if not self.enabled:
            return None
        try:
            return self._dispatcher.submit(self.sync, event_id, event_name, local_path, display_name)
        except RuntimeError:
            logger.warning("Mirror is shut down; %s for event %s not synced", display_name, event_id)
            return None

    def close(self) -> None:
        """Wait for scheduled syncs, then drop the remote session."""
        if not self.enabled:
            return
        self._dispatcher.shutdown(wait=True)
        self._workers.shutdown(wait=False, cancel_futures=True)
        with self._mount_lock:
            if self._state is MirrorState.MOUNTED:
                try:
                    self._client.disconnect()
                except Exception:
                    logger.warning("Could not close mirror session", exc_info=True)
                self._state = MirrorState.UNMOUNTED

    def _ensure_mounted(self) -> None:
        with self._mount_lock:
            if self._state is MirrorState.MOUNTED:
                return
            self._state = MirrorState.MOUNTING
            try:
                self._client.connect()
            except Exception as exc:
                self._state = MirrorState.UNMOUNTED
                raise MirrorError(f"mount of {self._config.host} failed: {exc}") from exc
            self._state = MirrorState.MOUNTED
            logger.info("Mounted mirror share %s on %s", self._config.share, self._config.host)

    def _mark_unmounted(self) -> None:
        with self._mount_lock:
            if self._state is MirrorState.MOUNTED:
                self._state = MirrorState.UNMOUNTED

    def _transfer(self, event_id: EventId, event_name: str, local_path: Path, display_name: str) -> None:
        self._ensure_mounted()

        folder = self.folder_for(event_id, event_name)
        remote_path = f"{folder}/{remote_name(display_name)}"
        try:
            self._client.ensure_folder(folder)
            self._client.upload(local_path, remote_path)
        except Exception:
            self._mark_unmounted()
            raise
        logger.info("Mirrored %s to %s", local_path.name, remote_path)
