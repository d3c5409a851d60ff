"""Pytest configuration and shared fixtures."""

import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from django.apps import apps
from rest_framework.test import APIClient

from events.services.container import build_container
from events.services.mirror import RemoteMirror
from events.stores.django_store import DjangoEventStore
from events.stores.filesystem import FileSystemAssetStore

START = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock handed to services in place of the wall clock."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeShareClient:
    """In-memory share client recording what would have been sent."""

    def __init__(self, fail_connect: bool = False, fail_upload: bool = False) -> None:
        self.fail_connect = fail_connect
        self.fail_upload = fail_upload
        self.connect_calls = 0
        self.disconnect_calls = 0
        self.folders: list[str] = []
        self.uploads: list[tuple[Path, str]] = []
        self.connect_delay = 0.0
        self.upload_gate: threading.Event | None = None
        self._lock = threading.Lock()

    def connect(self) -> None:
        with self._lock:
            self.connect_calls += 1
        if self.connect_delay:
            threading.Event().wait(self.connect_delay)
        if self.fail_connect:
            raise ConnectionError("share unreachable")

    def disconnect(self) -> None:
        self.disconnect_calls += 1

    def ensure_folder(self, remote_path: str) -> None:
        self.folders.append(remote_path)

    def upload(self, local_path: Path, remote_path: str) -> None:
        if self.upload_gate is not None:
            self.upload_gate.wait(5)
        if self.fail_upload:
            raise OSError("write failed")
        with self._lock:
            self.uploads.append((Path(local_path), remote_path))


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def assets(tmp_path) -> FileSystemAssetStore:
    store = FileSystemAssetStore(tmp_path / "uploads")
    store.ensure_layout()
    return store


@pytest.fixture
def container(settings, assets, clock, monkeypatch):
    """Service container wired to a temporary upload root and a fixed clock.

    Installed on the app config so views and commands pick it up.
    """
    settings.UPLOAD_ROOT = assets.root
    settings.FILE_UPLOAD_TEMP_DIR = str(assets.staging_dir)
    settings.TIME_ZONE = "UTC"
    settings.EVENT_QR_RENDERER = None
    settings.PUBLIC_BASE_URL = "https://photos.example.com"

    wired = build_container(
        settings,
        store=DjangoEventStore(),
        assets=assets,
        mirror=RemoteMirror(None),
        clock=clock,
    )
    monkeypatch.setattr(apps.get_app_config("events"), "container", wired)
    return wired


@pytest.fixture
def make_host(container):
    counter = iter(range(1, 1000))

    def factory(**policy):
        n = next(counter)
        return container.hosts.create_host(
            username=policy.pop("username", f"host{n}"),
            email=policy.pop("email", f"host{n}@example.com"),
            **policy,
        )

    return factory


@pytest.fixture
def staged_file(assets):
    """Write bytes into the staging area, as an HTTP upload would."""

    def factory(data: bytes = b"\x89PNG fake image", suffix: str = ".jpg") -> Path:
        return assets.stage([data], suffix=suffix)

    return factory
