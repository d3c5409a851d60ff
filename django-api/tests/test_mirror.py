"""Tests for the remote mirror state machine.

Run with: pytest tests/test_mirror.py -v
"""

import threading
from uuid import uuid4

import pytest

from events.domain import EventId
from events.services import MirrorConfig, MirrorState, RemoteMirror
from events.services.mirror import SmbShareClient, remote_name
from tests.conftest import FakeShareClient

CONFIG = MirrorConfig(host="nas.local", username="photo", password="secret")


@pytest.fixture
def share() -> FakeShareClient:
    return FakeShareClient()


@pytest.fixture
def mirror(share):
    instance = RemoteMirror(CONFIG, share, timeout=2)
    yield instance
    instance.close()


@pytest.fixture
def local_file(tmp_path):
    path = tmp_path / "stored.jpg"
    path.write_bytes(b"photo")
    return path


class TestConfiguration:
    """Tests for building the mirror from settings."""

    def test_disabled_when_switched_off(self, settings):
        settings.MIRROR_ENABLED = False
        assert MirrorConfig.from_settings(settings) is None
        assert RemoteMirror.from_settings(settings).state is MirrorState.DISABLED

    def test_disabled_when_credentials_missing(self, settings):
        settings.MIRROR_ENABLED = True
        settings.MIRROR_HOST = "nas.local"
        settings.MIRROR_USERNAME = ""
        assert MirrorConfig.from_settings(settings) is None

    def test_reads_share_settings(self, settings):
        settings.MIRROR_ENABLED = True
        settings.MIRROR_HOST = "nas.local"
        settings.MIRROR_USERNAME = "photo"
        settings.MIRROR_PASSWORD = "secret"
        settings.MIRROR_SHARE = "media"
        settings.MIRROR_BASE_PATH = "events"
        settings.MIRROR_TIMEOUT_SECONDS = 5

        config = MirrorConfig.from_settings(settings)

        assert config.share == "media"
        assert config.base_path == "events"
        assert config.timeout == 5.0

    def test_unc_path_joins_host_share_and_path(self):
        client = SmbShareClient(MirrorConfig(host="nas", username="u", password="p", share="fotoapp"))
        assert client.unc("fotoapp/Party_1/a.jpg") == "\\\\nas\\fotoapp\\fotoapp\\Party_1\\a.jpg"


class TestSync:
    """Tests for RemoteMirror.sync."""

    def test_disabled_mirror_does_nothing(self, local_file):
        mirror = RemoteMirror(None)

        assert mirror.sync(EventId(uuid4()), "Party", local_file, "a.jpg") is False
        assert mirror.submit(EventId(uuid4()), "Party", local_file, "a.jpg") is None
        assert not mirror.enabled

    def test_successful_sync_mounts_once(self, mirror, share, local_file):
        event_id = EventId(uuid4())

        assert mirror.sync(event_id, "Party", local_file, "a.jpg") is True
        assert mirror.sync(event_id, "Party", local_file, "b.jpg") is True

        assert mirror.state is MirrorState.MOUNTED
        assert share.connect_calls == 1
        assert [remote for _, remote in share.uploads] == [
            f"fotoapp/Party_{event_id}/a.jpg",
            f"fotoapp/Party_{event_id}/b.jpg",
        ]

    def test_mount_failure_is_retried_on_next_call(self, mirror, share, local_file):
        share.fail_connect = True
        event_id = EventId(uuid4())

        assert mirror.sync(event_id, "Party", local_file, "a.jpg") is False
        assert mirror.state is MirrorState.UNMOUNTED
        assert share.connect_calls == 1

        share.fail_connect = False
        assert mirror.sync(event_id, "Party", local_file, "a.jpg") is True
        assert share.connect_calls == 2
        assert mirror.state is MirrorState.MOUNTED

    def test_transfer_failure_drops_the_mount(self, mirror, share, local_file):
        share.fail_upload = True

        assert mirror.sync(EventId(uuid4()), "Party", local_file, "a.jpg") is False
        assert mirror.state is MirrorState.UNMOUNTED

    def test_slow_share_times_out(self, share, local_file):
        share.upload_gate = threading.Event()
        mirror = RemoteMirror(CONFIG, share, timeout=0.05)
        try:
            assert mirror.sync(EventId(uuid4()), "Party", local_file, "a.jpg") is False
        finally:
            share.upload_gate.set()
            mirror.close()

    def test_concurrent_syncs_share_one_mount(self, mirror, share, local_file):
        share.connect_delay = 0.1
        event_id = EventId(uuid4())
        results = []
        threads = [
            threading.Thread(target=lambda n=n: results.append(mirror.sync(event_id, "Party", local_file, f"{n}.jpg")))
            for n in range(2)
        ]

        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(5)

        assert results == [True, True]
        assert share.connect_calls == 1

    def test_submit_runs_in_background(self, share, local_file):
        mirror = RemoteMirror(CONFIG, share, timeout=2)
        future = mirror.submit(EventId(uuid4()), "Party", local_file, "a.jpg")

        assert future.result(5) is True
        mirror.close()
        assert share.disconnect_calls == 1
        assert mirror.submit(EventId(uuid4()), "Party", local_file, "b.jpg") is None


class TestRemoteNames:
    """Tests for remote folder naming."""

    def test_folder_combines_base_name_and_id(self, mirror):
        event_id = EventId(uuid4())
        assert mirror.folder_for(event_id, "Summer Party") == f"fotoapp/Summer Party_{event_id}"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("a/b", "a_b"), ("what?", "what_"), ("  spaced . ", "spaced"), ("...", "_")],
    )
    def test_remote_name_replaces_unsafe_characters(self, raw, expected):
        assert remote_name(raw) == expected
